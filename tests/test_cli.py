import pytest
from typer.testing import CliRunner

from pagoo import __version__
from pagoo.cli import app

runner = CliRunner()


@pytest.fixture
def genes_csv(tmp_path, genes_df):
    path = tmp_path / "genes.csv"
    genes_df.to_csv(path, index=False)
    return path


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_summary(genes_csv):
    result = runner.invoke(app, ["summary", str(genes_csv)])

    assert result.exit_code == 0
    assert "5 organisms (0 dropped)" in result.stdout
    assert "Core" in result.stdout
    assert "Cloud" in result.stdout


def test_summary_with_drops_and_tsv(tmp_path, genes_df):
    path = tmp_path / "genes.tsv"
    genes_df.to_csv(path, sep="\t", index=False)

    result = runner.invoke(app, ["summary", str(path), "--drop", "E", "--drop", "D"])

    assert result.exit_code == 0
    assert "3 organisms (2 dropped)" in result.stdout


def test_summary_with_org_metadata(tmp_path, genes_csv):
    meta = tmp_path / "orgs.csv"
    meta.write_text("organism,host\nA,cow\nB,pig\n")

    result = runner.invoke(app, ["summary", str(genes_csv), "--org-meta", str(meta)])

    assert result.exit_code == 0


def test_summary_reports_errors(tmp_path, genes_df):
    path = tmp_path / "genes.csv"
    genes_df.drop(columns=["cluster"]).to_csv(path, index=False)

    result = runner.invoke(app, ["summary", str(path)])

    assert result.exit_code == 1
    assert "Missing required column" in result.stdout


def test_summary_unknown_organism(genes_csv):
    result = runner.invoke(app, ["summary", str(genes_csv), "--drop", "Z"])

    assert result.exit_code == 1
    assert "Unknown organism" in result.stdout


def test_summary_invalid_core_level(genes_csv):
    result = runner.invoke(app, ["summary", str(genes_csv), "--core-level", "120"])

    assert result.exit_code == 1
    assert "core_level" in result.stdout


def test_unsupported_format(tmp_path):
    path = tmp_path / "genes.json"
    path.write_text("{}")

    result = runner.invoke(app, ["summary", str(path)])

    assert result.exit_code == 1
    assert "Unsupported file format" in result.stdout
