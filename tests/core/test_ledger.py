import numpy as np
import pandas as pd
import pytest

from pagoo.core.errors import DuplicateKeyError, MissingColumnError, ShapeMismatchError
from pagoo.core.ledger import GeneLedger, make_gid


@pytest.fixture
def small_genes():
    return pd.DataFrame(
        {
            "gene": ["g1", "g2", "g1", "g2", "g1"],
            "org": ["A", "A", "B", "B", "C"],
            "group": ["OG1", "OG2", "OG1", "OG3", "OG1"],
            "length": [300, 450, 303, 120, 297],
        }
    )


def test_aliases_are_accepted(small_genes):
    ledger = GeneLedger(small_genes)

    assert list(ledger.genes.columns) == ["gid", "gene", "organism", "cluster", "length"]
    assert ledger.organism_registry.names == ["A", "B", "C"]
    assert ledger.cluster_registry.names == ["OG1", "OG2", "OG3"]


def test_gene_ids_use_separator(small_genes):
    ledger = GeneLedger(small_genes, sep="|")

    assert ledger.genes["gid"].tolist() == ["A|g1", "A|g2", "B|g1", "B|g2", "C|g1"]


def test_make_gid():
    gid = make_gid(["A", "B"], ["g1", "g7"])

    assert gid.tolist() == ["A__g1", "B__g7"]


def test_missing_column(small_genes):
    with pytest.raises(MissingColumnError, match="cluster"):
        GeneLedger(small_genes.drop(columns=["group"]))


def test_null_in_required_column(small_genes):
    small_genes.loc[2, "org"] = None

    with pytest.raises(MissingColumnError, match="missing values"):
        GeneLedger(small_genes)


def test_reserved_gid_column(small_genes):
    with pytest.raises(MissingColumnError, match="reserved"):
        GeneLedger(small_genes.assign(gid="x"))


def test_duplicate_gene_ids(small_genes):
    duplicated = pd.concat([small_genes, small_genes.iloc[[0]]], ignore_index=True)

    with pytest.raises(DuplicateKeyError, match="A__g1"):
        GeneLedger(duplicated)


def test_codes_link_genes_to_registries(small_genes):
    ledger = GeneLedger(small_genes)

    np.testing.assert_array_equal(ledger.org_codes, [1, 1, 2, 2, 3])
    np.testing.assert_array_equal(ledger.cluster_codes, [1, 2, 1, 3, 1])
    assert not ledger.org_codes.flags.writeable
    assert not ledger.cluster_codes.flags.writeable


def test_tables_are_copies(small_genes):
    ledger = GeneLedger(small_genes)

    ledger.genes.loc[0, "gene"] = "changed"
    ledger.organisms.loc[1, "organism"] = "changed"

    assert ledger.genes.loc[0, "gene"] == "g1"
    assert ledger.organisms.loc[1, "organism"] == "A"


def test_slice_by_organism_and_cluster(small_genes):
    ledger = GeneLedger(small_genes)

    sliced = ledger.slice(org_ids=[1, 3], cluster_ids=[1])

    assert sliced["gid"].tolist() == ["A__g1", "C__g1"]


def test_organism_metadata_left_join(small_genes):
    ledger = GeneLedger(small_genes)
    meta = pd.DataFrame({"organism": ["B", "A", "Z"], "host": ["pig", "cow", "fox"]})

    ledger.add_metadata("organism", meta)

    organisms = ledger.organisms
    assert organisms.index.name == "org_id"
    assert organisms["host"].tolist()[:2] == ["cow", "pig"]
    assert pd.isna(organisms.loc[3, "host"])
    assert "fox" not in organisms["host"].tolist()


def test_cluster_metadata_from_constructor(small_genes):
    meta = pd.DataFrame({"group": ["OG1", "OG3"], "function": ["ribosome", "transport"]})

    ledger = GeneLedger(small_genes, cluster_meta=meta)

    assert ledger.clusters["function"].tolist()[0] == "ribosome"
    assert pd.isna(ledger.clusters.loc[2, "function"])


def test_gene_metadata_keyed_by_gid(small_genes):
    ledger = GeneLedger(small_genes)
    meta = pd.DataFrame({"gid": ["B__g2"], "product": ["porin"]})

    ledger.add_metadata("gene", meta)

    genes = ledger.genes.set_index("gid")
    assert genes.loc["B__g2", "product"] == "porin"
    assert genes["product"].isna().sum() == 4


def test_metadata_without_key_column(small_genes):
    ledger = GeneLedger(small_genes)

    with pytest.raises(ShapeMismatchError, match="no 'organism' column"):
        ledger.add_metadata("organism", pd.DataFrame({"name": ["A"], "host": ["cow"]}))


def test_metadata_with_duplicated_keys(small_genes):
    ledger = GeneLedger(small_genes)
    meta = pd.DataFrame({"organism": ["A", "A"], "host": ["cow", "pig"]})

    with pytest.raises(ShapeMismatchError, match="Ambiguous"):
        ledger.add_metadata("organism", meta)


def test_metadata_column_clash(small_genes):
    ledger = GeneLedger(small_genes)

    with pytest.raises(ShapeMismatchError, match="length"):
        ledger.add_metadata("gene", pd.DataFrame({"gid": ["A__g1"], "length": [1]}))


def test_unknown_metadata_target(small_genes):
    ledger = GeneLedger(small_genes)

    with pytest.raises(ValueError, match="Unknown metadata target"):
        ledger.add_metadata("plasmid", pd.DataFrame({"plasmid": ["p1"]}))
