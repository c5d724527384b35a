"""Command-line interface."""

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pagoo.core.config import DEFAULT_CORE_LEVEL, DEFAULT_SEPARATOR
from pagoo.core.errors import PagooError

app = typer.Typer(help="PAGOO: Pangenome analysis with organism masking")
console = Console()


def read_table(path: Path) -> pd.DataFrame:
    """Read a CSV or TSV table, keeping every column as text."""
    path = Path(path)
    if path.suffix == ".csv":
        return pd.read_csv(path, dtype=str)
    elif path.suffix in [".tsv", ".txt"]:
        return pd.read_csv(path, sep="\t", dtype=str)
    raise ValueError(f"Unsupported file format: {path.suffix}")


@app.command()
def version():
    """Show PAGOO version."""
    from pagoo import __version__
    console.print(f"PAGOO version {__version__}")


@app.command()
def summary(
    genes: Path = typer.Argument(..., exists=True, dir_okay=False, help="Gene table (gene, organism, cluster)"),
    org_meta: Optional[Path] = typer.Option(None, "--org-meta", help="Organism metadata table"),
    cluster_meta: Optional[Path] = typer.Option(None, "--cluster-meta", help="Cluster metadata table"),
    sep: str = typer.Option(DEFAULT_SEPARATOR, "--sep", help="Separator for gene identifiers"),
    core_level: float = typer.Option(DEFAULT_CORE_LEVEL, "--core-level", help="Core threshold (percent)"),
    drop: Optional[List[str]] = typer.Option(None, "--drop", help="Organism to drop (repeatable)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress logs"),
):
    """Print the core/shell/cloud summary of a pangenome."""
    from pagoo.core.pangenome import Pangenome

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )

    try:
        pg = Pangenome(
            read_table(genes),
            org_meta=read_table(org_meta) if org_meta else None,
            cluster_meta=read_table(cluster_meta) if cluster_meta else None,
            sep=sep,
            core_level=core_level,
        )
        for organism in drop or []:
            pg.drop(organism)
    except (PagooError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    table = Table(title="Pangenome Summary")
    table.add_column("Category", style="cyan")
    table.add_column("Number", style="green", justify="right")
    for row in pg.summary_stats.itertuples(index=False):
        table.add_row(str(row.Category), str(row.Number))

    console.print(f"{len(pg.organisms)} organisms ({len(pg.dropped)} dropped), core_level={pg.core_level:g}")
    console.print(table)


if __name__ == "__main__":
    app()
