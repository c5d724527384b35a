import pandas as pd
import pytest

from pagoo import Pangenome

# cluster -> organisms carrying it; organism A has two genes in OG4
PRESENCE = {
    "OG1": "ABCDE",
    "OG2": "ABCD",
    "OG3": "ABC",
    "OG4": "AB",
    "OG5": "CD",
    "OG6": "DE",
    "OG7": "A",
    "OG8": "E",
    "OG9": "BE",
    "OG10": "ACE",
}
PARALOGS = {("A", "OG4"): 2}


def make_genes(presence=PRESENCE, paralogs=PARALOGS) -> pd.DataFrame:
    rows, counter = [], {}
    for cluster, orgs in presence.items():
        for org in orgs:
            for _ in range(paralogs.get((org, cluster), 1)):
                counter[org] = counter.get(org, 0) + 1
                rows.append({"gene": f"g{counter[org]}", "organism": org, "cluster": cluster})
    return pd.DataFrame(rows)


def make_sequences(genes: pd.DataFrame) -> dict:
    sequences = {}
    for i, row in enumerate(genes.itertuples(index=False)):
        sequences.setdefault(row.organism, {})[row.gene] = "ATG" + "ACGT"[i % 4] * (i + 1)
    return sequences


@pytest.fixture
def genes_df():
    return make_genes()


@pytest.fixture
def pangenome(genes_df):
    return Pangenome(genes_df)


@pytest.fixture
def sequences(genes_df):
    return make_sequences(genes_df)
