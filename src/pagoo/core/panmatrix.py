"""Organism x cluster abundance matrix built from the gene ledger."""

from typing import Iterable

import numpy as np
import pandas as pd

from pagoo.core.ledger import GeneLedger


def build_panmatrix(ledger: GeneLedger, active_org_ids: Iterable[int]) -> pd.DataFrame:
    """
    Count genes per (organism, cluster) pair.

    Linear in the number of genes. Cells greater than 1 indicate
    in-paralogues.

    Args:
        ledger: Gene ledger
        active_org_ids: Organism ids to include, in row order

    Returns:
        DataFrame (n_active × n_clusters) of non-negative integers, rows
        labelled by organism name, columns by cluster name in registry order
    """
    active = np.fromiter(active_org_ids, dtype=np.int64)
    n_clusters = len(ledger.cluster_registry)

    row_of = np.full(len(ledger.organism_registry) + 1, -1, dtype=np.int64)
    row_of[active] = np.arange(len(active))
    rows = row_of[ledger.org_codes]
    keep = rows >= 0

    flat = rows[keep] * n_clusters + (ledger.cluster_codes[keep] - 1)
    counts = np.bincount(flat, minlength=len(active) * n_clusters)
    counts = counts.reshape(len(active), n_clusters)

    return pd.DataFrame(
        counts,
        index=pd.Index(
            [ledger.organism_registry.name_of(i) for i in active],
            name="organism",
            dtype=object,
        ),
        columns=pd.Index(ledger.cluster_registry.names, name="cluster", dtype=object),
    )


def to_binary(pan_matrix: pd.DataFrame) -> pd.DataFrame:
    """Presence/absence (0/1) version of an abundance panmatrix."""
    return (pan_matrix > 0).astype(int)
