"""Rarefaction of pangenome and coregenome sizes over random genome orderings."""

from typing import Literal, Optional

import numpy as np
import pandas as pd

from pagoo.core.panmatrix import to_binary


def rarefact(
    pangenome,
    what: Literal["pangenome", "coregenome"] = "pangenome",
    n_perm: int = 10,
    seed: Optional[int] = None,
) -> pd.DataFrame:
    """
    Rarefaction curves for the pangenome or the coregenome.

    For each permutation the active genomes are shuffled and added one
    at a time; after i genomes the pangenome size is the number of
    clusters seen at least once, the coregenome size the number of
    clusters present in all i genomes.

    Args:
        pangenome: Pangenome (read through its current mask)
        what: "pangenome" or "coregenome"
        n_perm: Number of random permutations
        seed: Seed for the permutation generator

    Returns:
        DataFrame, rows = number of genomes (1..n), columns permut_1..permut_n

    Example:
        >>> raref = rarefact(pg, what="pangenome", n_perm=20, seed=1)
        >>> raref.loc[raref.index.max()].nunique()
        1
    """
    if what not in ("pangenome", "coregenome"):
        raise ValueError(f"Unknown what: {what!r}. Use 'pangenome' or 'coregenome'")
    if n_perm < 1:
        raise ValueError("n_perm must be >= 1")

    pm = to_binary(pangenome.pan_matrix).to_numpy()
    n_genomes = pm.shape[0]
    rng = np.random.default_rng(seed)
    steps = np.arange(1, n_genomes + 1)[:, None]

    curves = np.zeros((n_genomes, n_perm), dtype=int)
    for i in range(n_perm):
        cumulative = np.cumsum(pm[rng.permutation(n_genomes)], axis=0)
        if what == "pangenome":
            curves[:, i] = (cumulative > 0).sum(axis=1)
        else:
            curves[:, i] = (cumulative == steps).sum(axis=1)

    return pd.DataFrame(
        curves,
        index=pd.Index(range(1, n_genomes + 1), name="genomes"),
        columns=[f"permut_{i + 1}" for i in range(n_perm)],
    )


def cluster_frequency(pangenome) -> pd.DataFrame:
    """
    Number of clusters found in exactly k genomes, for k = 1..n.

    Clusters with no active genes are not counted.
    """
    presence = to_binary(pangenome.pan_matrix).sum(axis=0).to_numpy()
    n_genomes = pangenome.pan_matrix.shape[0]
    counts = np.bincount(presence, minlength=n_genomes + 1)[1:]
    return pd.DataFrame(
        {"genomes": np.arange(1, n_genomes + 1), "clusters": counts}
    )
