"""
Statistics over a pangenome's read-only views.

Every function takes a Pangenome and reads it through its current mask;
stochastic functions take an explicit seed. PangenomeStatistics bundles
them as methods bound to one pangenome (available as ``Pangenome.stats``).
"""

from typing import Optional, Sequence

import pandas as pd

from pagoo.stats.curves import (
    ExpDecayFit,
    PowerLawFit,
    cg_exp_decay_fit,
    melt_rarefaction,
    pg_power_law_fit,
)
from pagoo.stats.distances import DIST_METHODS, PCAResult, dist, distance_matrix, pan_pca
from pagoo.stats.diversity import BinomixResult, binomix_estimate, fluidity
from pagoo.stats.rarefaction import cluster_frequency, rarefact


class PangenomeStatistics:
    """
    Statistics bound to a pangenome.

    Holds a reference to (not a copy of) the pangenome, so results always
    reflect its current drop/recover state.
    """

    def __init__(self, pangenome):
        self.pangenome = pangenome

    def rarefact(self, what: str = "pangenome", n_perm: int = 10, seed: Optional[int] = None) -> pd.DataFrame:
        return rarefact(self.pangenome, what=what, n_perm=n_perm, seed=seed)

    def cluster_frequency(self) -> pd.DataFrame:
        return cluster_frequency(self.pangenome)

    def dist(self, method: str = "bray", binary: bool = False) -> pd.DataFrame:
        return dist(self.pangenome, method=method, binary=binary)

    def pan_pca(self, center: bool = True, scale: bool = False) -> PCAResult:
        return pan_pca(self.pangenome, center=center, scale=scale)

    def pg_power_law_fit(self, raref: Optional[pd.DataFrame] = None, **kwargs) -> PowerLawFit:
        return pg_power_law_fit(self.pangenome, raref=raref, **kwargs)

    def cg_exp_decay_fit(
        self, raref: Optional[pd.DataFrame] = None, pcounts: float = 10, **kwargs
    ) -> ExpDecayFit:
        return cg_exp_decay_fit(self.pangenome, raref=raref, pcounts=pcounts, **kwargs)

    def fluidity(self, n_sim: int = 10, seed: Optional[int] = None) -> dict:
        return fluidity(self.pangenome, n_sim=n_sim, seed=seed)

    def binomix_estimate(
        self,
        k_range: Sequence[int] = (3, 4, 5),
        core_detect_prob: float = 1.0,
        seed: Optional[int] = None,
    ) -> BinomixResult:
        return binomix_estimate(
            self.pangenome, k_range=k_range, core_detect_prob=core_detect_prob, seed=seed
        )

    def __repr__(self) -> str:
        return f"PangenomeStatistics({self.pangenome!r})"


__all__ = [
    "PangenomeStatistics",
    "rarefact",
    "cluster_frequency",
    "dist",
    "distance_matrix",
    "DIST_METHODS",
    "pan_pca",
    "PCAResult",
    "pg_power_law_fit",
    "cg_exp_decay_fit",
    "melt_rarefaction",
    "PowerLawFit",
    "ExpDecayFit",
    "fluidity",
    "binomix_estimate",
    "BinomixResult",
]
