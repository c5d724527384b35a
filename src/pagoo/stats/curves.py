"""Curve fits for rarefaction data (Heaps' law and core genome decay)."""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd
from scipy.stats import linregress

from pagoo.stats.rarefaction import rarefact


@dataclass
class PowerLawFit:
    """
    Pangenome growth fit: y = K * x ** delta.

    alpha = 1 - delta; alpha > 1 suggests a closed pangenome,
    otherwise it is open.
    """
    K: float
    delta: float

    @property
    def alpha(self) -> float:
        return 1.0 - self.delta

    @property
    def params(self) -> dict:
        return {"K": self.K, "delta": self.delta}

    def formula(self, x):
        return self.K * np.asarray(x, dtype=float) ** self.delta

    __call__ = formula


@dataclass
class ExpDecayFit:
    """Coregenome decay fit: y = A * exp(B * x) + C, with C the core size."""
    A: float
    B: float
    C: float
    pseudo_counts: float

    @property
    def params(self) -> dict:
        return {"A": self.A, "B": self.B, "C": self.C}

    def formula(self, x):
        return self.A * np.exp(self.B * np.asarray(x, dtype=float)) + self.C

    __call__ = formula


def melt_rarefaction(raref: pd.DataFrame) -> Tuple[np.ndarray, np.ndarray]:
    """Long-format (genomes, size) pairs from a rarefaction table."""
    x = np.repeat(np.asarray(raref.index, dtype=float), raref.shape[1])
    y = raref.to_numpy(dtype=float).ravel()
    return x, y


def pg_power_law_fit(
    pangenome=None, raref: Optional[pd.DataFrame] = None, **kwargs
) -> PowerLawFit:
    """
    Fit a power law to pangenome rarefaction data.

    Linearized as log(y) = log(K) + delta * log(x).

    Args:
        pangenome: Pangenome (needed only when raref is missing)
        raref: Rarefaction table as returned by rarefact()
        **kwargs: Passed to rarefact() when raref is missing

    Returns:
        PowerLawFit
    """
    if raref is None:
        if pangenome is None:
            raise ValueError("Provide a pangenome or a rarefaction table")
        raref = rarefact(pangenome, what="pangenome", **kwargs)
    x, y = melt_rarefaction(raref)
    fit = linregress(np.log(x), np.log(y))
    return PowerLawFit(K=float(np.exp(fit.intercept)), delta=float(fit.slope))


def cg_exp_decay_fit(
    pangenome=None,
    raref: Optional[pd.DataFrame] = None,
    pcounts: float = 10,
    **kwargs,
) -> ExpDecayFit:
    """
    Fit an exponential decay to coregenome rarefaction data.

    Linearized as log(y - C + pcounts) = log(A) + B * x, where C is the
    smallest observed core size. Pseudo-counts keep the logarithm finite
    as y approaches C.

    Args:
        pangenome: Pangenome (needed only when raref is missing)
        raref: Rarefaction table as returned by rarefact(what="coregenome")
        pcounts: Pseudo-counts
        **kwargs: Passed to rarefact() when raref is missing

    Returns:
        ExpDecayFit
    """
    if raref is None:
        if pangenome is None:
            raise ValueError("Provide a pangenome or a rarefaction table")
        raref = rarefact(pangenome, what="coregenome", **kwargs)
    x, y = melt_rarefaction(raref)
    c = float(y.min())
    fit = linregress(x, np.log(y - c + pcounts))
    return ExpDecayFit(
        A=float(np.exp(fit.intercept)),
        B=float(fit.slope),
        C=c,
        pseudo_counts=pcounts,
    )
