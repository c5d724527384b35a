"""
Population diversity estimates: genomic fluidity and binomial mixtures.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd
from scipy.optimize import minimize
from scipy.special import expit, softmax
from scipy.stats import binom

from pagoo.core.panmatrix import to_binary

logger = logging.getLogger(__name__)


def fluidity(pangenome, n_sim: int = 10, seed: Optional[int] = None) -> Dict[str, float]:
    """
    Genomic fluidity over random pairs of genomes.

    For a pair (g1, g2): number of clusters unique to either genome
    divided by the total number of clusters in both.

    Args:
        pangenome: Pangenome
        n_sim: Number of random pairs
        seed: Seed for pair sampling

    Returns:
        {"mean": ..., "std": ...} (std is the sample standard deviation)
    """
    pm = to_binary(pangenome.pan_matrix).to_numpy()
    n_genomes = pm.shape[0]
    if n_genomes < 2:
        raise ValueError("Fluidity needs at least 2 active genomes")
    if n_sim < 1:
        raise ValueError("n_sim must be >= 1")

    rng = np.random.default_rng(seed)
    values = np.zeros(n_sim)
    for i in range(n_sim):
        g1, g2 = pm[rng.choice(n_genomes, size=2, replace=False)]
        unique = np.sum((g1 > 0) & (g2 == 0)) + np.sum((g1 == 0) & (g2 > 0))
        total = g1.sum() + g2.sum()
        values[i] = unique / total if total > 0 else np.nan

    std = float(np.std(values, ddof=1)) if n_sim > 1 else float("nan")
    return {"mean": float(np.mean(values)), "std": std}


@dataclass
class BinomixResult:
    """
    Binomial mixture fits of the cluster frequency spectrum.

    Attributes:
        bic_table: One row per K with core_size, pan_size and BIC
        mixtures: K -> components table (detection_prob, mixing_prob)
    """
    bic_table: pd.DataFrame
    mixtures: Dict[int, pd.DataFrame] = field(default_factory=dict)

    @property
    def best(self) -> pd.Series:
        """Row of bic_table with the lowest BIC."""
        return self.bic_table.loc[self.bic_table["BIC"].idxmin()]


def _mixture_terms(theta: np.ndarray, k: int, core_detect_prob: float):
    probs = np.append(expit(theta[: k - 1]), core_detect_prob)
    weights = softmax(np.append(theta[k - 1:], 0.0))
    return probs, weights


def _negative_log_likelihood(theta, k, core_detect_prob, freq, n_genomes):
    probs, weights = _mixture_terms(theta, k, core_detect_prob)
    j = np.arange(1, n_genomes + 1)
    pmf = binom.pmf(j[:, None], n_genomes, probs[None, :]) @ weights
    unseen = float(weights @ (1.0 - probs) ** n_genomes)
    observed = max(1.0 - unseen, 1e-300)
    return -float(np.sum(freq * (np.log(np.maximum(pmf, 1e-300)) - np.log(observed))))


def binomix_estimate(
    pangenome,
    k_range: Sequence[int] = (3, 4, 5),
    core_detect_prob: float = 1.0,
    n_starts: int = 5,
    seed: Optional[int] = None,
) -> BinomixResult:
    """
    Fit truncated binomial mixture models to the cluster frequency spectrum.

    Each cluster is found in y of G genomes; y follows a mixture of K
    binomials Bin(G, p_k) with weights w_k, one component being the core
    (p = core_detect_prob). Clusters found in no genome are unobserved,
    so the likelihood is truncated at y > 0, which yields an estimate of
    the total pangenome size.

    Args:
        pangenome: Pangenome
        k_range: Numbers of components to try (each >= 2)
        core_detect_prob: Detection probability of core clusters
        n_starts: Random restarts per K
        seed: Seed for the restarts

    Returns:
        BinomixResult
    """
    if not 0 < core_detect_prob <= 1:
        raise ValueError("core_detect_prob must be in (0, 1]")
    if any(k < 2 for k in k_range):
        raise ValueError("Every K in k_range must be >= 2")

    pm = to_binary(pangenome.pan_matrix)
    n_genomes = pm.shape[0]
    if n_genomes < 2:
        raise ValueError("Binomial mixtures need at least 2 active genomes")
    presence = pm.sum(axis=0).to_numpy()
    freq = np.bincount(presence, minlength=n_genomes + 1)[1:]
    n_observed = int(freq.sum())
    if n_observed == 0:
        raise ValueError("No clusters present in the active genomes")

    rng = np.random.default_rng(seed)
    rows, mixtures = [], {}
    for k in k_range:
        best = None
        for _ in range(n_starts):
            start = rng.normal(scale=2.0, size=2 * (k - 1))
            fit = minimize(
                _negative_log_likelihood,
                start,
                args=(k, core_detect_prob, freq, n_genomes),
                method="L-BFGS-B",
            )
            if best is None or fit.fun < best.fun:
                best = fit
        if not best.success:
            logger.debug(f"Binomial mixture K={k} did not converge: {best.message}")

        probs, weights = _mixture_terms(best.x, k, core_detect_prob)
        unseen = float(weights @ (1.0 - probs) ** n_genomes)
        pan_size = n_observed / max(1.0 - unseen, 1e-300)
        core_size = pan_size * float(weights[probs >= core_detect_prob].sum())
        n_params = 2 * (k - 1)
        rows.append(
            {
                "K": k,
                "core_size": int(round(core_size)),
                "pan_size": int(round(pan_size)),
                "BIC": 2 * best.fun + n_params * np.log(n_observed),
            }
        )
        order = np.argsort(probs)
        mixtures[k] = pd.DataFrame(
            {"detection_prob": probs[order], "mixing_prob": weights[order]}
        )

    return BinomixResult(bic_table=pd.DataFrame(rows), mixtures=mixtures)
