"""
Distances and ordination between genomes.

Distance metrics:
- Bray-Curtis (default, abundance data)
- Jaccard (presence/absence; quantitative variant derived from Bray-Curtis)
- Manhattan, Euclidean, Canberra, Chebyshev, Hamming
"""

import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from scipy.spatial.distance import pdist, squareform

from pagoo.core.panmatrix import to_binary

DIST_METHODS = {
    "bray": "braycurtis",
    "jaccard": "jaccard",
    "manhattan": "cityblock",
    "euclidean": "euclidean",
    "canberra": "canberra",
    "chebyshev": "chebyshev",
    "hamming": "hamming",
}


def distance_matrix(matrix: np.ndarray, metric: str) -> np.ndarray:
    """
    Square distance matrix between rows.

    Args:
        matrix: (n_genomes × n_clusters) array
        metric: scipy metric name

    Returns:
        Distance matrix (n_genomes × n_genomes)

    Example:
        >>> matrix = np.array([[1, 0, 1], [1, 1, 0], [0, 1, 1]])
        >>> distance_matrix(matrix, "jaccard").shape
        (3, 3)
    """
    if matrix.shape[0] < 2:
        return np.zeros((matrix.shape[0], matrix.shape[0]))
    if metric in ("jaccard", "hamming"):
        return squareform(pdist(matrix.astype(bool), metric=metric))
    return squareform(pdist(matrix.astype(float), metric=metric))


def dist(pangenome, method: str = "bray", binary: bool = False) -> pd.DataFrame:
    """
    Pairwise distances between active genomes.

    Args:
        pangenome: Pangenome
        method: One of DIST_METHODS
        binary: Use presence/absence instead of gene counts

    Returns:
        Square DataFrame indexed by organism name on both axes
    """
    if method not in DIST_METHODS:
        raise ValueError(
            f"Unknown method: {method}. Use one of {', '.join(DIST_METHODS)}"
        )
    pm = pangenome.pan_matrix
    if binary:
        pm = to_binary(pm)
    values = pm.to_numpy()

    if method == "jaccard" and not binary:
        warnings.warn(
            'It is recommended to set binary=True when running dist(method="jaccard")',
            UserWarning,
            stacklevel=2,
        )
        # quantitative Jaccard: 2B / (1 + B)
        bray = distance_matrix(values, "braycurtis")
        distances = 2 * bray / (1 + bray)
    else:
        distances = distance_matrix(values, DIST_METHODS[method])

    return pd.DataFrame(distances, index=pm.index.copy(), columns=pm.index.copy())


@dataclass
class PCAResult:
    """
    Principal components of the panmatrix.

    Attributes:
        sdev: Standard deviation of each component
        rotation: Loadings (clusters × components)
        scores: Genome coordinates (genomes × components)
        center: Column means subtracted (None if not centered)
        scale: Column scales divided by (None if not scaled)
    """
    sdev: np.ndarray
    rotation: pd.DataFrame
    scores: pd.DataFrame
    center: Optional[pd.Series] = None
    scale: Optional[pd.Series] = None

    @property
    def explained_variance_ratio(self) -> np.ndarray:
        variance = self.sdev ** 2
        total = variance.sum()
        return variance / total if total > 0 else variance


def pan_pca(pangenome, center: bool = True, scale: bool = False) -> PCAResult:
    """
    Principal components analysis of the panmatrix via SVD.

    Args:
        pangenome: Pangenome
        center: Shift clusters to zero mean
        scale: Scale clusters to unit variance

    Returns:
        PCAResult
    """
    pm = pangenome.pan_matrix
    x = pm.to_numpy(dtype=float)
    n_genomes = x.shape[0]
    if n_genomes < 2:
        raise ValueError("PCA needs at least 2 active genomes")

    center_values = None
    if center:
        center_values = x.mean(axis=0)
        x = x - center_values
    scale_values = None
    if scale:
        scale_values = np.sqrt((x ** 2).sum(axis=0) / (n_genomes - 1))
        if np.any(scale_values == 0):
            raise ValueError("Cannot rescale a constant/zero cluster to unit variance")
        x = x / scale_values

    u, s, vt = np.linalg.svd(x, full_matrices=False)
    components = [f"PC{i + 1}" for i in range(len(s))]
    return PCAResult(
        sdev=s / np.sqrt(n_genomes - 1),
        rotation=pd.DataFrame(vt.T, index=pm.columns.copy(), columns=components),
        scores=pd.DataFrame(u * s, index=pm.index.copy(), columns=components),
        center=None if center_values is None else pd.Series(center_values, index=pm.columns.copy()),
        scale=None if scale_values is None else pd.Series(scale_values, index=pm.columns.copy()),
    )
