"""
Core / shell / cloud classification of clusters.

Rules, applied in order to every cluster with at least one gene in an
active organism (clusters without active genes get no label):

1. cloud: singleton cluster (exactly one gene across active organisms)
2. core: present in >= core_level % of active organisms
3. cloud (cloud_rule="clonal" only): all organisms carrying the cluster
   share one identical presence/absence profile across all clusters
4. shell: everything else
"""

from dataclasses import dataclass
from typing import Dict, List

import numpy as np
import pandas as pd

CATEGORIES = ("core", "shell", "cloud")


@dataclass(frozen=True)
class Classification:
    """
    Classification of every cluster for one mask/threshold state.

    Attributes:
        labels: Category per cluster (None for clusters with no active genes)
        presence: Number of active organisms carrying each cluster
        n_organisms: Number of active organisms
        core_level: Threshold used
        cloud_rule: Cloud rule used
    """
    labels: pd.Series
    presence: pd.Series
    n_organisms: int
    core_level: float
    cloud_rule: str

    def clusters_in(self, category: str) -> List[str]:
        """Cluster names with the given category, in registry order."""
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category: {category!r}. Use one of {CATEGORIES}")
        return self.labels.index[self.labels == category].tolist()

    def counts(self) -> Dict[str, int]:
        return {c: int((self.labels == c).sum()) for c in CATEGORIES}

    def summary_stats(self) -> pd.DataFrame:
        """Number of clusters per category, plus the total of labelled clusters."""
        counts = self.counts()
        return pd.DataFrame(
            {
                "Category": ["Total", "Core", "Shell", "Cloud"],
                "Number": [
                    sum(counts.values()),
                    counts["core"],
                    counts["shell"],
                    counts["cloud"],
                ],
            }
        )


def cluster_presence(pan_matrix: pd.DataFrame) -> pd.Series:
    """Number of organisms (rows) with at least one gene in each cluster."""
    return (pan_matrix > 0).sum(axis=0).astype(int)


def effective_presence(pan_matrix: pd.DataFrame) -> pd.Series:
    """
    Presence counted over clonal groups instead of organisms.

    Organisms with identical presence/absence vectors across all
    clusters collapse to a single effective organism.
    """
    binary = (pan_matrix > 0).astype(np.int8)
    return binary.drop_duplicates().sum(axis=0).astype(int)


def classify(
    pan_matrix: pd.DataFrame,
    core_level: float,
    cloud_rule: str = "singleton",
) -> Classification:
    """
    Classify clusters of a panmatrix.

    Args:
        pan_matrix: Active organisms × clusters abundance matrix
        core_level: Core threshold, percent of active organisms
        cloud_rule: "singleton" or "clonal"

    Returns:
        Classification
    """
    n_organisms = pan_matrix.shape[0]
    presence = cluster_presence(pan_matrix)
    totals = pan_matrix.sum(axis=0)

    present = (presence > 0).to_numpy()
    singleton = (totals == 1).to_numpy()
    # presence / n * 100 >= core_level without float division
    core = (presence.to_numpy() * 100.0 >= core_level * n_organisms) & present
    if cloud_rule == "clonal":
        clonal = (effective_presence(pan_matrix) == 1).to_numpy()
    elif cloud_rule == "singleton":
        clonal = np.zeros(len(presence), dtype=bool)
    else:
        raise ValueError(f"Unknown cloud_rule: {cloud_rule!r}")

    # assigned from lowest to highest precedence
    labels = np.full(len(presence), "shell", dtype=object)
    labels[clonal] = "cloud"
    labels[core] = "core"
    labels[singleton] = "cloud"
    labels[~present] = None
    return Classification(
        labels=pd.Series(labels, index=pan_matrix.columns, name="category", dtype=object),
        presence=presence.rename("presence"),
        n_organisms=n_organisms,
        core_level=core_level,
        cloud_rule=cloud_rule,
    )
