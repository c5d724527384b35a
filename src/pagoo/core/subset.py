"""
Two-dimensional (organism, cluster) subsetting.

Selectors are resolved against what a caller currently sees: integer
positions are 1-based into the active organism list (rows of the
panmatrix) or the cluster list (its columns); names must refer to
visible entries; boolean selectors must match the visible length.
"""

from dataclasses import dataclass
from numbers import Integral
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from pagoo.core.errors import InvalidSelectorError

if TYPE_CHECKING:
    from pagoo.core.pangenome import Pangenome


@dataclass(frozen=True, eq=False)
class PangenomeView:
    """
    Immutable, consistent restriction of a pangenome.

    All tables reflect exactly the same (organism, cluster) pairs and
    are copies: later drop/recover calls on the source do not alter them.

    Attributes:
        pan_matrix: Selected organisms × selected clusters
        organisms: Organism table restricted to the selection
        clusters: Cluster table restricted to the selection
        genes: Genes of selected organisms in selected clusters
        sequences: Sequences grouped by cluster (None without sequences)
        sep: Gene id separator of the source
    """
    pan_matrix: pd.DataFrame
    organisms: pd.DataFrame
    clusters: pd.DataFrame
    genes: pd.DataFrame
    sequences: Optional[Dict[str, list]] = None
    sep: str = "__"

    @property
    def shape(self):
        return self.pan_matrix.shape

    def gene_groups(self) -> Dict[str, pd.DataFrame]:
        """Genes split by cluster, for every selected cluster."""
        return {
            name: self.genes[self.genes["cluster"] == name]
            for name in self.pan_matrix.columns
        }

    def __repr__(self) -> str:
        n_orgs, n_clusters = self.shape
        return f"PangenomeView({n_orgs} organisms, {n_clusters} clusters, {len(self.genes)} genes)"


def _is_integer(x) -> bool:
    return isinstance(x, (Integral, np.integer)) and not isinstance(x, (bool, np.bool_))


def resolve_selector(selector: Any, names: Sequence[str], kind: str) -> List[int]:
    """
    Resolve a selector to 0-based positions into ``names``.

    Args:
        selector: None (all), a name, a 1-based position, a sequence of
            names or positions, or a boolean sequence of len(names)
        names: Visible names in display order
        kind: "organism" or "cluster", for error messages

    Returns:
        Unique positions, in selection order

    Raises:
        InvalidSelectorError: Unknown name, out-of-range position,
            wrong boolean length, or mixed selector types
    """
    n = len(names)
    if selector is None:
        return list(range(n))
    if isinstance(selector, (str, Integral, np.integer, np.bool_)):
        selector = [selector]
    if isinstance(selector, (pd.Series, pd.Index)):
        selector = selector.tolist()
    items = list(np.asarray(selector, dtype=object).ravel()) if isinstance(selector, np.ndarray) else list(selector)

    if items and all(isinstance(x, (bool, np.bool_)) for x in items):
        if len(items) != n:
            raise InvalidSelectorError(
                f"Boolean {kind} selector has length {len(items)}, expected {n}"
            )
        return [i for i, keep in enumerate(items) if keep]

    positions = []
    if all(isinstance(x, str) for x in items):
        lookup = {name: i for i, name in enumerate(names)}
        for name in items:
            if name not in lookup:
                raise InvalidSelectorError(f"Unknown or dropped {kind}: {name!r}")
            positions.append(lookup[name])
    elif all(_is_integer(x) for x in items):
        for x in items:
            if not 1 <= x <= n:
                raise InvalidSelectorError(
                    f"{kind.capitalize()} position {x} out of range 1..{n}"
                )
            positions.append(int(x) - 1)
    else:
        raise InvalidSelectorError(
            f"{kind.capitalize()} selector must be names, 1-based positions, or booleans"
        )
    return list(dict.fromkeys(positions))


def select(
    pangenome: "Pangenome",
    orgs: Any = None,
    clusters: Any = None,
) -> PangenomeView:
    """
    Restrict a pangenome to selected organisms and clusters.

    Args:
        pangenome: Source pangenome (not modified)
        orgs: Organism selector over active organisms
        clusters: Cluster selector over all clusters

    Returns:
        PangenomeView
    """
    active_ids = pangenome.mask.active_organisms()
    org_registry = pangenome.ledger.organism_registry
    cluster_registry = pangenome.ledger.cluster_registry

    org_pos = resolve_selector(orgs, [org_registry.name_of(i) for i in active_ids], "organism")
    cluster_pos = resolve_selector(clusters, cluster_registry.names, "cluster")

    org_ids = [active_ids[i] for i in org_pos]
    cluster_ids = [cluster_registry.ids[i] for i in cluster_pos]

    pan_matrix = pangenome.pan_matrix.iloc[org_pos, cluster_pos].copy()
    organisms = pangenome.ledger.organisms.loc[org_ids]
    cluster_table = pangenome.ledger.clusters.loc[cluster_ids]
    genes = pangenome.ledger.slice(org_ids=org_ids, cluster_ids=cluster_ids)

    sequences = None
    if pangenome.sequence_store is not None:
        sequences = pangenome.sequence_store.grouped(
            org_ids=org_ids, cluster_ids=cluster_ids
        )

    return PangenomeView(
        pan_matrix=pan_matrix,
        organisms=organisms,
        clusters=cluster_table,
        genes=genes,
        sequences=sequences,
        sep=pangenome.sep,
    )
