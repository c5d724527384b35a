"""
Stateful pangenome with live organism masking.

A Pangenome is a handle to mutable state: ``drop``/``recover`` and
``core_level`` assignment change the object in place, and every
reference to the same instance observes the change. Use ``clone()``
for an independent copy, or ``snapshot()``/``select()`` for a frozen
view.

Every derived view (panmatrix, organism/cluster/gene tables,
classification, sequence groups) is a projection of the gene ledger
through the current mask and threshold. Derived values are memoized
and invalidated on mutation.
"""

import copy
import dataclasses
import logging
import threading
from typing import Any, Callable, Dict, Hashable, List, Optional, Union

import pandas as pd

from pagoo.core.classifier import Classification, classify
from pagoo.core.config import PangenomeConfig, validate_core_level
from pagoo.core.errors import MissingSequenceError
from pagoo.core.ledger import GeneLedger
from pagoo.core.mask import MaskManager
from pagoo.core.panmatrix import build_panmatrix
from pagoo.core.subset import PangenomeView, select

logger = logging.getLogger(__name__)


class Pangenome:
    """
    Pangenome dataset: genes grouped into clusters across organisms.

    Args:
        genes: Table with columns gene, organism (or org), cluster (or
            group); extra columns are per-gene metadata
        org_meta: Optional organism metadata, keyed by an organism/org column
        cluster_meta: Optional cluster metadata, keyed by a cluster/group column
        sequences: Optional mapping organism -> {gene name: sequence};
            enables the sequence store
        config: PangenomeConfig (default: PangenomeConfig())
        sep: Overrides config.sep
        core_level: Overrides config.core_level
        cloud_rule: Overrides config.cloud_rule

    Raises:
        MissingColumnError, DuplicateKeyError, ShapeMismatchError,
        MissingSequenceError, InvalidThresholdError: construction aborted

    Example:
        >>> df = pd.DataFrame({
        ...     "gene": ["g1", "g2", "g1"],
        ...     "org": ["A", "A", "B"],
        ...     "group": ["OG1", "OG2", "OG1"],
        ... })
        >>> pg = Pangenome(df)
        >>> pg.pan_matrix.shape
        (2, 2)
    """

    def __init__(
        self,
        genes: pd.DataFrame,
        org_meta: Optional[pd.DataFrame] = None,
        cluster_meta: Optional[pd.DataFrame] = None,
        sequences: Optional[Dict[str, Dict[str, Any]]] = None,
        config: Optional[PangenomeConfig] = None,
        *,
        sep: Optional[str] = None,
        core_level: Optional[float] = None,
        cloud_rule: Optional[str] = None,
    ):
        overrides = {
            name: value
            for name, value in (("sep", sep), ("core_level", core_level), ("cloud_rule", cloud_rule))
            if value is not None
        }
        # private copy; the core_level setter mutates it
        config = dataclasses.replace(config or PangenomeConfig(), **overrides)

        logger.info("Checking input data")
        self.config = config
        self.ledger = GeneLedger(
            genes, sep=config.sep, org_meta=org_meta, cluster_meta=cluster_meta
        )
        self.mask = MaskManager(self.ledger.organism_registry)
        self._lock = threading.RLock()
        self._cache: Dict[str, tuple] = {}

        self.sequence_store = None
        if sequences is not None:
            from pagoo.sequences.store import SequenceStore
            self.sequence_store = SequenceStore(self, sequences)

    # Cache

    def _cached(self, name: str, key: Hashable, compute: Callable[[], Any]) -> Any:
        with self._lock:
            entry = self._cache.get(name)
            if entry is None or entry[0] != key:
                logger.debug(f"Rebuilding {name}")
                entry = (key, compute())
                self._cache[name] = entry
            return entry[1]

    def _invalidate(self) -> None:
        self._cache.clear()

    # Settings

    @property
    def sep(self) -> str:
        return self.config.sep

    @property
    def cloud_rule(self) -> str:
        return self.config.cloud_rule

    @property
    def core_level(self) -> float:
        """Percentage of active organisms a cluster must be in to be core."""
        return self.config.core_level

    @core_level.setter
    def core_level(self, value: float) -> None:
        level = validate_core_level(value)
        with self._lock:
            self.config.core_level = level
            self._invalidate()

    # Masking

    def drop(self, x: Union[str, int]) -> "Pangenome":
        """
        Hide an organism from every view until recovered.

        Args:
            x: Organism name, or its id as shown in ``organisms``

        Returns:
            self (the object is modified in place)
        """
        with self._lock:
            if self.mask.drop(x):
                self._invalidate()
        return self

    def recover(self, x: Union[str, int]) -> "Pangenome":
        """
        Recover a dropped organism. No-op if it is not dropped.

        Args:
            x: Organism name, or its id as shown in ``dropped``

        Returns:
            self
        """
        with self._lock:
            if self.mask.recover(x):
                self._invalidate()
        return self

    def active_organisms(self) -> List[int]:
        return self.mask.active_organisms()

    def dropped_organisms(self) -> pd.Series:
        return self.mask.dropped_organisms()

    @property
    def dropped(self) -> pd.Series:
        """Dropped organism names indexed by id, in drop order."""
        return self.mask.dropped_organisms()

    # Metadata

    def add_metadata(self, target: str, table: pd.DataFrame) -> "Pangenome":
        """
        Left-join metadata onto organisms, clusters, or genes.

        See GeneLedger.add_metadata.

        Returns:
            self
        """
        with self._lock:
            self.ledger.add_metadata(target, table)
            self._invalidate()
        return self

    # Derived views

    @property
    def pan_matrix(self) -> pd.DataFrame:
        """Active organisms × all clusters gene counts."""
        matrix = self._cached(
            "pan_matrix",
            self.mask.version,
            lambda: build_panmatrix(self.ledger, self.mask.active_organisms()),
        )
        return matrix.copy()

    @property
    def classification(self) -> Classification:
        return self._cached(
            "classification",
            (self.mask.version, self.core_level, self.cloud_rule),
            lambda: classify(self.pan_matrix, self.core_level, self.cloud_rule),
        )

    @property
    def organisms(self) -> pd.DataFrame:
        """Active organisms with metadata, indexed by organism id."""
        return self.ledger.organisms.loc[self.mask.active_organisms()]

    @property
    def clusters(self) -> pd.DataFrame:
        """All clusters with metadata, indexed by cluster id."""
        return self.ledger.clusters

    @property
    def genes(self) -> pd.DataFrame:
        """Genes of active organisms, in load order."""
        return self.ledger.slice(org_ids=self.mask.active_organisms())

    def gene_groups(self, category: str = "all") -> Dict[str, pd.DataFrame]:
        """
        Active genes split by cluster.

        Args:
            category: "all", "core", "shell", or "cloud"

        Returns:
            Dict cluster name -> gene table, in cluster registry order.
            Clusters with no active genes are omitted.
        """
        groups = dict(tuple(self._genes_in(category).groupby("cluster", sort=False)))
        return {name: groups[name] for name in self.ledger.cluster_registry if name in groups}

    def genes_of_cluster(self, cluster: Union[str, int], active_only: bool = True) -> pd.DataFrame:
        cluster_id = self.ledger.cluster_registry.resolve(cluster)
        org_ids = self.mask.active_organisms() if active_only else None
        return self.ledger.genes_of_cluster(cluster_id, org_ids=org_ids)

    def genes_of_organism(self, org: Union[str, int], active_only: bool = True) -> pd.DataFrame:
        org_id = self.ledger.organism_registry.resolve(org)
        org_ids = self.mask.active_organisms() if active_only else None
        return self.ledger.genes_of_organism(org_id, org_ids=org_ids)

    def _clusters_in(self, category: str) -> pd.DataFrame:
        names = set(self.classification.clusters_in(category))
        clusters = self.ledger.clusters
        return clusters[clusters["cluster"].isin(names)]

    def _genes_in(self, category: str) -> pd.DataFrame:
        genes = self.genes
        if category == "all":
            return genes
        names = set(self.classification.clusters_in(category))
        return genes[genes["cluster"].isin(names)]

    @property
    def core_clusters(self) -> pd.DataFrame:
        return self._clusters_in("core")

    @property
    def shell_clusters(self) -> pd.DataFrame:
        return self._clusters_in("shell")

    @property
    def cloud_clusters(self) -> pd.DataFrame:
        return self._clusters_in("cloud")

    @property
    def core_genes(self) -> pd.DataFrame:
        return self._genes_in("core")

    @property
    def shell_genes(self) -> pd.DataFrame:
        return self._genes_in("shell")

    @property
    def cloud_genes(self) -> pd.DataFrame:
        return self._genes_in("cloud")

    @property
    def summary_stats(self) -> pd.DataFrame:
        """Number of core, shell, and cloud clusters, plus the total."""
        return self.classification.summary_stats()

    # Sequences

    def _require_sequences(self):
        if self.sequence_store is None:
            raise MissingSequenceError("This pangenome was built without sequences")
        return self.sequence_store

    @property
    def sequences(self) -> Dict[str, list]:
        """Active sequences grouped by cluster."""
        return self._require_sequences().sequences

    @property
    def core_sequences(self) -> Dict[str, list]:
        return self._require_sequences().core_sequences

    @property
    def shell_sequences(self) -> Dict[str, list]:
        return self._require_sequences().shell_sequences

    @property
    def cloud_sequences(self) -> Dict[str, list]:
        return self._require_sequences().cloud_sequences

    def core_seqs_4_phylo(self, max_per_org=1, fill: bool = True) -> Dict[str, list]:
        """See SequenceStore.core_seqs_4_phylo."""
        return self._require_sequences().core_seqs_4_phylo(max_per_org=max_per_org, fill=fill)

    # Subsetting and copies

    def select(self, orgs: Any = None, clusters: Any = None) -> PangenomeView:
        """
        Consistent restriction to some organisms and clusters.

        Args:
            orgs: Organism names, 1-based positions into ``organisms``,
                or a boolean sequence over them (None = all active)
            clusters: Cluster names, 1-based positions into ``clusters``,
                or a boolean sequence (None = all)

        Returns:
            PangenomeView (a new object; self is not modified)
        """
        with self._lock:
            return select(self, orgs, clusters)

    def snapshot(self) -> PangenomeView:
        """Frozen view of the whole current state."""
        return self.select()

    def clone(self) -> "Pangenome":
        """Independent deep copy, including mask and threshold state."""
        with self._lock:
            new = object.__new__(type(self))
            new.config = copy.copy(self.config)
            new.ledger = copy.deepcopy(self.ledger)
            new.mask = self.mask.copy(new.ledger.organism_registry)
            new._lock = threading.RLock()
            new._cache = {}
            new.sequence_store = None
            if self.sequence_store is not None:
                new.sequence_store = self.sequence_store.bind(new)
            return new

    def __deepcopy__(self, memo) -> "Pangenome":
        return self.clone()

    # Collaborators

    @property
    def stats(self):
        """Statistics bound to this pangenome (see pagoo.stats)."""
        from pagoo.stats import PangenomeStatistics
        return PangenomeStatistics(self)

    def __repr__(self) -> str:
        n_active = len(self.mask.active_organisms())
        n_dropped = len(self.ledger.organism_registry) - n_active
        return (
            f"Pangenome({n_active} organisms ({n_dropped} dropped), "
            f"{len(self.ledger.cluster_registry)} clusters, {len(self.ledger)} genes, "
            f"core_level={self.core_level:g})"
        )

