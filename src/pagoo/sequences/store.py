"""
Sequence store for sequence-aware pangenomes.

Holds one DNA sequence per gene id, mirrored onto the organism and
cluster of that gene in the ledger. All grouped reads go through the
owning pangenome's mask and classification, so dropped organisms
never appear.
"""

import copy
import logging
import math
import warnings
from collections.abc import Mapping
from numbers import Real
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

import numpy as np
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from pagoo.core.errors import (
    DuplicateKeyError,
    MissingSequenceError,
    OrphanSequenceWarning,
)

if TYPE_CHECKING:
    from pagoo.core.pangenome import Pangenome

logger = logging.getLogger(__name__)


def _to_record(value, gid: str, gene: str) -> SeqRecord:
    if isinstance(value, SeqRecord):
        seq = value.seq
    elif isinstance(value, Seq):
        seq = value
    elif isinstance(value, str):
        seq = Seq(value)
    else:
        raise TypeError(
            f"Unrecognized sequence type for {gid!r}: {type(value).__name__}"
        )
    return SeqRecord(seq, id=gid, name=gene, description="")


def parse_sequences(sequences, sep: str) -> Dict[str, SeqRecord]:
    """
    Flatten organism -> gene -> sequence input into gene id -> SeqRecord.

    Accepted inputs per organism: a mapping gene name -> str/Seq/SeqRecord,
    or an iterable of SeqRecord whose ids are gene names.

    Raises:
        TypeError: Unrecognized input layout
        DuplicateKeyError: The same gene id appears twice
    """
    if not isinstance(sequences, Mapping):
        raise TypeError("sequences must be a mapping of organism name -> sequences")

    records: Dict[str, SeqRecord] = {}
    for org, genes in sequences.items():
        if isinstance(genes, Mapping):
            items = genes.items()
        elif isinstance(genes, (str, bytes)) or not isinstance(genes, Iterable):
            raise TypeError(f"Unrecognized sequences format for organism {org!r}")
        else:
            genes = list(genes)
            if not all(isinstance(r, SeqRecord) for r in genes):
                raise TypeError(
                    f"Sequences for organism {org!r} must be a mapping or SeqRecords"
                )
            items = ((r.id, r) for r in genes)

        for gene, value in items:
            gid = f"{org}{sep}{gene}"
            if gid in records:
                raise DuplicateKeyError(f"Duplicated sequence for gene id {gid!r}")
            record = _to_record(value, gid, str(gene))
            record.annotations["organism"] = str(org)
            records[gid] = record
    return records


class SequenceStore:
    """
    Gene sequences grouped by cluster, filtered through a pangenome.

    Args:
        pangenome: Owning pangenome (held by reference)
        sequences: Mapping organism -> {gene name: sequence}

    Raises:
        MissingSequenceError: A ledger gene has no sequence

    Warns:
        OrphanSequenceWarning: Sequences with no ledger gene (kept, but
            never returned by grouped reads)
    """

    def __init__(self, pangenome: "Pangenome", sequences):
        logger.info("Checking input sequences")
        ledger = pangenome.ledger
        records = parse_sequences(sequences, ledger.sep)

        gids = ledger.genes["gid"].tolist()
        missing = [gid for gid in gids if gid not in records]
        if missing:
            raise MissingSequenceError(
                f"{len(missing)} gene id(s) have no sequence: {', '.join(missing[:5])}"
            )

        known = set(gids)
        orphans = [gid for gid in records if gid not in known]
        if orphans:
            warnings.warn(
                f"{len(orphans)} sequence name(s) match no gene id, continuing anyway: "
                f"{', '.join(orphans[:5])}",
                OrphanSequenceWarning,
                stacklevel=3,
            )

        logger.info("Adding metadata to sequences")
        self._pangenome = pangenome
        self._records: List[SeqRecord] = []
        org_ids, cluster_ids = [], []
        for gid, org_id, cluster_id, cluster in zip(
            gids,
            ledger.org_codes,
            ledger.cluster_codes,
            ledger.genes["cluster"],
        ):
            record = records[gid]
            record.annotations["cluster"] = cluster
            self._records.append(record)
            org_ids.append(org_id)
            cluster_ids.append(cluster_id)
        self._org_ids = np.asarray(org_ids, dtype=np.int64)
        self._cluster_ids = np.asarray(cluster_ids, dtype=np.int64)
        self.orphans = {gid: records[gid] for gid in orphans}
        self._index = {record.id: i for i, record in enumerate(self._records)}

    def bind(self, pangenome: "Pangenome") -> "SequenceStore":
        """Same sequences, attached to another pangenome (e.g. a clone)."""
        store = object.__new__(type(self))
        store._pangenome = pangenome
        store._records = list(self._records)
        store._org_ids = self._org_ids.copy()
        store._cluster_ids = self._cluster_ids.copy()
        store.orphans = dict(self.orphans)
        store._index = dict(self._index)
        return store

    def __len__(self) -> int:
        return len(self._records)

    def get(self, gid: str) -> Optional[SeqRecord]:
        """Copy of the record for a gene id (orphans included), or None."""
        i = self._index.get(gid)
        record = self._records[i] if i is not None else self.orphans.get(gid)
        return None if record is None else _copy_record(record)

    def grouped(
        self,
        org_ids: Optional[Iterable[int]] = None,
        cluster_ids: Optional[Iterable[int]] = None,
        category: str = "all",
    ) -> Dict[str, List[SeqRecord]]:
        """
        Sequences split by cluster.

        Args:
            org_ids: Organisms to include (default: active organisms)
            cluster_ids: Clusters to include (default: all)
            category: "all", "core", "shell", or "cloud"

        Returns:
            Dict cluster name -> SeqRecords in load order; clusters in
            registry order, empty clusters omitted. Records are copies,
            so editing them leaves the store untouched.
        """
        pg = self._pangenome
        if org_ids is None:
            org_ids = pg.mask.active_organisms()
        keep = np.isin(self._org_ids, np.fromiter(org_ids, dtype=np.int64))
        if cluster_ids is not None:
            keep &= np.isin(self._cluster_ids, np.fromiter(cluster_ids, dtype=np.int64))
        if category != "all":
            names = pg.classification.clusters_in(category)
            wanted = [pg.ledger.cluster_registry.id_of(n) for n in names]
            keep &= np.isin(self._cluster_ids, np.asarray(wanted, dtype=np.int64))

        order = pg.ledger.cluster_registry.names
        groups: Dict[str, List[SeqRecord]] = {}
        for i in np.flatnonzero(keep):
            name = order[self._cluster_ids[i] - 1]
            groups.setdefault(name, []).append(_copy_record(self._records[i]))
        return {name: groups[name] for name in order if name in groups}

    @property
    def sequences(self) -> Dict[str, List[SeqRecord]]:
        return self.grouped()

    @property
    def core_sequences(self) -> Dict[str, List[SeqRecord]]:
        return self.grouped(category="core")

    @property
    def shell_sequences(self) -> Dict[str, List[SeqRecord]]:
        return self.grouped(category="shell")

    @property
    def cloud_sequences(self) -> Dict[str, List[SeqRecord]]:
        return self.grouped(category="cloud")

    def core_seqs_4_phylo(self, max_per_org=1, fill: bool = True) -> Dict[str, List[SeqRecord]]:
        """
        Core gene sequences ready for a concatenated multi-gene alignment.

        Args:
            max_per_org: Maximum sequences per organism and cluster; extra
                in-paralogues are discarded in load order. None, NaN or
                inf keep all.
            fill: Add an empty placeholder sequence for every active
                organism missing from a core cluster (possible when
                core_level < 100)

        Returns:
            Dict core cluster name -> SeqRecords sorted by organism name.
            Placeholders carry annotations["placeholder"] = True.
        """
        if isinstance(max_per_org, bool) or not (max_per_org is None or isinstance(max_per_org, Real)):
            raise TypeError('"max_per_org" must be numeric or None')
        if not isinstance(fill, (bool, np.bool_)):
            raise TypeError('"fill" must be a bool')
        cap = None
        if max_per_org is not None and not math.isnan(max_per_org) and not math.isinf(max_per_org):
            if max_per_org < 0:
                raise ValueError('"max_per_org" must be non-negative')
            cap = int(max_per_org)

        pg = self._pangenome
        org_registry = pg.ledger.organism_registry
        active_names = [org_registry.name_of(i) for i in pg.mask.active_organisms()]
        core = self.grouped(category="core")

        result: Dict[str, List[SeqRecord]] = {}
        for cluster in pg.classification.clusters_in("core"):
            per_org: Dict[str, List[SeqRecord]] = {}
            for record in core.get(cluster, []):
                per_org.setdefault(record.annotations["organism"], []).append(record)
            if cap is not None:
                per_org = {org: recs[:cap] for org, recs in per_org.items()}
            if fill:
                for org in active_names:
                    if not per_org.get(org):
                        per_org[org] = [_placeholder(org, cluster)]
            records = [r for recs in per_org.values() for r in recs]
            result[cluster] = sorted(records, key=lambda r: r.annotations["organism"])
        return result

    def __repr__(self) -> str:
        return f"SequenceStore({len(self)} sequences, {len(self.orphans)} orphans)"


def _copy_record(record: SeqRecord) -> SeqRecord:
    clone = copy.copy(record)
    clone.annotations = dict(record.annotations)
    return clone


def _placeholder(org: str, cluster: str) -> SeqRecord:
    return SeqRecord(
        Seq(""),
        id=org,
        name="",
        description="",
        annotations={"organism": org, "cluster": cluster, "placeholder": True},
    )
