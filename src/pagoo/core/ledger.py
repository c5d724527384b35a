"""
Gene ledger: the canonical record of every gene in the dataset.

The ledger owns three tables (genes, organisms, clusters) plus the
integer codes linking every gene to its organism and cluster ids. All
derived views (panmatrix, classification, sequence groups) are
projections of the ledger and are never stored independently.
"""

import logging
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from pagoo.core.config import DEFAULT_SEPARATOR
from pagoo.core.errors import (
    DuplicateKeyError,
    MissingColumnError,
    ShapeMismatchError,
)
from pagoo.core.registry import IdentifierRegistry

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("gene", "organism", "cluster")
COLUMN_ALIASES = {"org": "organism", "group": "cluster"}
TARGET_KEYS = {"organism": "organism", "cluster": "cluster", "gene": "gid"}
TARGET_ALIASES = {"org": "organism", "group": "cluster", "gid": "gene"}


def normalize_columns(table: pd.DataFrame) -> pd.DataFrame:
    """Rename alias columns (org, group) to their canonical names."""
    renames = {
        alias: canonical
        for alias, canonical in COLUMN_ALIASES.items()
        if alias in table.columns and canonical not in table.columns
    }
    return table.rename(columns=renames)


def make_gid(organisms, genes, sep: str = DEFAULT_SEPARATOR) -> pd.Series:
    """Join organism and gene names into composite gene ids."""
    return pd.Series(organisms, dtype=str).str.cat(
        pd.Series(genes, dtype=str), sep=sep
    )


class GeneLedger:
    """
    Canonical gene table with organism and cluster dimensions.

    Args:
        genes: Table with columns gene, organism (or org) and cluster
            (or group). Extra columns are kept as per-gene metadata.
        sep: Separator for composite gene ids
        org_meta: Optional organism metadata keyed by organism name
        cluster_meta: Optional cluster metadata keyed by cluster name

    Raises:
        MissingColumnError: A required column is absent or has nulls
        DuplicateKeyError: Two rows produce the same gene id
        ShapeMismatchError: A side table cannot be joined
    """

    def __init__(
        self,
        genes: pd.DataFrame,
        sep: str = DEFAULT_SEPARATOR,
        org_meta: Optional[pd.DataFrame] = None,
        cluster_meta: Optional[pd.DataFrame] = None,
    ):
        if not isinstance(genes, pd.DataFrame):
            genes = pd.DataFrame(genes)
        table = normalize_columns(genes)

        missing = [c for c in REQUIRED_COLUMNS if c not in table.columns]
        if missing:
            raise MissingColumnError(
                f"Missing required column(s): {', '.join(missing)}. "
                f"Got: {', '.join(map(str, table.columns))}"
            )
        if "gid" in table.columns:
            raise MissingColumnError("Column 'gid' is reserved for composite gene ids")
        for column in REQUIRED_COLUMNS:
            if table[column].isna().any():
                raise MissingColumnError(f"Column '{column}' contains missing values")

        table = table.reset_index(drop=True)
        for column in REQUIRED_COLUMNS:
            table[column] = table[column].astype(str)

        gid = make_gid(table["organism"], table["gene"], sep=sep)
        duplicated = gid[gid.duplicated(keep=False)]
        if len(duplicated):
            shown = ", ".join(pd.unique(duplicated)[:5])
            raise DuplicateKeyError(
                f"{duplicated.nunique()} duplicated gene id(s): {shown}"
            )

        logger.info("Registering organisms and clusters")
        self.sep = sep
        self.organism_registry = IdentifierRegistry("organism", pd.unique(table["organism"]))
        self.cluster_registry = IdentifierRegistry("cluster", pd.unique(table["cluster"]))

        extra = [c for c in table.columns if c not in REQUIRED_COLUMNS]
        table.insert(0, "gid", gid.values)
        self._genes = table[["gid", *REQUIRED_COLUMNS, *extra]]

        self._org_codes = table["organism"].map(self.organism_registry.id_of).to_numpy(dtype=np.int64)
        self._cluster_codes = table["cluster"].map(self.cluster_registry.id_of).to_numpy(dtype=np.int64)
        self._org_codes.setflags(write=False)
        self._cluster_codes.setflags(write=False)

        self._organisms = pd.DataFrame(
            {"organism": self.organism_registry.names},
            index=pd.Index(self.organism_registry.ids, name="org_id"),
        )
        self._clusters = pd.DataFrame(
            {"cluster": self.cluster_registry.names},
            index=pd.Index(self.cluster_registry.ids, name="cluster_id"),
        )

        if org_meta is not None:
            self.add_metadata("organism", org_meta)
        if cluster_meta is not None:
            self.add_metadata("cluster", cluster_meta)

        logger.debug(
            f"Ledger built: {len(self)} genes, {len(self.organism_registry)} organisms, "
            f"{len(self.cluster_registry)} clusters"
        )

    # Tables (copies; the ledger is only mutated through add_metadata)

    @property
    def genes(self) -> pd.DataFrame:
        return self._genes.copy()

    @property
    def organisms(self) -> pd.DataFrame:
        return self._organisms.copy()

    @property
    def clusters(self) -> pd.DataFrame:
        return self._clusters.copy()

    @property
    def org_codes(self) -> np.ndarray:
        """Organism id of every gene, in ledger order (read-only)."""
        return self._org_codes

    @property
    def cluster_codes(self) -> np.ndarray:
        """Cluster id of every gene, in ledger order (read-only)."""
        return self._cluster_codes

    def row_mask(
        self,
        org_ids: Optional[Iterable[int]] = None,
        cluster_ids: Optional[Iterable[int]] = None,
    ) -> np.ndarray:
        """Boolean mask over ledger rows restricted to the given ids (None = all)."""
        mask = np.ones(len(self), dtype=bool)
        if org_ids is not None:
            mask &= np.isin(self._org_codes, np.fromiter(org_ids, dtype=np.int64))
        if cluster_ids is not None:
            mask &= np.isin(self._cluster_codes, np.fromiter(cluster_ids, dtype=np.int64))
        return mask

    def slice(
        self,
        org_ids: Optional[Iterable[int]] = None,
        cluster_ids: Optional[Iterable[int]] = None,
    ) -> pd.DataFrame:
        """Gene rows for the given organism and cluster ids, in ledger order."""
        return self._genes.loc[self.row_mask(org_ids, cluster_ids)].copy()

    def genes_of_cluster(
        self, cluster_id: int, org_ids: Optional[Iterable[int]] = None
    ) -> pd.DataFrame:
        self.cluster_registry.name_of(cluster_id)
        return self.slice(org_ids=org_ids, cluster_ids=[cluster_id])

    def genes_of_organism(
        self, org_id: int, org_ids: Optional[Iterable[int]] = None
    ) -> pd.DataFrame:
        self.organism_registry.name_of(org_id)
        if org_ids is not None and org_id not in set(org_ids):
            return self._genes.iloc[0:0].copy()
        return self.slice(org_ids=[org_id])

    def add_metadata(self, target: str, table: pd.DataFrame) -> "GeneLedger":
        """
        Left-join metadata columns onto one dimension of the dataset.

        Rows of the dimension without a match get nulls. Keys in ``table``
        unknown to the dataset are ignored.

        Args:
            target: "organism" (or "org"), "cluster" (or "group"),
                or "gene" (or "gid")
            table: Metadata with a key column named after the target
                ("organism"/"org", "cluster"/"group", or "gid")

        Returns:
            self

        Raises:
            ValueError: Unknown target
            ShapeMismatchError: Key column absent, null or duplicated,
                or a metadata column already exists
        """
        target = TARGET_ALIASES.get(target, target)
        if target not in TARGET_KEYS:
            raise ValueError(
                f"Unknown metadata target: {target!r}. Use 'organism', 'cluster', or 'gene'"
            )
        key = TARGET_KEYS[target]
        if not isinstance(table, pd.DataFrame):
            table = pd.DataFrame(table)
        table = normalize_columns(table)

        if key not in table.columns:
            raise ShapeMismatchError(f"Metadata table has no '{key}' column")
        if table[key].isna().any():
            raise ShapeMismatchError(f"Metadata column '{key}' contains missing keys")
        keys = table[key].astype(str)
        if keys.duplicated().any():
            shown = ", ".join(pd.unique(keys[keys.duplicated()])[:5])
            raise ShapeMismatchError(f"Ambiguous metadata keys in '{key}': {shown}")

        frames = {"organism": self._organisms, "cluster": self._clusters, "gene": self._genes}
        frame = frames[target]
        new_columns = [c for c in table.columns if c != key]
        clashes = [c for c in new_columns if c in frame.columns or c in ("org_id", "cluster_id")]
        if clashes:
            raise ShapeMismatchError(
                f"Metadata column(s) already present on {target}: {', '.join(map(str, clashes))}"
            )

        unmatched = int((~keys.isin(frame[key])).sum())
        if unmatched:
            logger.info(f"{unmatched} {target} metadata row(s) match nothing and were ignored")

        meta = table.assign(**{key: keys}).set_index(key)
        joined = frame.join(meta, on=key, how="left")

        if target == "organism":
            self._organisms = joined
        elif target == "cluster":
            self._clusters = joined
        else:
            self._genes = joined
        logger.debug(f"Added {len(new_columns)} {target} metadata column(s)")
        return self

    def __len__(self) -> int:
        return len(self._genes)

    def __repr__(self) -> str:
        return (
            f"GeneLedger(genes={len(self)}, organisms={len(self.organism_registry)}, "
            f"clusters={len(self.cluster_registry)})"
        )
