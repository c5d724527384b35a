"""Reversible organism masking (drop / recover)."""

import logging
from typing import List, Union

import pandas as pd

from pagoo.core.registry import IdentifierRegistry

logger = logging.getLogger(__name__)

OrganismRef = Union[str, int]


class MaskManager:
    """
    Tracks which organisms are dropped.

    Dropped organisms keep their identity in the registry but are
    invisible to every derived view until recovered.

    Attributes:
        registry: Organism registry the mask applies to
    """

    def __init__(self, registry: IdentifierRegistry):
        self.registry = registry
        self._dropped: List[int] = []
        self.version = 0

    def drop(self, x: OrganismRef) -> bool:
        """
        Hide an organism.

        Args:
            x: Organism name or id

        Returns:
            True if the mask changed, False if x was already dropped

        Raises:
            NotFoundError: Unknown organism
        """
        org_id = self.registry.resolve(x)
        if org_id in self._dropped:
            return False
        self._dropped.append(org_id)
        self.version += 1
        logger.debug(f"Dropped organism {self.registry.name_of(org_id)!r} (id {org_id})")
        return True

    def recover(self, x: OrganismRef) -> bool:
        """
        Un-hide a previously dropped organism. Recovering an organism
        that is not dropped is a no-op.

        Returns:
            True if the mask changed

        Raises:
            NotFoundError: Unknown organism
        """
        org_id = self.registry.resolve(x)
        if org_id not in self._dropped:
            return False
        self._dropped.remove(org_id)
        self.version += 1
        logger.debug(f"Recovered organism {self.registry.name_of(org_id)!r} (id {org_id})")
        return True

    def is_active(self, x: OrganismRef) -> bool:
        return self.registry.resolve(x) not in self._dropped

    def active_organisms(self) -> List[int]:
        """Active organism ids in registry order."""
        dropped = set(self._dropped)
        return [i for i in self.registry.ids if i not in dropped]

    def dropped_organisms(self) -> pd.Series:
        """Dropped organism names indexed by id, in drop order."""
        return pd.Series(
            [self.registry.name_of(i) for i in self._dropped],
            index=pd.Index(self._dropped, name="org_id", dtype="int64"),
            name="organism",
            dtype=object,
        )

    def copy(self, registry: IdentifierRegistry = None) -> "MaskManager":
        clone = MaskManager(registry if registry is not None else self.registry)
        clone._dropped = list(self._dropped)
        clone.version = self.version
        return clone

    def __repr__(self) -> str:
        return (
            f"MaskManager(active={len(self.registry) - len(self._dropped)}, "
            f"dropped={len(self._dropped)})"
        )
