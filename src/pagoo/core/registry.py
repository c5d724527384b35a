"""Stable integer identifiers for organisms and clusters."""

from numbers import Integral
from typing import Dict, Iterable, Iterator, List

from pagoo.core.errors import NotFoundError


def _is_integer(x) -> bool:
    return isinstance(x, Integral) and not isinstance(x, bool)


class IdentifierRegistry:
    """
    Name <-> id mapping for one dimension of the dataset.

    Ids are assigned in first-seen order starting at 1 and never change
    for the lifetime of the object. There is no removal: hiding an
    organism is the job of the MaskManager.

    Attributes:
        kind: Label used in error messages ("organism", "cluster")
    """

    def __init__(self, kind: str, names: Iterable[str] = ()):
        self.kind = kind
        self._ids: Dict[str, int] = {}
        self._names: List[str] = []
        for name in names:
            self.register(name)

    def register(self, name: str) -> int:
        """Register a name, returning its id. Idempotent."""
        name = str(name)
        existing = self._ids.get(name)
        if existing is not None:
            return existing
        self._names.append(name)
        self._ids[name] = len(self._names)
        return self._ids[name]

    def id_of(self, name: str) -> int:
        try:
            return self._ids[str(name)]
        except KeyError:
            raise NotFoundError(f"Unknown {self.kind}: {name!r}") from None

    def name_of(self, id_: int) -> str:
        if not _is_integer(id_) or not 1 <= id_ <= len(self._names):
            raise NotFoundError(f"Unknown {self.kind} id: {id_!r}")
        return self._names[int(id_) - 1]

    def resolve(self, x) -> int:
        """Resolve a name or an id to an id."""
        if isinstance(x, str):
            return self.id_of(x)
        self.name_of(x)
        return int(x)

    @property
    def names(self) -> List[str]:
        """Names in id order."""
        return list(self._names)

    @property
    def ids(self) -> List[int]:
        return list(range(1, len(self._names) + 1))

    def __contains__(self, name) -> bool:
        return str(name) in self._ids

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __repr__(self) -> str:
        return f"IdentifierRegistry(kind={self.kind!r}, n={len(self)})"
