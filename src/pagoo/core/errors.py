"""Exception and warning taxonomy for pangenome objects."""


class PagooError(Exception):
    """Base class for all pangenome errors."""


class MissingColumnError(PagooError, ValueError):
    """A required input column is absent."""


class DuplicateKeyError(PagooError, ValueError):
    """Two genes share the same composite gene id."""


class NotFoundError(PagooError, KeyError):
    """Unknown organism or cluster name/id."""

    def __str__(self) -> str:
        # KeyError quotes its message by default
        return str(self.args[0]) if self.args else ""


class ShapeMismatchError(PagooError, ValueError):
    """Metadata table cannot be joined onto the dataset."""


class InvalidThresholdError(PagooError, ValueError):
    """core_level outside of (0, 100]."""


class InvalidSelectorError(PagooError, IndexError):
    """Organism or cluster selector out of range or unknown."""


class MissingSequenceError(PagooError, ValueError):
    """A gene in the ledger has no matching sequence."""


class CoreLevelWarning(UserWarning):
    """core_level set below the recommended minimum of 85."""


class OrphanSequenceWarning(UserWarning):
    """Sequences provided for genes that are not in the ledger."""
