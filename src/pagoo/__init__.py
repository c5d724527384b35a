"""
PAGOO: Pangenome analysis with live organism masking.

A stateful pangenome data model: genes grouped into clusters across
organisms, reversible organism drop/recover, core/shell/cloud
classification, consistent subsetting, and optional sequences.
"""

__version__ = "0.1.0"

from pagoo.core import (
    PagooError,
    MissingColumnError,
    DuplicateKeyError,
    NotFoundError,
    ShapeMismatchError,
    InvalidThresholdError,
    InvalidSelectorError,
    MissingSequenceError,
    CoreLevelWarning,
    OrphanSequenceWarning,
    PangenomeConfig,
    Pangenome,
    PangenomeView,
    Classification,
)
from pagoo.sequences import SequenceStore
from pagoo.stats import PangenomeStatistics

__all__ = [
    "Pangenome",
    "PangenomeConfig",
    "PangenomeView",
    "Classification",
    "SequenceStore",
    "PangenomeStatistics",
    "PagooError",
    "MissingColumnError",
    "DuplicateKeyError",
    "NotFoundError",
    "ShapeMismatchError",
    "InvalidThresholdError",
    "InvalidSelectorError",
    "MissingSequenceError",
    "CoreLevelWarning",
    "OrphanSequenceWarning",
    "__version__",
]
