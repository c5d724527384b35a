"""Core pangenome state: registry, ledger, mask, panmatrix, classification, subsetting."""

from pagoo.core.errors import (
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
)
from pagoo.core.config import PangenomeConfig, validate_core_level
from pagoo.core.registry import IdentifierRegistry
from pagoo.core.ledger import GeneLedger, make_gid
from pagoo.core.mask import MaskManager
from pagoo.core.panmatrix import build_panmatrix, to_binary
from pagoo.core.classifier import CATEGORIES, Classification, classify
from pagoo.core.subset import PangenomeView, resolve_selector, select
from pagoo.core.pangenome import Pangenome

__all__ = [
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
    "PangenomeConfig",
    "validate_core_level",
    "IdentifierRegistry",
    "GeneLedger",
    "make_gid",
    "MaskManager",
    "build_panmatrix",
    "to_binary",
    "CATEGORIES",
    "Classification",
    "classify",
    "PangenomeView",
    "resolve_selector",
    "select",
    "Pangenome",
]
