"""Configuration for pangenome objects."""

import warnings
from dataclasses import dataclass
from typing import Literal

from pagoo.core.errors import CoreLevelWarning, InvalidThresholdError

DEFAULT_SEPARATOR = "__"
DEFAULT_CORE_LEVEL = 95.0
CORE_LEVEL_WARN_BELOW = 85.0
CLOUD_RULES = ("singleton", "clonal")


@dataclass
class PangenomeConfig:
    """Settings shared by a pangenome and its collaborators."""

    sep: str = DEFAULT_SEPARATOR
    """Separator joining organism and gene names into a gene id."""

    core_level: float = DEFAULT_CORE_LEVEL
    """Percentage of active organisms a cluster must be in to be core."""

    cloud_rule: Literal["singleton", "clonal"] = "singleton"
    """'singleton' marks single-gene clusters as cloud; 'clonal' also collapses
    organisms with identical gene content before counting presence."""

    def __post_init__(self):
        if not isinstance(self.sep, str) or not self.sep:
            raise ValueError("sep must be a non-empty string")
        if self.cloud_rule not in CLOUD_RULES:
            raise ValueError(
                f"Unknown cloud_rule: {self.cloud_rule}. Use one of {CLOUD_RULES}"
            )
        self.core_level = validate_core_level(self.core_level)


def validate_core_level(value) -> float:
    """
    Validate a core threshold.

    Args:
        value: Percentage in (0, 100]

    Returns:
        The threshold as float

    Raises:
        InvalidThresholdError: If value is not a number in (0, 100]
    """
    if isinstance(value, bool):
        raise InvalidThresholdError(f"core_level must be numeric, got {value!r}")
    try:
        level = float(value)
    except (TypeError, ValueError):
        raise InvalidThresholdError(
            f"core_level must be numeric, got {value!r}"
        ) from None
    if level != level or level > 100 or level <= 0:
        raise InvalidThresholdError(
            f"core_level must be in (0, 100], got {value!r}"
        )
    if level < CORE_LEVEL_WARN_BELOW:
        warnings.warn(
            f"core_level = {level:g} is below {CORE_LEVEL_WARN_BELOW:g}; "
            "the core genome will likely include accessory clusters",
            CoreLevelWarning,
            stacklevel=3,
        )
    return level
