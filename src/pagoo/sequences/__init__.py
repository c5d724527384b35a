"""Sequence-aware extension: gene sequences grouped by cluster."""

from pagoo.sequences.store import SequenceStore, parse_sequences

__all__ = [
    "SequenceStore",
    "parse_sequences",
]
