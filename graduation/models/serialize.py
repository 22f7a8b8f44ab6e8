"""
Conversion of model objects to plain JSON-ready structures.
"""

from dataclasses import fields, is_dataclass
from enum import Enum

from .transcript import UnresolvedField


def to_plain(value):
    """
    Recursively convert dataclasses, enums, tuples and sets to dicts, values,
    lists and sorted lists. UnresolvedField markers become None.

    The output is deterministic: identical models always produce identical
    structures, which makes it usable for audit comparisons.
    """
    if isinstance(value, UnresolvedField):
        return None
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted(to_plain(v) for v in value)
    return value
