"""Shape classification and single-step container access.

Every traversal in this package looks at one node at a time and decides
between three shapes: a plain mapping, a list, or an opaque leaf. Opaque
leaves are scalars, ``None`` and anything that is not exactly a ``dict`` or
a ``list`` (dict subclasses, tuples, dates, class instances), and are never
descended into.

Position segments are always strings; list access converts them to ``int``.
"""
from __future__ import annotations
import re
from enum import Enum
from typing import Any, Optional

from .markers import MISSING

_INT_PREFIX = re.compile(r"\s*([-+]?\d+)")


class NodeKind(Enum):
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    OPAQUE = "opaque"


def is_basic_object(obj: Any) -> bool:
    """Return True only for plain ``dict`` instances, not subclasses."""
    return type(obj) is dict


def classify(value: Any) -> NodeKind:
    if isinstance(value, list):
        return NodeKind.SEQUENCE
    if is_basic_object(value):
        return NodeKind.MAPPING
    return NodeKind.OPAQUE


def parse_int(piece: Any) -> Optional[int]:
    """Parse a leading integer the lenient way path segments are read.

    ``"3"`` and ``"3abc"`` both give 3, ``"$each"`` and ``""`` give None.
    """
    if isinstance(piece, int) and not isinstance(piece, bool):
        return piece
    if not isinstance(piece, str):
        return None
    m = _INT_PREFIX.match(piece)
    return int(m.group(1)) if m else None


def _list_index(segment: Any) -> Optional[int]:
    if isinstance(segment, int) and not isinstance(segment, bool):
        return segment if segment >= 0 else None
    if isinstance(segment, str) and segment.isdigit():
        return int(segment)
    return None


def get_child(container: Any, segment: Any) -> Any:
    """Return the child at `segment` or MISSING when there is none."""
    if isinstance(container, dict):
        return container.get(segment, MISSING)
    if isinstance(container, list):
        idx = _list_index(segment)
        if idx is None or idx >= len(container):
            return MISSING
        return container[idx]
    return MISSING


def set_child(container: Any, segment: Any, value: Any) -> bool:
    """Assign `value` at `segment`, overwriting any previous value.

    Writing past the end of a list pads the gap with None. Returns False when
    the container cannot hold `segment` (a non-numeric segment on a list, or
    a non-container).
    """
    if isinstance(container, dict):
        container[segment] = value
        return True
    if isinstance(container, list):
        idx = _list_index(segment)
        if idx is None:
            return False
        if idx >= len(container):
            container.extend([None] * (idx - len(container) + 1))
        container[idx] = value
        return True
    return False


def delete_child(container: Any, segment: Any) -> None:
    if isinstance(container, dict):
        container.pop(segment, None)
