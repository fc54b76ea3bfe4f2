"""Conversions between positions, keys and generic keys.

A position is the exact path to a node, written with brackets:
``a[b][0]``, or ``$push[scores][$each][1]`` under an update operator.
A key is the dotted path an update would touch (``a.b.0``), and the generic
key replaces each numeric piece with ``$`` (``a.b.$``).

All functions here are pure; ``position_to_key`` builds a throwaway
document so that it always agrees with the indexer.
"""
from __future__ import annotations
import re
from typing import Any, List, Optional

from .markers import MISSING
from .nodes import get_child, parse_int, set_child

_NUMERIC_PIECE = re.compile(r"\.[0-9]+(?=\.|$)")
_BRACKET = re.compile(r"\[")
_BRACKET_OR_DOT = re.compile(r"\[|\.")


def split_position(position: str, traverse_object: bool = False) -> List[str]:
    """Split a position into its segments, dropping the closing brackets.

    With `traverse_object`, dots also separate segments so ``a.b[0]`` and
    ``a[b][0]`` address the same node.
    """
    splitter = _BRACKET_OR_DOT if traverse_object else _BRACKET
    segments = []
    for piece in splitter.split(position):
        if piece.endswith("]"):
            piece = piece[:-1]
        segments.append(piece)
    return segments


def make_key_generic(key: Any) -> Optional[str]:
    if not isinstance(key, str):
        return None
    return _NUMERIC_PIECE.sub(".$", key)


def key_to_position(key: str, wrap_all: bool = False) -> str:
    position = ""
    for i, piece in enumerate(key.split(".")):
        if i == 0 and not wrap_all:
            position += piece
        else:
            position += f"[{piece}]"
    return position


def position_to_key(position: str) -> Optional[str]:
    """Return the key that `position` would affect in any document.

    Unlike ``ModifierDocument.get_key_for_position`` this does not need the
    position to exist anywhere.
    """
    from .document import ModifierDocument

    doc = ModifierDocument({})
    doc.set_value_for_position(position, 1)
    return doc.get_key_for_position(position)


def expand_key(value: Any, key: str, obj: Any) -> None:
    """Write `value` into `obj` at the bracketed path `key`.

    Examples with value 1::

        "a"          -> {"a": 1}
        "a[b]"       -> {"a": {"b": 1}}
        "a[b][0]"    -> {"a": {"b": [1]}}
        "a[b.0.c]"   -> {"a": {"b.0.c": 1}}

    Passing MISSING deletes the final property instead.
    """
    subkeys = split_position(key)
    current = obj
    last = len(subkeys) - 1
    for i, subkey in enumerate(subkeys):
        if i == last:
            if value is MISSING:
                if isinstance(current, dict):
                    current.pop(subkey, None)
            else:
                set_child(current, subkey, value)
            return

        existing = get_child(current, subkey)
        # replace missing or falsy scalars, keep empty containers
        if not isinstance(existing, (dict, list)) and not existing:
            container = {} if parse_int(subkeys[i + 1]) is None else []
            if not set_child(current, subkey, container):
                return
        current = get_child(current, subkey)


def append_affected_key(affected_key: Optional[str], piece: Any) -> str:
    if piece == "$each":
        return affected_key  # type: ignore[return-value]
    return f"{affected_key}.{piece}" if affected_key else str(piece)


def extract_operator(position: str) -> Optional[str]:
    """Return the update operator a position lives under, if any."""
    first = position.split("[", 1)[0]
    return first if first.startswith("$") else None


def generic_key_affects_other_generic_key(key: str, affected_key: Optional[str]) -> bool:
    if affected_key is None:
        return False
    if affected_key == key:
        return True
    # descendant of the requested key
    if affected_key.startswith(f"{key}."):
        return True
    # the array itself implies any of its items
    if key.endswith(".$") and key[:-2] == affected_key:
        return True
    return False
