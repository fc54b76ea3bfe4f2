"""Flatten documents and turn them into update modifiers.

``doc_to_modifier`` flattens a document to dotted keys, moves keys whose
values are null, MISSING or empty strings into ``$unset`` and puts the rest
into ``$set``.
"""
from __future__ import annotations
import logging
from typing import Any, Dict

from .document import ModifierDocument
from .markers import MISSING
from .nodes import get_child, is_basic_object, parse_int, set_child

logger = logging.getLogger(__name__)

__all__ = [
    "clean_nulls",
    "doc_to_modifier",
    "expand_obj",
    "is_basic_object",
    "obj_affects_key",
    "report_nulls",
]


def _is_null_missing_or_empty_string(val: Any) -> bool:
    return val is None or val is MISSING or (isinstance(val, str) and len(val) == 0)


def clean_nulls(doc: Any, is_array: bool = False, keep_empty_strings: bool = False) -> Any:
    """Return a copy of `doc` without null, MISSING or empty string values.

    Works recursively; nested mappings and lists that end up empty are
    dropped too. Empty strings survive when `keep_empty_strings` is set.
    Dropped list items leave no gap: the remaining items move down, so
    ``[None, 1]`` cleans to ``[1]``.
    """
    new_doc: Any = [] if is_array else {}
    items = enumerate(doc) if isinstance(doc, list) else doc.items()
    for key, val in items:
        if is_basic_object(val):
            val = clean_nulls(val, False, keep_empty_strings)
            keep = len(val) > 0
        elif isinstance(val, list):
            val = clean_nulls(val, True, keep_empty_strings)
            keep = len(val) > 0
        elif not _is_null_missing_or_empty_string(val):
            keep = True
        else:
            keep = keep_empty_strings and isinstance(val, str) and len(val) == 0

        if not keep:
            continue
        if is_array:
            new_doc.append(val)
        else:
            new_doc[key] = val
    return new_doc


def report_nulls(flat_doc: Dict[str, Any], keep_empty_strings: bool = False) -> Dict[str, str]:
    """Return the keys of `flat_doc` that should be unset, each mapped to "".

    A key qualifies when its value is null, MISSING, an empty string (unless
    kept) or a list holding nothing but such values.
    """
    nulls = {}
    for key, val in flat_doc.items():
        if (
            val is None
            or val is MISSING
            or (not keep_empty_strings and isinstance(val, str) and len(val) == 0)
            or (isinstance(val, list) and len(clean_nulls(val, True, keep_empty_strings)) == 0)
        ):
            nulls[key] = ""
    return nulls


def doc_to_modifier(doc: Any, keep_arrays: bool = False, keep_empty_strings: bool = False) -> Dict[str, Any]:
    """Convert a full document into a ``$set``/``$unset`` modifier.

    `keep_arrays` sets whole arrays instead of individual items;
    `keep_empty_strings` sets empty strings instead of unsetting them.
    """
    flat_doc = ModifierDocument(doc).get_flat_object(keep_arrays=keep_arrays)

    nulls = report_nulls(flat_doc, keep_empty_strings)
    flat_doc = clean_nulls(flat_doc, False, keep_empty_strings)

    modifier: Dict[str, Any] = {}
    if flat_doc:
        modifier["$set"] = flat_doc
    if nulls:
        modifier["$unset"] = nulls
    logger.debug("Derived modifier with %d $set and %d $unset keys", len(flat_doc), len(nulls))
    return modifier


def obj_affects_key(obj: Any, key: str) -> bool:
    return ModifierDocument(obj).affects_key(key)


def expand_obj(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Take a flat mapping of dotted keys and return the nested version.

    A path that already holds a scalar from an earlier key is left alone.
    """
    new_doc: Dict[str, Any] = {}
    for key, val in doc.items():
        subkeys = key.split(".")
        last = len(subkeys) - 1
        current: Any = new_doc
        for i, subkey in enumerate(subkeys):
            existing = get_child(current, subkey)
            if existing is not MISSING and not isinstance(existing, (dict, list)):
                break  # already set for some reason

            if i == last:
                set_child(current, subkey, val)
                break

            next_piece = parse_int(subkeys[i + 1])
            if next_piece is None and not isinstance(existing, (dict, list)):
                if not set_child(current, subkey, {}):
                    break
            elif next_piece is not None and not isinstance(existing, list):
                if not set_child(current, subkey, []):
                    break
            current = get_child(current, subkey)
    return new_doc
