"""Sentinel values used while walking and mutating documents.

``MISSING`` stands in for "no value at all" (as opposed to ``None``, which is
a real null stored in the document). Passing it to a set operation requests
removal, and mappings holding it are pruned whenever the document is indexed.

``REMOVED`` is written into a list in place of an element that was removed,
so the indices of its siblings stay valid until the list is compacted.
"""
from __future__ import annotations


class _MissingType:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self):
        return (_MissingType, ())


class _RemovedMarker:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<removed array item>"

    def __reduce__(self):
        return (_RemovedMarker, ())


MISSING = _MissingType()
REMOVED = _RemovedMarker()
