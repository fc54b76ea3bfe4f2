"""Indexed view over a document or an update modifier.

``ModifierDocument`` owns the object it is given and mutates it in place.
Every write through a position or key re-indexes the whole object before
returning; removals inside arrays leave REMOVED markers until
``remove_array_items`` squeezes them out.

Example::

    doc = ModifierDocument({"$set": {"a.b": 1}, "$push": {"tags": "x"}})
    doc.get_position_for_key("tags.0")   # "$push[tags]"
    doc.get_info_for_key("a.b")          # KeyInfo(value=1, operator="$set")
"""
from __future__ import annotations
import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from .accessor import PositionAccessor, ValueAccessor
from .indexer import PositionIndex, build_index
from .markers import MISSING
from .positions import (
    extract_operator,
    generic_key_affects_other_generic_key,
    key_to_position,
    position_to_key,
)

logger = logging.getLogger(__name__)


@dataclass
class KeyInfo:
    value: Any
    operator: Optional[str]


@dataclass
class PositionInfo:
    key: Optional[str]
    value: Any
    operator: Optional[str]
    position: str


@dataclass
class NodeInfo:
    """One node handed to a `for_each_node` callback.

    `update_value` and `remove` only schedule the change; it is applied once
    the whole iteration has finished.
    """

    value: Any
    is_array_item: bool
    operator: Optional[str]
    position: str
    key: str
    generic_key: Optional[str]
    _pending: Dict[str, Any] = field(repr=False, default_factory=dict)

    def update_value(self, new: Any) -> None:
        self._pending[self.position] = new

    def remove(self) -> None:
        self._pending[self.position] = MISSING


class ModifierDocument:
    def __init__(self, obj: Any, blackbox_keys: Optional[Iterable[str]] = None) -> None:
        """Index `obj`, which is modified in place by later calls.

        `blackbox_keys` are generic keys whose values are treated as leaves.
        MISSING values are removed from `obj` recursively right away.
        """
        self._obj = obj
        self._blackbox_keys = list(blackbox_keys or [])
        self._accessor: ValueAccessor = PositionAccessor()
        self._index = PositionIndex()
        self._reparse()

    @classmethod
    def from_settings(cls, obj: Any, settings) -> "ModifierDocument":
        return cls(obj, blackbox_keys=settings.blackbox_keys)

    def _reparse(self) -> None:
        self._index = build_index(self._obj, self._blackbox_keys)

    def for_each_node(self, func: Callable[[NodeInfo], Any], end_points_only: bool = True) -> None:
        """Call `func` for every indexed node, array items included.

        With `end_points_only`, nodes that contain other nodes are skipped.
        Values scheduled through the node are written after the loop ends.
        """
        if not callable(func):
            raise TypeError("for_each_node requires a loop function")

        pending: Dict[str, Any] = {}
        index = self._index
        for position, affected_key in list(index.affected_keys.items()):
            if end_points_only and position in index.parent_positions:
                continue
            func(NodeInfo(
                value=self.get_value_for_position(position),
                is_array_item=position in index.array_item_positions,
                operator=extract_operator(position),
                position=position,
                key=affected_key,
                generic_key=index.generic_keys.get(position),
                _pending=pending,
            ))

        for position, new in pending.items():
            self.set_value_for_position(position, new)

    def _lookup(self, position: str, traverse_object: bool = False) -> Any:
        return self._accessor.get(self._obj, position, traverse_object)

    def get_value_for_position(self, position: str, traverse_object: bool = False) -> Any:
        """Return the value at `position`, or None when nothing is there."""
        value = self._lookup(position, traverse_object)
        return None if value is MISSING else value

    def set_value_for_position(self, position: str, value: Any, traverse_object: bool = False) -> None:
        """Overwrite the value at `position`; MISSING removes it."""
        if self._accessor.set(self._obj, position, value, traverse_object):
            self._reparse()

    def remove_value_for_position(self, position: str, traverse_object: bool = False) -> None:
        self.set_value_for_position(position, MISSING, traverse_object)

    def get_key_for_position(self, position: str) -> Optional[str]:
        return self._index.affected_keys.get(position)

    def get_generic_key_for_position(self, position: str) -> Optional[str]:
        return self._index.generic_keys.get(position)

    def get_info_for_key(self, key: str) -> Optional[KeyInfo]:
        """Return the value and operator for non-generic `key`.

        If nothing affects `key` directly, the first item of an array stored
        at `key` is used, falling back to the array itself when that item
        was removed.
        """
        position = self.get_position_for_key(key)
        if position:
            return KeyInfo(value=self.get_value_for_position(position), operator=extract_operator(position))

        for pos in self.get_positions_for_generic_key(f"{key}.$"):
            value = self._lookup(pos)
            if value is MISSING and "[" in pos:
                value = self._lookup(pos[:pos.rfind("[")])
            if value is not MISSING:
                return KeyInfo(value=value, operator=extract_operator(pos))
        return None

    def get_position_for_key(self, key: str) -> Optional[str]:
        # First match wins; several operators affecting the same key is
        # not supported.
        for position, affected_key in self._index.affected_keys.items():
            if affected_key == key:
                return position
        return None

    def get_positions_for_generic_key(self, key: str) -> List[str]:
        return [pos for pos, generic in self._index.generic_keys.items() if generic == key]

    def get_positions_info_for_generic_key(self, generic_key: str) -> List[PositionInfo]:
        exact_positions = []
        array_item_positions = []
        for position, affected_key in self._index.generic_keys.items():
            if affected_key == generic_key:
                exact_positions.append(position)
            elif affected_key == f"{generic_key}.$":
                array_item_positions.append(position)

        return [
            PositionInfo(
                key=position_to_key(position),
                value=self.get_value_for_position(position),
                operator=extract_operator(position),
                position=position,
            )
            for position in (exact_positions or array_item_positions)
        ]

    def get_value_for_key(self, key: str) -> Any:
        """Deprecated, use `get_info_for_key`."""
        warnings.warn(
            "get_value_for_key is deprecated; use get_info_for_key",
            DeprecationWarning,
            stacklevel=2,
        )
        position = self.get_position_for_key(key)
        return self.get_value_for_position(position) if position else None

    def add_key(self, key: str, value: Any, op: Optional[str] = None) -> None:
        """Set `key` to `value` under operator `op`, or at top level without one."""
        position = f"{op}[{key}]" if op else key_to_position(key)
        self.set_value_for_position(position, value)

    def _positions_matching(self, mapping_name: str, matches: Callable[[Optional[str]], bool]):
        # Every write rebuilds the index, so re-check each position against
        # the current index rather than the snapshot.
        for position in list(getattr(self._index, mapping_name)):
            if matches(getattr(self._index, mapping_name).get(position)):
                yield position

    def remove_generic_keys(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        for position in self._positions_matching("generic_keys", lambda k: k in keys):
            self.remove_value_for_position(position)

    def remove_generic_key(self, key: str) -> None:
        for position in self._positions_matching("generic_keys", lambda k: k == key):
            self.remove_value_for_position(position)

    def remove_key(self, key: str) -> None:
        """Remove every position affecting non-generic `key`, not just the first."""
        for position in self._positions_matching("affected_keys", lambda k: k == key):
            self.remove_value_for_position(position)

    def remove_keys(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.remove_key(key)

    def filter_generic_keys(self, test: Callable[[str], bool]) -> None:
        """Remove whatever affects each generic key for which `test` is falsy."""
        checked = set()
        to_remove = []
        for generic_key in list(self._index.generic_keys.values()):
            if generic_key in checked:
                continue
            checked.add(generic_key)
            if generic_key and not test(generic_key):
                to_remove.append(generic_key)

        for key in to_remove:
            self.remove_generic_key(key)

    def set_value_for_key(self, key: str, value: Any) -> None:
        for position in self._positions_matching("affected_keys", lambda k: k == key):
            self.set_value_for_position(position, value)

    def set_value_for_generic_key(self, key: str, value: Any) -> None:
        for position in self._positions_matching("generic_keys", lambda k: k == key):
            self.set_value_for_position(position, value)

    def remove_array_items(self) -> None:
        """Squeeze REMOVED markers out of all arrays. Does not re-index."""
        self._accessor.compact(self._obj)

    def get_object(self) -> Any:
        return self._obj

    def get_flat_object(self, keep_arrays: bool = False) -> Dict[str, Any]:
        """Return a one-level mapping of dotted keys to values.

        With `keep_arrays`, whole arrays are kept as values instead of being
        flattened into ``a.0``, ``a.1`` keys.
        """
        index = self._index
        flat = {}
        for position, affected_key in index.affected_keys.items():
            if keep_arrays:
                include = (
                    position not in index.positions_inside_arrays
                    and position not in index.object_positions
                )
            else:
                include = position not in index.parent_positions
            if isinstance(affected_key, str) and include:
                flat[affected_key] = self.get_value_for_position(position)
        return flat

    def affects_key(self, key: str) -> bool:
        return bool(self.get_position_for_key(key))

    def affects_generic_key(self, key: str) -> bool:
        return any(generic == key for generic in self._index.generic_keys.values())

    def affects_generic_key_implicit(self, key: str) -> bool:
        """Like `affects_generic_key`, but a descendant key counts too."""
        return any(
            generic_key_affects_other_generic_key(key, generic)
            for generic in self._index.generic_keys.values()
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience
        return f"ModifierDocument({self._obj!r})"
