"""Build the position index of a document or update modifier.

The index is always rebuilt from scratch; nothing here updates an existing
index. Documents are small and a full walk keeps every position, key and
generic key consistent with the tree as it is right now.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Set

from .markers import MISSING
from .nodes import NodeKind, classify, is_basic_object
from .positions import append_affected_key, make_key_generic

logger = logging.getLogger(__name__)

# Operators whose operand is one or more items appended to an array.
APPEND_OPERATORS = frozenset({"$push", "$addToSet", "$pop"})
PULL_OPERATOR = "$pull"


@dataclass
class PositionIndex:
    """Everything the indexer learned about one document.

    `affected_keys` and `generic_keys` keep discovery order, which is the
    order all key-level lookups scan in.
    """

    affected_keys: Dict[str, str] = field(default_factory=dict)
    generic_keys: Dict[str, Optional[str]] = field(default_factory=dict)
    parent_positions: Set[str] = field(default_factory=set)
    positions_inside_arrays: Set[str] = field(default_factory=set)
    object_positions: Set[str] = field(default_factory=set)
    array_item_positions: Set[str] = field(default_factory=set)

    def record(self, position: str, key: str, generic_key: Optional[str], within_array: bool) -> None:
        self.affected_keys[position] = key
        self.generic_keys[position] = generic_key
        if within_array:
            self.positions_inside_arrays.add(position)


@dataclass(frozen=True)
class TraversalContext:
    """Where the walk currently is. Children get a modified copy."""

    position: Optional[str] = None
    key: Optional[str] = None
    operator: Optional[str] = None
    adjusted: bool = False
    within_array: bool = False

    def child(self, piece: Any, **changes: Any) -> "TraversalContext":
        position = f"{self.position}[{piece}]" if self.position else str(piece)
        return replace(self, position=position, key=append_affected_key(self.key, piece), **changes)


def build_index(obj: Any, blackbox_keys: Iterable[str] = ()) -> PositionIndex:
    """Walk `obj` depth first and return its index.

    Generic keys listed in `blackbox_keys` are recorded but their values are
    never descended into. MISSING values found in mappings are deleted from
    the document as a side effect.
    """
    index = PositionIndex()
    _walk(index, obj, TraversalContext(), frozenset(blackbox_keys))
    logger.debug(
        "Indexed %d positions (%d parents)",
        len(index.affected_keys),
        len(index.parent_positions),
    )
    return index


def _adjust_for_operator(val: Any, ctx: TraversalContext):
    """Rewrite the branch for array operators, once per branch.

    Returns the value to keep walking, the adjusted context and whether the
    walk should stop here.
    """
    if ctx.operator in APPEND_OPERATORS:
        # Jump straight into $each as if it were the field's array; this
        # also leaves any sibling $slice behind.
        if is_basic_object(val) and "$each" in val:
            return val["$each"], replace(ctx, position=f"{ctx.position}[$each]", adjusted=True), False
        return val, replace(ctx, key=f"{ctx.key}.0", adjusted=True), False
    if ctx.operator == PULL_OPERATOR:
        # a mapping operand is a match condition, not data
        return val, replace(ctx, key=f"{ctx.key}.0", adjusted=True), is_basic_object(val)
    return val, ctx, False


def _walk(index: PositionIndex, val: Any, ctx: TraversalContext, blackbox_keys: frozenset) -> None:
    # first-level modifier operators
    if ctx.operator is None and ctx.key and ctx.key.startswith("$"):
        ctx = replace(ctx, operator=ctx.key, key=None)

    is_blackbox = False
    stop = False
    if ctx.key:
        if not ctx.adjusted:
            val, ctx, stop = _adjust_for_operator(val, ctx)

        generic_key = make_key_generic(ctx.key)
        is_blackbox = generic_key in blackbox_keys
        if ctx.position:
            index.record(ctx.position, ctx.key, generic_key, ctx.within_array)

    if stop:
        return

    kind = classify(val)
    if kind is NodeKind.SEQUENCE and val:
        if ctx.position:
            index.parent_positions.add(ctx.position)
        for i, item in enumerate(val):
            child_ctx = ctx.child(i, within_array=True)
            if ctx.position:
                index.array_item_positions.add(child_ctx.position)
            _walk(index, item, child_ctx, blackbox_keys)
    elif (kind is NodeKind.MAPPING and not is_blackbox) or (not ctx.position and isinstance(val, dict)):
        # The root mapping is always looped over, even a dict subclass.
        if ctx.position and val:
            index.parent_positions.add(ctx.position)
            index.object_positions.add(ctx.position)
        for k in list(val):
            item = val[k]
            if item is MISSING:
                del val[k]
            elif k != "$slice":
                _walk(index, item, ctx.child(k), blackbox_keys)
