import logging
from typing import Any, Protocol, runtime_checkable

from .markers import MISSING, REMOVED
from .nodes import NodeKind, classify, delete_child, get_child, is_basic_object, parse_int, set_child
from .positions import split_position

logger = logging.getLogger(__name__)


@runtime_checkable
class ValueAccessor(Protocol):
    """Protocol to navigate and mutate an in-memory document by position."""

    def get(self, root: Any, position: str, traverse_object: bool = False) -> Any: ...

    def set(self, root: Any, position: str, new: Any, traverse_object: bool = False) -> bool: ...

    def delete(self, root: Any, position: str, traverse_object: bool = False) -> bool: ...

    def compact(self, root: Any) -> None: ...


class PositionAccessor:
    """Accessor for nested dict/list documents addressed by position strings.

    Reads never raise: a path that runs into a scalar, a missing key or a
    removed array item yields MISSING. Writes create missing intermediate
    containers, as a list when the following segment is an integer and as a
    dict otherwise. Deleting inside a list writes REMOVED instead, so that
    sibling positions keep pointing at the same items until `compact`.
    """

    def get(self, root: Any, position: str, traverse_object: bool = False) -> Any:
        subkeys = split_position(position, traverse_object)
        last = len(subkeys) - 1
        cur = root
        for i, subkey in enumerate(subkeys):
            cur = get_child(cur, subkey)
            if i < last and classify(cur) is NodeKind.OPAQUE:
                return MISSING
        if cur is REMOVED:
            return MISSING
        return cur

    def set(self, root: Any, position: str, new: Any, traverse_object: bool = False) -> bool:
        """Write `new` at `position`; MISSING deletes it.

        Returns False if the walk stopped at a non-container before reaching
        the final segment.
        """
        subkeys = split_position(position, traverse_object)
        last = len(subkeys) - 1
        cur = root
        for i, subkey in enumerate(subkeys):
            if i == last:
                if new is MISSING:
                    if isinstance(cur, list):
                        if get_child(cur, subkey) is not MISSING:
                            set_child(cur, subkey, REMOVED)
                            logger.debug("Marked array item %s as removed", position)
                    else:
                        delete_child(cur, subkey)
                else:
                    set_child(cur, subkey, new)
                return True

            nxt = get_child(cur, subkey)
            if nxt is MISSING and new is not MISSING:
                nxt = {} if parse_int(subkeys[i + 1]) is None else []
                if not set_child(cur, subkey, nxt):
                    return False
            cur = nxt
            if classify(cur) is NodeKind.OPAQUE:
                return False
        return False

    def delete(self, root: Any, position: str, traverse_object: bool = False) -> bool:
        return self.set(root, position, MISSING, traverse_object)

    def compact(self, root: Any) -> None:
        """Drop every REMOVED marker from every list in `root`, itself included."""
        if isinstance(root, list):
            root[:] = [item for item in root if item is not REMOVED]
        if isinstance(root, (dict, list)):
            _squeeze(root)


def _squeeze(obj: Any) -> None:
    children = obj.values() if isinstance(obj, dict) else obj
    for nxt in list(children):
        if is_basic_object(nxt):
            _squeeze(nxt)
        elif isinstance(nxt, list):
            before = len(nxt)
            nxt[:] = [item for item in nxt if item is not REMOVED]
            if len(nxt) != before:
                logger.debug("Compacted %d removed array items", before - len(nxt))
            _squeeze(nxt)
