"""Protocol definitions for the key-level document surface."""
from typing import Any, Callable, Iterable, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class ModifierDocumentProtocol(Protocol):
    """Protocol for what validators and cleaners use from `ModifierDocument`.

    Consumers walk the affected keys, read values with their operator and
    rewrite or drop what they do not accept.
    """

    def for_each_node(self, func: Callable[[Any], Any], end_points_only: bool = True) -> None: ...

    def get_info_for_key(self, key: str) -> Optional[Any]: ...

    def get_positions_info_for_generic_key(self, generic_key: str) -> List[Any]: ...

    def remove_generic_keys(self, keys: Iterable[str]) -> None: ...

    def filter_generic_keys(self, test: Callable[[str], bool]) -> None: ...

    def set_value_for_key(self, key: str, value: Any) -> None: ...

    def affects_generic_key_implicit(self, key: str) -> bool: ...

    def get_object(self) -> Any: ...
