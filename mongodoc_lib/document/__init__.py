"""Position index and modifier codec for documents and update modifiers."""

from .document import KeyInfo, ModifierDocument, NodeInfo, PositionInfo
from .interfaces import ModifierDocumentProtocol
from .markers import MISSING
from .modifier import clean_nulls, doc_to_modifier, expand_obj, is_basic_object, obj_affects_key, report_nulls
from .positions import expand_key, key_to_position, make_key_generic, position_to_key

__all__ = [
    "KeyInfo",
    "MISSING",
    "ModifierDocument",
    "ModifierDocumentProtocol",
    "NodeInfo",
    "PositionInfo",
    "clean_nulls",
    "doc_to_modifier",
    "expand_key",
    "expand_obj",
    "is_basic_object",
    "key_to_position",
    "make_key_generic",
    "obj_affects_key",
    "position_to_key",
    "report_nulls",
]
