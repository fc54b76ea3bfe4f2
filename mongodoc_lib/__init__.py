"""mongodoc: position index and modifier codec for MongoDB-style documents."""

from .document import ModifierDocument, doc_to_modifier, expand_obj

__all__ = ["ModifierDocument", "doc_to_modifier", "expand_obj"]
