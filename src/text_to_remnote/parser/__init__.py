"""Source document reading and text preparation."""

from .document_parser import preprocess_text, read_document, validate_text

__all__ = ["preprocess_text", "read_document", "validate_text"]
