"""Schema management exports."""

from .schema_loader import SchemaError, load_schema_document, normalize_schema, parse_schema_text
from .schema_models import SchemaDocument

__all__ = [
    "SchemaDocument",
    "SchemaError",
    "load_schema_document",
    "normalize_schema",
    "parse_schema_text",
]
