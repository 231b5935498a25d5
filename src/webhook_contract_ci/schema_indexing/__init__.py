"""Schema indexing exports."""

from .canonical_paths import ROOT_PATH, display_path
from .canonical_values import canonical_json
from .index_models import NodeInfo, SchemaIndex
from .intersection_collapsing import collapse_all_of
from .reference_resolution import resolve_references
from .schema_indexer import index_schema
from .type_sets import TypeSet, is_covered, render_type_set, types_of

__all__ = [
    "NodeInfo",
    "ROOT_PATH",
    "SchemaIndex",
    "TypeSet",
    "canonical_json",
    "collapse_all_of",
    "display_path",
    "index_schema",
    "is_covered",
    "render_type_set",
    "resolve_references",
    "types_of",
]
