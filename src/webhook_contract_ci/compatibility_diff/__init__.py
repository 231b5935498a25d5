"""Compatibility diff exports."""

from webhook_contract_ci.schema_indexing import canonical_json

from .constraint_rules import loosened_constraints
from .diff_models import ChangeKind, DiffEntry, DiffResult
from .schema_differencer import diff_indexes, diff_schemas

__all__ = [
    "ChangeKind",
    "DiffEntry",
    "DiffResult",
    "canonical_json",
    "diff_indexes",
    "diff_schemas",
    "loosened_constraints",
]
