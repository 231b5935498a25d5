"""Payload inference exports."""

from .payload_loader import PayloadError, load_payload
from .schema_inference import infer_schema_from_payload

__all__ = ["PayloadError", "infer_schema_from_payload", "load_payload"]
