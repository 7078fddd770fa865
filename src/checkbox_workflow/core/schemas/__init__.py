"""JSON Schema validation helpers."""
from __future__ import annotations

from .validation import (
    SchemaValidationError,
    SchemaViolation,
    format_violations,
    load_schema,
    validate_payload,
    validate_payload_safe,
)

__all__ = [
    "SchemaValidationError",
    "SchemaViolation",
    "format_violations",
    "load_schema",
    "validate_payload",
    "validate_payload_safe",
]
