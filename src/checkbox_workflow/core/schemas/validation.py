"""Shared schema validation utilities.

Structured payloads (checkbox configuration, forced-key lists, embedded state
metadata, action inputs, settings) are validated with JSON Schema. Schemas are
stored as YAML files under ``checkbox_workflow/data/schemas/`` and loaded in a
single, consistent way.

Schemas may carry an ``x-messages`` mapping (keyword -> message) next to the
keywords they constrain; when a keyword fails, that message replaces the
generic jsonschema wording so users see e.g. ``Label must not be empty``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

from jsonschema import Draft202012Validator

from checkbox_workflow.core.exceptions import InputValidationError
from checkbox_workflow.data import file_exists, read_yaml

PathPart = Union[str, int]


@dataclass(frozen=True, slots=True)
class SchemaViolation:
    """One failed constraint: where it failed and why."""

    path: Tuple[PathPart, ...]
    message: str
    keyword: str = ""
    schema_path: Tuple[PathPart, ...] = ()

    def format(self) -> str:
        if self.path:
            locator = " → ".join(str(p) for p in self.path)
            return f"[{locator}] {self.message}"
        return self.message


class SchemaValidationError(InputValidationError):
    """Raised when a payload fails schema validation."""

    def __init__(self, message: str, *, violations: List[SchemaViolation], subject: str) -> None:
        super().__init__(
            message,
            context={
                "subject": subject,
                "violations": [v.format() for v in violations],
            },
        )
        self.violations = violations


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict.

    Canonical schema serialization format is YAML (JSON Schema expressed in YAML).
    Automatically appends ``.schema.yaml`` if no extension is present.

    Args:
        schema_name: Schema file name under the schemas root
            (e.g., "checkbox-config" or "checkbox-config.schema.yaml").

    Returns:
        Parsed schema dictionary.

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.schema.yaml"

    if not file_exists("schemas", schema_name):
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def _path_sort_key(path: Tuple[PathPart, ...]) -> List[Tuple[int, Any]]:
    # Array indices sort numerically, object keys lexically.
    return [(0, p) if isinstance(p, int) else (1, str(p)) for p in path]


def validate_payload_safe(payload: Any, schema_name: str) -> List[SchemaViolation]:
    """Validate a payload and return the violations (empty if valid).

    This is a safe variant that returns errors instead of raising exceptions,
    useful for collecting every problem in one pass.
    """
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)

    violations: List[SchemaViolation] = []
    for error in validator.iter_errors(payload):
        messages = error.schema.get("x-messages") if isinstance(error.schema, dict) else None
        message = error.message
        if isinstance(messages, dict) and error.validator in messages:
            message = str(messages[error.validator])
        violations.append(
            SchemaViolation(
                path=tuple(error.absolute_path),
                message=message,
                keyword=str(error.validator),
                schema_path=tuple(error.absolute_schema_path),
            )
        )

    violations.sort(key=lambda v: _path_sort_key(v.path))
    return violations


def format_violations(violations: List[SchemaViolation], context: str = "input") -> str:
    """Render violations as ``Invalid <context>:`` plus one indented line each."""
    lines = [f"  {v.format()}" for v in violations]
    return f"Invalid {context}:\n" + "\n".join(lines)


def validate_payload(payload: Any, schema_name: str, *, context: str = "input") -> None:
    """Validate a payload against a bundled JSON schema.

    Raises:
        SchemaValidationError: If validation fails; the message lists every
            violation with its path.
        FileNotFoundError: If schema doesn't exist.
    """
    violations = validate_payload_safe(payload, schema_name)
    if violations:
        raise SchemaValidationError(
            format_violations(violations, context),
            violations=violations,
            subject=context,
        )


__all__ = [
    "SchemaValidationError",
    "SchemaViolation",
    "format_violations",
    "load_schema",
    "validate_payload",
    "validate_payload_safe",
]
