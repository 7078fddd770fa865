"""Checkbox configuration parsing.

The configuration is a relaxed-JSON array with one single-key object per
checkbox::

    [
      {a: "Task A"},
      {b: {label: "Task B", note: "extra fields are ignored"}},
    ]

The text is JSON5 (unquoted keys, single quotes, trailing commas, comments),
parsed with the ``json5`` package and then validated against
``checkbox-config.schema.yaml``.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import json5

from checkbox_workflow.core.exceptions import ConfigError, InputValidationError
from checkbox_workflow.core.schemas import (
    SchemaViolation,
    format_violations,
    validate_payload,
    validate_payload_safe,
)

from .models import ConfigPair

CONFIG_CONTEXT = "checkbox configuration"
CHECKED_CONTEXT = "checked parameter"


def _classify(violations: List[SchemaViolation]) -> str:
    """Shape problems (array/item arity) win over field problems (key/label)."""
    for v in violations:
        is_field = "propertyNames" in v.schema_path or len(v.path) >= 2
        if not is_field:
            return ConfigError.SHAPE
    return ConfigError.FIELD


def _duplicate_key_violations(config: List[Dict[str, Any]]) -> List[SchemaViolation]:
    seen: Dict[str, int] = {}
    violations: List[SchemaViolation] = []
    for index, item in enumerate(config):
        key = next(iter(item))
        if key in seen:
            violations.append(
                SchemaViolation(
                    path=(index, key),
                    message=f"Duplicate key (first defined at index {seen[key]})",
                    keyword="uniqueKeys",
                )
            )
        else:
            seen[key] = index
    return violations


def parse_config(text: str) -> List[Dict[str, Any]]:
    """Parse and validate a relaxed-JSON checkbox configuration.

    Raises:
        ConfigError: ``kind`` tells syntax, shape and field errors apart.
    """
    try:
        parsed = json5.loads(text)
    except ValueError as exc:
        raise ConfigError(
            f"Invalid {CONFIG_CONTEXT} syntax: {exc}",
            kind=ConfigError.SYNTAX,
        ) from exc

    violations = validate_payload_safe(parsed, "checkbox-config")
    if not violations:
        violations = _duplicate_key_violations(parsed)
    if violations:
        raise ConfigError(
            format_violations(violations, CONFIG_CONTEXT),
            kind=_classify(violations),
            context={"violations": [v.format() for v in violations]},
        )
    return parsed


def extract_key_and_label(item: Dict[str, Any]) -> ConfigPair:
    """Turn one validated config item into a key/label pair."""
    if len(item) != 1:
        raise ConfigError(
            f"Invalid {CONFIG_CONTEXT}:\n  Each config item must have exactly one key-value pair",
            kind=ConfigError.SHAPE,
        )
    key, value = next(iter(item.items()))
    if isinstance(value, str):
        return ConfigPair(key=key, label=value)
    return ConfigPair(key=key, label=value["label"])


def extract_config_pairs(config: List[Dict[str, Any]]) -> List[ConfigPair]:
    """Key/label pairs in configuration order."""
    return [extract_key_and_label(item) for item in config]


def load_config_pairs(text: str) -> List[ConfigPair]:
    """Parse, validate and flatten a configuration string in one step."""
    return extract_config_pairs(parse_config(text))


def parse_forced_keys(text: str) -> List[str]:
    """Parse the ``force-checked`` input: a strict JSON array of strings.

    Raises:
        InputValidationError: ``Invalid checked parameter: ...`` for syntax
            and schema problems alike.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputValidationError(
            f"Invalid {CHECKED_CONTEXT}: Invalid {CHECKED_CONTEXT} syntax: {exc}"
        ) from exc

    try:
        validate_payload(parsed, "string-array", context=CHECKED_CONTEXT)
    except InputValidationError as exc:
        raise InputValidationError(f"Invalid {CHECKED_CONTEXT}: {exc}") from exc
    return list(parsed)


__all__ = [
    "CONFIG_CONTEXT",
    "CHECKED_CONTEXT",
    "parse_config",
    "extract_key_and_label",
    "extract_config_pairs",
    "load_config_pairs",
    "parse_forced_keys",
]
