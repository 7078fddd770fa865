from __future__ import annotations

from typing import Any, Dict, Mapping


class CheckboxWorkflowError(Exception):
    """Base exception for checkbox-workflow."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class InputValidationError(CheckboxWorkflowError, ValueError):
    """Raised when action inputs or CLI parameters fail validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        CheckboxWorkflowError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ConfigError(InputValidationError):
    """Raised when a checkbox configuration cannot be parsed or validated.

    ``kind`` is one of:
    - ``syntax``: the text is not parseable
    - ``shape``: not an array, empty array, or an item with the wrong arity
    - ``field``: empty key or label, or a duplicate key
    """

    SYNTAX = "syntax"
    SHAPE = "shape"
    FIELD = "field"

    def __init__(
        self,
        message: str,
        *,
        kind: str,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["kind"] = kind
        super().__init__(message, context=ctx)
        self.kind = kind


class SettingsError(CheckboxWorkflowError):
    """Raised when tool settings (YAML/env) are invalid."""


class GitHubAPIError(CheckboxWorkflowError, RuntimeError):
    """Raised when a GitHub REST API call fails."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        method: str | None = None,
        url: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if status is not None:
            ctx["status"] = status
        if method:
            ctx["method"] = method
        if url:
            ctx["url"] = url
        CheckboxWorkflowError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)
        self.status = status


__all__ = [
    "CheckboxWorkflowError",
    "InputValidationError",
    "ConfigError",
    "SettingsError",
    "GitHubAPIError",
]
