"""Unified CLI output formatting utilities.

Consistent output formatting for all commands, supporting both JSON and
text output modes, plus GitHub Actions error annotations.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from checkbox_workflow.core.stdlib_logging import escape_workflow_data


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2, github_actions: bool = False):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON; otherwise output text
            indent: JSON indentation level
            github_actions: If True, errors are emitted as ``::error::`` commands
        """
        self.json_mode = json_mode
        self.indent = indent
        self.github_actions = github_actions

    def error(
        self,
        error: BaseException,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Output error result.

        Args:
            error: The exception that occurred
            message: Optional human-readable message (defaults to str(error))
            error_code: Error code for JSON output
        """
        msg = message or str(error) or "Unknown error occurred"
        if self.json_mode:
            output: Dict[str, Any] = {
                "error": error_code,
                "message": msg,
            }
            to_json_error = getattr(error, "to_json_error", None)
            if callable(to_json_error):
                output["details"] = to_json_error()
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        elif self.github_actions:
            print(f"::error::{escape_workflow_data(msg)}", file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        """Output raw JSON data."""
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        """Output plain text message."""
        print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        """Output key-value pair in text mode."""
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")


__all__ = ["OutputFormatter"]
