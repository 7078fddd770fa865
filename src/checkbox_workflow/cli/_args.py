"""Common CLI argument registration utilities.

Reusable argument registration functions shared by the commands under
``checkbox_workflow.cli.commands``.
"""
from __future__ import annotations

import argparse
from pathlib import Path


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag (forces DEBUG logging)."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )


def add_settings_flag(parser: argparse.ArgumentParser) -> None:
    """Add --settings flag pointing at a YAML settings file."""
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="YAML settings file (default: $CHECKBOX_WORKFLOW_SETTINGS or bundled defaults)",
    )


def add_action_id_arg(parser: argparse.ArgumentParser, required: bool = False) -> None:
    """Add --id (action identifier that scopes the embedded metadata)."""
    parser.add_argument(
        "--id",
        dest="action_id",
        required=required,
        help="Action identifier scoping the embedded state metadata",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Flags every command accepts: --json, --verbose, --settings."""
    add_json_flag(parser)
    add_verbose_flag(parser)
    add_settings_flag(parser)


__all__ = [
    "add_json_flag",
    "add_verbose_flag",
    "add_settings_flag",
    "add_action_id_arg",
    "add_standard_flags",
]
