"""Stdlib logging setup for the CLI.

Library modules only create module loggers (``logging.getLogger(__name__)``);
handlers are installed here, once per process, by the CLI entrypoint.

Inside GitHub Actions (``GITHUB_ACTIONS=true``) records are rendered as
workflow commands so the runner shows them as annotations::

    DEBUG    -> ::debug::message
    WARNING  -> ::warning::message
    ERROR+   -> ::error::message
    INFO     -> message
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Mapping, Optional, TextIO

_INSTALLED_HANDLER: logging.Handler | None = None

PACKAGE_LOGGER = "checkbox_workflow"


def _level_from_name(name: str) -> int:
    value = getattr(logging, str(name).upper(), None)
    return value if isinstance(value, int) else logging.INFO


def escape_workflow_data(value: str) -> str:
    """Escape a message for a ``::command::`` line (same rules as @actions/core)."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def in_github_actions(env: Optional[Mapping[str, str]] = None) -> bool:
    source = os.environ if env is None else env
    return str(source.get("GITHUB_ACTIONS", "")).lower() == "true"


class GitHubActionsFormatter(logging.Formatter):
    """Format records as GitHub Actions workflow commands."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return f"::error::{escape_workflow_data(message)}"
        if record.levelno >= logging.WARNING:
            return f"::warning::{escape_workflow_data(message)}"
        if record.levelno <= logging.DEBUG:
            return f"::debug::{escape_workflow_data(message)}"
        return message


def configure_logging(
    *,
    level: str = "INFO",
    fmt: str = "%(levelname)s %(name)s: %(message)s",
    github_actions: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """Install (or replace) the package's stderr handler.

    Idempotent per-process: a second call swaps the previously installed
    handler instead of stacking another one. Output goes to stderr so stdout
    stays machine-readable in ``--json`` mode.
    """
    global _INSTALLED_HANDLER

    logger = logging.getLogger(PACKAGE_LOGGER)
    if _INSTALLED_HANDLER is not None:
        logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    if github_actions:
        # Workflow commands carry their own severity; keep the bare message.
        handler.setFormatter(GitHubActionsFormatter("%(message)s"))
    else:
        handler.setFormatter(logging.Formatter(fmt))
    handler.setLevel(_level_from_name(level))

    logger.addHandler(handler)
    logger.setLevel(_level_from_name(level))
    logger.propagate = False

    _INSTALLED_HANDLER = handler
    return handler


def reset_logging_for_tests() -> None:
    """Test-only: remove the installed handler and restore propagation."""
    global _INSTALLED_HANDLER
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _INSTALLED_HANDLER is not None:
        logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
    _INSTALLED_HANDLER = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


__all__ = [
    "GitHubActionsFormatter",
    "configure_logging",
    "escape_workflow_data",
    "in_github_actions",
    "reset_logging_for_tests",
]
