"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from checkbox_workflow.core.config import load_settings
from checkbox_workflow.core.stdlib_logging import configure_logging, in_github_actions


def load_cli_settings(
    args: argparse.Namespace,
    env: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Load settings and install logging for a command invocation.

    ``--verbose`` forces DEBUG regardless of the configured level.
    """
    env = os.environ if env is None else env
    settings = load_settings(getattr(args, "settings", None), env=env)
    log_cfg = settings.get("logging", {})
    level = "DEBUG" if getattr(args, "verbose", False) else str(log_cfg.get("level", "INFO"))
    configure_logging(
        level=level,
        fmt=str(log_cfg.get("format") or "%(levelname)s %(name)s: %(message)s"),
        github_actions=in_github_actions(env),
    )
    return settings


def read_text_arg(value: str) -> str:
    """Read a file argument; ``-`` means stdin."""
    if value == "-":
        return sys.stdin.read()
    return Path(value).read_text(encoding="utf-8")


__all__ = ["load_cli_settings", "read_text_arg"]
