"""
checkbox-workflow CLI package.

Commands are auto-discovered from ``checkbox_workflow/cli/commands``; each
module exposes ``SUMMARY``, ``register_args(parser)`` and ``main(args)``.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Settings/logging bootstrap and input helpers
"""
from ._output import OutputFormatter
from ._args import (
    add_json_flag,
    add_verbose_flag,
    add_settings_flag,
    add_action_id_arg,
    add_standard_flags,
)
from ._utils import load_cli_settings, read_text_arg

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_verbose_flag",
    "add_settings_flag",
    "add_action_id_arg",
    "add_standard_flags",
    # Utilities
    "load_cli_settings",
    "read_text_arg",
]
