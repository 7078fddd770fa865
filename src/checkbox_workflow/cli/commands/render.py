"""
checkbox-workflow render command.

SUMMARY: Render a checklist from a configuration without calling the API
"""

from __future__ import annotations

import argparse
import sys

from checkbox_workflow.cli import (
    OutputFormatter,
    add_action_id_arg,
    add_standard_flags,
    load_cli_settings,
    read_text_arg,
)
from checkbox_workflow.core.checkbox.state import all_checked
from checkbox_workflow.core.workflow import render_configured_checklist

SUMMARY = "Render a checklist from a configuration without calling the API"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_action_id_arg(parser, required=True)
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--config",
        default=None,
        help="Checkbox configuration (JSON array)",
    )
    source.add_argument(
        "--config-file",
        dest="config_file",
        default=None,
        help="Read the configuration from a file ('-' for stdin)",
    )
    parser.add_argument(
        "--force-checked",
        dest="force_checked",
        default=None,
        help="JSON array of keys to force checked",
    )
    parser.add_argument(
        "--message",
        default="",
        help="Template text; {{body}} marks where the checkboxes go",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        load_cli_settings(args)
        config = args.config if args.config is not None else read_text_arg(args.config_file)
        rendered = render_configured_checklist(
            config,
            args.action_id,
            message=args.message or "",
            force_checked=args.force_checked,
        )
    except Exception as e:
        formatter.error(e, error_code="render_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(
            {
                "content": rendered.content,
                "state": rendered.state,
                "allChecked": all_checked(rendered.state),
                "items": [pair.to_dict() for pair in rendered.pairs],
            }
        )
    else:
        formatter.text(rendered.content)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
