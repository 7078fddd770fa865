"""
checkbox-workflow inspect command.

SUMMARY: Show the checkboxes and embedded state of a markdown document
"""

from __future__ import annotations

import argparse

from checkbox_workflow.cli import (
    OutputFormatter,
    add_action_id_arg,
    add_standard_flags,
    load_cli_settings,
    read_text_arg,
)
from checkbox_workflow.core.checkbox.comments import extract_previous_state, restore_template
from checkbox_workflow.core.checkbox.markdown import extract_state, parse_checkboxes
from checkbox_workflow.core.checkbox.state import changed_keys, has_state_changed

SUMMARY = "Show the checkboxes and embedded state of a markdown document"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        help="Markdown file to inspect ('-' for stdin)",
    )
    add_action_id_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        load_cli_settings(args)
        content = read_text_arg(args.path)
    except Exception as e:
        formatter.error(e, error_code="inspect_error")
        return 1

    items = parse_checkboxes(content)
    state = extract_state(content)
    action_id = getattr(args, "action_id", None)
    previous = extract_previous_state(content, action_id) if action_id else None

    if formatter.json_mode:
        payload = {
            "items": [
                {
                    "key": item.key,
                    "label": item.label,
                    "checked": item.checked,
                    "indentation": item.indentation,
                }
                for item in items
            ],
            "state": state,
            "template": restore_template(content),
        }
        if action_id:
            payload["previousState"] = previous
            payload["changed"] = has_state_changed(previous or {}, state)
            payload["changes"] = changed_keys(previous or {}, state)
        formatter.json_output(payload)
        return 0

    formatter.text(f"Checkboxes ({len(items)}):")
    for item in items:
        mark = "x" if item.checked else " "
        formatter.text(f"  {item.indentation}[{mark}] {item.key}: {item.label}")
    if action_id:
        if previous is None:
            formatter.text(f"No state metadata for '{action_id}'")
        else:
            changes = changed_keys(previous, state)
            formatter.text(f"Previous state for '{action_id}':")
            for key, value in previous.items():
                formatter.text_kv(key, value)
            formatter.text(f"Changed: {', '.join(changes) if changes else '(none)'}")
    formatter.text("Template:")
    formatter.text(restore_template(content))
    return 0
