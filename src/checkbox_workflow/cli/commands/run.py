"""
checkbox-workflow run command.

SUMMARY: Run the checkbox workflow against an issue or pull request
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from checkbox_workflow.cli import (
    OutputFormatter,
    add_action_id_arg,
    add_standard_flags,
    load_cli_settings,
)
from checkbox_workflow.core.action import (
    load_event_updated_at,
    resolve_action_inputs,
    resolve_repository,
    write_github_outputs,
)
from checkbox_workflow.core.github import GitHubClient
from checkbox_workflow.core.stdlib_logging import in_github_actions
from checkbox_workflow.core.workflow import CheckboxWorkflow

SUMMARY = "Run the checkbox workflow against an issue or pull request"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    add_action_id_arg(parser)
    parser.add_argument(
        "--number",
        type=int,
        default=None,
        help="Issue or pull request number (default: $INPUT_NUMBER)",
    )
    parser.add_argument(
        "--message",
        default=None,
        help="Template text; {{body}} marks where the checkboxes go",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Checkbox configuration (JSON array); presence selects configuration mode",
    )
    parser.add_argument(
        "--force-checked",
        dest="force_checked",
        default=None,
        help="JSON array of keys to force checked",
    )
    parser.add_argument(
        "--body",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Target the issue body instead of a tracked comment",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="GitHub token (default: $INPUT_TOKEN)",
    )
    parser.add_argument(
        "--repo",
        default=None,
        help="Repository as owner/name (default: $GITHUB_REPOSITORY)",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    env = os.environ
    formatter = OutputFormatter(
        json_mode=getattr(args, "json", False),
        github_actions=in_github_actions(env),
    )
    try:
        settings = load_cli_settings(args, env)
        inputs = resolve_action_inputs(
            env,
            {
                "id": getattr(args, "action_id", None),
                "number": getattr(args, "number", None),
                "message": getattr(args, "message", None),
                "config": getattr(args, "config", None),
                "force_checked": getattr(args, "force_checked", None),
                "body": getattr(args, "body", None),
                "token": getattr(args, "token", None),
            },
        )
        repository = resolve_repository(getattr(args, "repo", None), env)
        gateway = GitHubClient.from_settings(inputs.token, repository, settings)
        workflow = CheckboxWorkflow(
            gateway,
            inputs,
            event_updated_at=load_event_updated_at(env),
        )
        outputs = workflow.run()
    except Exception as e:
        logger.debug("Run failed", exc_info=True)
        formatter.error(e, error_code="run_error")
        return 1

    output_map = outputs.to_output_map()
    output_file = env.get("GITHUB_OUTPUT")
    if output_file:
        write_github_outputs(output_map, Path(output_file))

    if formatter.json_mode:
        formatter.json_output(outputs.to_dict())
    else:
        for name, value in output_map.items():
            formatter.text(f"{name}={value}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
