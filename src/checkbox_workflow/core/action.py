"""GitHub Actions inputs, outputs and event context.

Inputs arrive as ``INPUT_<NAME>`` environment variables (the runner
upper-cases the name and keeps dashes) and may be overridden by CLI flags.
Outputs are appended to the file named by ``GITHUB_OUTPUT``.
"""
from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from checkbox_workflow.core.checkbox.models import CheckboxState
from checkbox_workflow.core.exceptions import InputValidationError
from checkbox_workflow.core.github.client import parse_repository
from checkbox_workflow.core.github.models import Repository
from checkbox_workflow.core.schemas import validate_payload
from checkbox_workflow.core.utils.time import parse_iso8601

logger = logging.getLogger(__name__)

INPUTS_CONTEXT = "action inputs"


@dataclass(frozen=True, slots=True)
class ActionInputs:
    """Validated action inputs.

    Attributes:
        id: Scopes the embedded metadata (several checklists per thread)
        number: Target issue or pull request number
        message: Template text; ``{{body}}`` marks where checkboxes go
        config: Relaxed-JSON checkbox config; presence selects configuration mode
        force_checked: JSON array of keys to force checked
        body: Target the issue body instead of a tracked comment
        token: GitHub token
    """

    id: str
    number: int
    message: str
    config: Optional[str]
    force_checked: Optional[str]
    body: bool
    token: str

    def __repr__(self) -> str:
        # Keep the token out of logs and tracebacks.
        return (
            f"ActionInputs(id={self.id!r}, number={self.number!r}, body={self.body!r}, "
            f"config={'set' if self.config else None}, "
            f"force_checked={self.force_checked!r})"
        )


@dataclass(slots=True)
class ActionOutputs:
    """Result of one run, in the shape the action exposes."""

    retrieved: bool
    changed: bool
    state: CheckboxState = field(default_factory=dict)
    changes: List[str] = field(default_factory=list)
    all_checked: bool = False
    comment_id: Optional[int] = None

    def to_output_map(self) -> Dict[str, str]:
        """Output name -> string value, as written to ``GITHUB_OUTPUT``."""
        outputs = {
            "retrieved": _bool_str(self.retrieved),
            "changed": _bool_str(self.changed),
            "state": json.dumps(self.state, separators=(",", ":")),
            "changes": json.dumps(self.changes, separators=(",", ":")),
            "all-checked": _bool_str(self.all_checked),
        }
        if self.comment_id:
            outputs["comment-id"] = str(self.comment_id)
        return outputs

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "retrieved": self.retrieved,
            "changed": self.changed,
            "state": dict(self.state),
            "changes": list(self.changes),
            "allChecked": self.all_checked,
        }
        if self.comment_id:
            data["commentId"] = self.comment_id
        return data


def _bool_str(value: bool) -> str:
    return "true" if value else "false"


def get_input(env: Mapping[str, str], name: str) -> Optional[str]:
    """Read ``INPUT_<NAME>``; dashes may also be spelled as underscores."""
    upper = name.upper()
    for key in (f"INPUT_{upper}", f"INPUT_{upper.replace('-', '_')}"):
        if key in env:
            return env[key]
    return None


def _coerce_number(raw: Any) -> Any:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    text = str(raw if raw is not None else "").strip()
    try:
        return int(text, 10)
    except ValueError:
        # Left as-is so schema validation reports it.
        return text


def _coerce_body(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw or "").strip().lower() == "true"


def _optional_text(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    return raw if raw.strip() else None


def resolve_action_inputs(
    env: Mapping[str, str],
    overrides: Optional[Mapping[str, Any]] = None,
) -> ActionInputs:
    """Merge ``INPUT_*`` variables with CLI overrides and validate them.

    ``overrides`` keys: ``id``, ``number``, ``message``, ``config``,
    ``force_checked``, ``body``, ``token``. ``None`` values are ignored.

    Raises:
        InputValidationError: ``Invalid action inputs:`` with one line per
            violated field.
    """
    raw: Dict[str, Any] = {
        "id": get_input(env, "id"),
        "number": get_input(env, "number"),
        "message": get_input(env, "message"),
        "config": get_input(env, "config"),
        "force_checked": get_input(env, "force-checked"),
        "body": get_input(env, "body"),
        "token": get_input(env, "token"),
    }
    for key, value in (overrides or {}).items():
        if value is not None:
            raw[key] = value

    payload: Dict[str, Any] = {
        "id": raw["id"] if raw["id"] is not None else "",
        "number": _coerce_number(raw["number"]),
        "message": raw["message"] or "",
        "body": _coerce_body(raw["body"]),
        "token": raw["token"] if raw["token"] is not None else "",
    }
    config = _optional_text(raw["config"])
    force_checked = _optional_text(raw["force_checked"])
    if config is not None:
        payload["config"] = config
    if force_checked is not None:
        payload["forceChecked"] = force_checked

    validate_payload(payload, "action-inputs", context=INPUTS_CONTEXT)

    return ActionInputs(
        id=payload["id"],
        number=payload["number"],
        message=payload["message"],
        config=config,
        force_checked=force_checked,
        body=payload["body"],
        token=payload["token"],
    )


def resolve_repository(value: Optional[str], env: Mapping[str, str]) -> Repository:
    """Repository from ``--repo`` or ``GITHUB_REPOSITORY``."""
    candidate = value or env.get("GITHUB_REPOSITORY") or ""
    try:
        return parse_repository(candidate)
    except ValueError as exc:
        raise InputValidationError(
            f"Invalid {INPUTS_CONTEXT}:\n  [repository] {exc}",
            context={"repository": candidate},
        ) from exc


def load_event_updated_at(env: Mapping[str, str]) -> Optional[datetime]:
    """``issue.updated_at`` from the triggering event payload, if available.

    Unreadable or missing payloads yield None; the runner then falls back to
    the current time.
    """
    event_path = env.get("GITHUB_EVENT_PATH")
    if not event_path:
        return None
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("Could not read event payload %s: %s", event_path, exc)
        return None

    issue = payload.get("issue") if isinstance(payload, dict) else None
    if not isinstance(issue, dict):
        issue = payload.get("pull_request") if isinstance(payload, dict) else None
    updated_at = issue.get("updated_at") if isinstance(issue, dict) else None
    if not isinstance(updated_at, str) or not updated_at:
        return None
    try:
        return parse_iso8601(updated_at)
    except ValueError:
        logger.debug("Ignoring unparsable event timestamp %r", updated_at)
        return None


def write_github_outputs(outputs: Mapping[str, str], path: Path) -> None:
    """Append outputs to the ``GITHUB_OUTPUT`` file.

    Multi-line values use the heredoc form with a random delimiter.
    """
    lines: List[str] = []
    for name, value in outputs.items():
        if "\n" in value or "\r" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            lines.append(f"{name}<<{delimiter}\n{value}\n{delimiter}")
        else:
            lines.append(f"{name}={value}")
    with open(path, "a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")


__all__ = [
    "ActionInputs",
    "ActionOutputs",
    "INPUTS_CONTEXT",
    "get_input",
    "resolve_action_inputs",
    "resolve_repository",
    "load_event_updated_at",
    "write_github_outputs",
]
