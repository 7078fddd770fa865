"""HTML comment markers and the embedded state metadata codec.

Every marker is a single-line HTML comment under one prefix:

- ``<!-- checkbox-workflow-action:managed -->``: document prefix; the content
  was produced by this tool
- ``<!-- checkbox-workflow-action:body-start -->`` /
  ``<!-- checkbox-workflow-action:body-end -->``: wrap the rendered checkbox
  block that replaced ``{{body}}`` in the user template
- ``<!-- checkbox-workflow-action:state:<actionId>:<base64> -->``: previous
  state, base64 of JSON ``{"id": ..., "previousState": {...}}``

Markers appear once per document and are never nested, so plain string and
regex substitution is enough to render and to recover the template.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from typing import Mapping, Optional

from checkbox_workflow.core.schemas import validate_payload_safe

from .models import CheckboxState, StateMetadata

logger = logging.getLogger(__name__)

BASE_PREFIX = "checkbox-workflow-action"
BODY_PLACEHOLDER = "{{body}}"

MANAGED = f"<!-- {BASE_PREFIX}:managed -->"
BODY_START = f"<!-- {BASE_PREFIX}:body-start -->"
BODY_END = f"<!-- {BASE_PREFIX}:body-end -->"

MANAGED_PATTERN = re.compile(re.escape(MANAGED))
BODY_SECTION_PATTERN = re.compile(
    re.escape(BODY_START) + r".*?" + re.escape(BODY_END),
    re.DOTALL,
)
ANY_STATE_PATTERN = re.compile(rf"<!-- {re.escape(BASE_PREFIX)}:state:[^>]*-->")


def _state_pattern(action_id: str) -> re.Pattern[str]:
    return re.compile(
        rf"<!-- {re.escape(BASE_PREFIX)}:state:{re.escape(action_id)}:([^\s]+) -->"
    )


# ---------------------------------------------------------------------------
# Section markers
# ---------------------------------------------------------------------------


def managed_prefix() -> str:
    return f"{MANAGED}\n"


def body_section(content: str) -> str:
    """Wrap rendered checkboxes between the body markers."""
    return f"{BODY_START}\n{content}\n{BODY_END}"


def strip_managed_prefix(content: str) -> str:
    return MANAGED_PATTERN.sub("", content, count=1).strip()


def strip_metadata_comments(content: str) -> str:
    """Remove every state comment, whatever its action id."""
    return ANY_STATE_PATTERN.sub("", content).strip()


def replace_body_section_with_placeholder(content: str) -> str:
    return BODY_SECTION_PATTERN.sub(lambda _m: BODY_PLACEHOLDER, content, count=1)


def render_message(template: str, checkboxes_markdown: str) -> str:
    """Substitute every ``{{body}}`` with the wrapped checkbox block.

    The managed marker is always emitted as the first line.
    """
    section = body_section(checkboxes_markdown)
    return managed_prefix() + template.replace(BODY_PLACEHOLDER, section)


def restore_template(markdown: str) -> str:
    """Recover the user template from a rendered document.

    Inverse of :func:`render_message` plus :func:`attach_metadata`: the managed
    marker and state comments are dropped and the checkbox block becomes
    ``{{body}}`` again.
    """
    without_prefix = strip_managed_prefix(markdown)
    without_metadata = strip_metadata_comments(without_prefix)
    return replace_body_section_with_placeholder(without_metadata).strip()


# ---------------------------------------------------------------------------
# State metadata
# ---------------------------------------------------------------------------


def encode_state_metadata(action_id: str, state: Mapping[str, bool]) -> str:
    """Return the single-line state comment for ``action_id``."""
    payload = StateMetadata(id=action_id, previous_state=dict(state)).to_dict()
    raw = json.dumps(payload, separators=(",", ":"))
    encoded = base64.b64encode(raw.encode("utf-8")).decode("ascii")
    return f"<!-- {BASE_PREFIX}:state:{action_id}:{encoded} -->"


def find_state_metadata(content: str, action_id: str) -> Optional[str]:
    """Return the raw base64 payload stored for ``action_id``, if any."""
    match = _state_pattern(action_id).search(content)
    if match and match.group(1):
        return match.group(1)
    return None


def has_state_metadata(content: Optional[str], action_id: str) -> bool:
    return bool(content) and find_state_metadata(content or "", action_id) is not None


def decode_state_metadata(content: str, action_id: str) -> Optional[StateMetadata]:
    """Decode the state comment for ``action_id``.

    Returns None when there is no comment for this id or when its payload is
    not valid base64, not JSON, or does not match the metadata schema. A
    missing or foreign payload means "no previous state", never an error.
    """
    encoded = find_state_metadata(content, action_id)
    if encoded is None:
        return None

    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        data = json.loads(decoded)
    except (binascii.Error, ValueError) as exc:
        logger.debug("Ignoring undecodable state metadata for %s: %s", action_id, exc)
        return None

    violations = validate_payload_safe(data, "state-metadata")
    if violations:
        logger.debug(
            "Ignoring state metadata for %s: %s",
            action_id,
            "; ".join(v.format() for v in violations),
        )
        return None
    return StateMetadata.from_dict(data)


def extract_previous_state(content: str, action_id: str) -> Optional[CheckboxState]:
    """Previous state stored in ``content`` for ``action_id`` (None if absent)."""
    metadata = decode_state_metadata(content, action_id)
    return metadata.previous_state if metadata is not None else None


def attach_metadata(message: str, action_id: str, state: Mapping[str, bool]) -> str:
    """Append the state comment to rendered message content."""
    return f"{message}\n\n{encode_state_metadata(action_id, state)}"


__all__ = [
    "BASE_PREFIX",
    "BODY_PLACEHOLDER",
    "MANAGED",
    "BODY_START",
    "BODY_END",
    "managed_prefix",
    "body_section",
    "strip_managed_prefix",
    "strip_metadata_comments",
    "replace_body_section_with_placeholder",
    "render_message",
    "restore_template",
    "encode_state_metadata",
    "find_state_metadata",
    "has_state_metadata",
    "decode_state_metadata",
    "extract_previous_state",
    "attach_metadata",
]
