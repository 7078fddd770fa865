"""Tests for section markers and the embedded state metadata."""
from __future__ import annotations

import base64
import json
import logging

import pytest

from checkbox_workflow.core.checkbox.comments import (
    BODY_END,
    BODY_START,
    MANAGED,
    attach_metadata,
    decode_state_metadata,
    encode_state_metadata,
    extract_previous_state,
    find_state_metadata,
    has_state_metadata,
    render_message,
    restore_template,
    strip_metadata_comments,
)


def _metadata_comment(action_id: str, payload: object) -> str:
    raw = json.dumps(payload).encode("utf-8")
    encoded = base64.b64encode(raw).decode("ascii")
    return f"<!-- checkbox-workflow-action:state:{action_id}:{encoded} -->"


def test_render_message_wraps_body_and_adds_managed_prefix() -> None:
    template = "# Header\n\n{{body}}\n\nFooter"
    checkboxes = "- [x] <!-- key1 --> Task 1\n- [ ] <!-- key2 --> Task 2"

    result = render_message(template, checkboxes)

    assert result == (
        "<!-- checkbox-workflow-action:managed -->\n"
        "# Header\n\n"
        "<!-- checkbox-workflow-action:body-start -->\n"
        "- [x] <!-- key1 --> Task 1\n"
        "- [ ] <!-- key2 --> Task 2\n"
        "<!-- checkbox-workflow-action:body-end -->\n\n"
        "Footer"
    )


def test_render_message_replaces_every_placeholder() -> None:
    result = render_message("{{body}} and {{body}}", "- [ ] Task")

    assert result.count(BODY_START) == 2
    assert result.count(BODY_END) == 2
    assert result.startswith(MANAGED + "\n")


def test_restore_template_inverts_rendering() -> None:
    template = "# H\n\n{{body}}\n\nFooter"
    rendered = attach_metadata(
        render_message(template, "- [ ] <!-- a --> A"),
        "review",
        {"a": False},
    )

    assert restore_template(rendered) == template


def test_restore_template_without_markers_returns_trimmed_content() -> None:
    assert restore_template("  plain text  \n") == "plain text"


def test_strip_metadata_comments_removes_every_action_id() -> None:
    content = "Body\n\n" + encode_state_metadata("one", {"a": True}) + "\n" + encode_state_metadata("two", {})

    assert strip_metadata_comments(content) == "Body"


def test_encode_state_metadata_is_single_line_base64() -> None:
    comment = encode_state_metadata("test-id", {"a": True, "b": False})

    assert "\n" not in comment
    prefix = "<!-- checkbox-workflow-action:state:test-id:"
    assert comment.startswith(prefix) and comment.endswith(" -->")
    encoded = comment[len(prefix):-len(" -->")]
    decoded = json.loads(base64.b64decode(encoded))
    assert decoded == {"id": "test-id", "previousState": {"a": True, "b": False}}


def test_attach_metadata_appends_after_blank_line() -> None:
    result = attach_metadata("Comment content", "test-id", {"a": True})

    assert result.startswith("Comment content\n\n<!-- checkbox-workflow-action:state:test-id:")


def test_metadata_round_trip() -> None:
    state = {"key1": True, "key2": False}
    comment = attach_metadata("Content", "test-id", state)

    assert extract_previous_state(comment, "test-id") == state
    metadata = decode_state_metadata(comment, "test-id")
    assert metadata is not None and metadata.id == "test-id"


def test_metadata_for_other_action_id_is_ignored() -> None:
    comment = attach_metadata("Content", "test-id", {"a": True})

    assert extract_previous_state(comment, "different-id") is None
    assert has_state_metadata(comment, "different-id") is False


def test_action_id_is_matched_literally() -> None:
    comment = attach_metadata("Content", "a.b", {"a": True})

    assert find_state_metadata(comment, "axb") is None
    assert find_state_metadata(comment, "a.b") is not None


def test_invalid_base64_is_treated_as_missing(caplog: pytest.LogCaptureFixture) -> None:
    comment = "Content\n\n<!-- checkbox-workflow-action:state:test-id:invalid-base64 -->"

    with caplog.at_level(logging.DEBUG, logger="checkbox_workflow"):
        assert extract_previous_state(comment, "test-id") is None

    assert any("test-id" in r.getMessage() for r in caplog.records)


def test_non_json_payload_is_treated_as_missing() -> None:
    encoded = base64.b64encode(b"not json").decode("ascii")
    comment = f"<!-- checkbox-workflow-action:state:test-id:{encoded} -->"

    assert extract_previous_state(comment, "test-id") is None


@pytest.mark.parametrize(
    "payload",
    [
        {"id": "test-id"},
        {"id": "test-id", "previousState": {"a": "yes"}},
        {"id": "", "previousState": {}},
        ["not", "an", "object"],
    ],
)
def test_schema_mismatch_is_treated_as_missing(payload: object) -> None:
    comment = "Content\n\n" + _metadata_comment("test-id", payload)

    assert extract_previous_state(comment, "test-id") is None


def test_missing_metadata_returns_none() -> None:
    assert extract_previous_state("Just regular content", "test-id") is None
    assert has_state_metadata(None, "test-id") is False
    assert has_state_metadata("", "test-id") is False
