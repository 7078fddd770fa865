"""Tests for the checkbox-workflow CLI through the dispatcher."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from checkbox_workflow.cli import OutputFormatter
from checkbox_workflow.cli._dispatcher import build_parser, discover_root_commands, main
from checkbox_workflow.cli.commands import run as run_command
from checkbox_workflow.core.checkbox.comments import attach_metadata, extract_previous_state
from checkbox_workflow.core.exceptions import GitHubAPIError

from helpers.fake_github import FakeGitHub

CONFIG = '[{a: "Task A"}, {b: "Task B"}]'


@pytest.fixture
def fake_gateway(monkeypatch: pytest.MonkeyPatch) -> FakeGitHub:
    gateway = FakeGitHub()
    created: Dict[str, Any] = {}

    class _Client:
        @classmethod
        def from_settings(cls, token, repository, settings):
            created.update(token=token, repository=repository, settings=settings)
            return gateway

    monkeypatch.setattr(run_command, "GitHubClient", _Client)
    gateway.created = created  # type: ignore[attr-defined]
    return gateway


def _read_outputs(path: Path) -> Dict[str, str]:
    outputs = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        name, _, value = line.partition("=")
        outputs[name] = value
    return outputs


def test_discovers_commands() -> None:
    assert {"run", "render", "inspect"} <= set(discover_root_commands())


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--version"])

    assert excinfo.value.code == 0
    assert "checkbox-workflow 1.0.0" in capsys.readouterr().out


def test_run_config_mode_writes_outputs(
    action_env: Path, fake_gateway: FakeGitHub, capsys: pytest.CaptureFixture[str]
) -> None:
    code = main(["run", "--config", CONFIG, "--message", "{{body}}"])

    assert code == 0
    outputs = _read_outputs(action_env)
    assert outputs["retrieved"] == "true"
    assert outputs["changed"] == "false"
    assert outputs["state"] == '{"a":false,"b":false}'
    assert outputs["all-checked"] == "false"
    assert outputs["comment-id"] == "1000"
    assert "changed=false" in capsys.readouterr().out
    assert fake_gateway.created["token"] == "ghs_test"
    assert fake_gateway.created["repository"].full_name == "octo/widgets"


def test_bare_invocation_runs_from_action_inputs(
    action_env: Path, fake_gateway: FakeGitHub, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("INPUT_CONFIG", CONFIG)

    assert main([]) == 0
    assert _read_outputs(action_env)["retrieved"] == "true"


def test_run_detection_json_output(
    action_env: Path, fake_gateway: FakeGitHub, capsys: pytest.CaptureFixture[str]
) -> None:
    body = attach_metadata("- [x] <!-- a --> Task A\n- [ ] <!-- b --> Task B", "review", {"a": False, "b": False})
    fake_gateway.add_comment(body)
    fake_gateway.issue_updated_at = "2000-01-01T00:00:00Z"

    code = main(["run", "--json"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "retrieved": True,
        "changed": True,
        "state": {"a": True, "b": False},
        "changes": ["a"],
        "allChecked": False,
        "commentId": 1000,
    }
    assert extract_previous_state(fake_gateway.comments[1000], "review") == {"a": True, "b": False}


def test_run_invalid_inputs_fails_without_outputs(
    action_env: Path, fake_gateway: FakeGitHub, capsys: pytest.CaptureFixture[str]
) -> None:
    code = main(["run", "--number", "0"])

    assert code == 1
    assert "Invalid action inputs:" in capsys.readouterr().err
    assert action_env.read_text(encoding="utf-8") == ""


def test_run_failure_is_reported_as_workflow_error(
    action_env: Path,
    fake_gateway: FakeGitHub,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("GITHUB_ACTIONS", "true")

    def boom(*_args: object) -> None:
        raise GitHubAPIError("GitHub API GET x failed with HTTP 500", status=500)

    monkeypatch.setattr(fake_gateway, "find_comment", boom)

    code = main(["run"])

    assert code == 1
    assert "::error::GitHub API GET x failed with HTTP 500" in capsys.readouterr().err
    assert action_env.read_text(encoding="utf-8") == ""


def test_run_invalid_config_message(
    action_env: Path, fake_gateway: FakeGitHub, capsys: pytest.CaptureFixture[str]
) -> None:
    code = main(["run", "--config", "[]"])

    assert code == 1
    err = capsys.readouterr().err
    assert "Invalid checkbox configuration:" in err
    assert "Config must contain at least one item" in err


def test_render_prints_document(capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["render", "--id", "review", "--config", CONFIG, "--force-checked", '["a"]'])

    assert code == 0
    out = capsys.readouterr().out
    assert "- [x] <!-- a --> Task A" in out
    assert "- [ ] <!-- b --> Task B" in out
    assert extract_previous_state(out, "review") == {"a": True, "b": False}


def test_render_json_from_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_file = tmp_path / "checklist.json5"
    config_file.write_text(CONFIG, encoding="utf-8")

    code = main(["render", "--id", "review", "--config-file", str(config_file), "--json"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["state"] == {"a": False, "b": False}
    assert payload["items"] == [{"key": "a", "label": "Task A"}, {"key": "b", "label": "Task B"}]
    assert payload["allChecked"] is False


def test_render_invalid_config_json_error(capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["render", "--id", "review", "--config", "[{a: ''}]", "--json"])

    assert code == 1
    payload = json.loads(capsys.readouterr().err)
    assert payload["error"] == "render_error"
    assert payload["details"]["code"] == "ConfigError"
    assert payload["details"]["context"]["kind"] == "field"


def test_inspect_reports_state_and_changes(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    doc = tmp_path / "comment.md"
    doc.write_text(
        attach_metadata("- [x] <!-- a --> Task A\n- [ ] <!-- b --> Task B", "review", {"a": False, "b": False}),
        encoding="utf-8",
    )

    code = main(["inspect", str(doc), "--id", "review", "--json"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["state"] == {"a": True, "b": False}
    assert payload["previousState"] == {"a": False, "b": False}
    assert payload["changes"] == ["a"]
    assert [item["key"] for item in payload["items"]] == ["a", "b"]


def test_inspect_text_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    doc = tmp_path / "comment.md"
    doc.write_text("- [ ] <!-- a --> Task A\n", encoding="utf-8")

    code = main(["inspect", str(doc), "--id", "review"])

    assert code == 0
    out = capsys.readouterr().out
    assert "Checkboxes (1):" in out
    assert "[ ] a: Task A" in out
    assert "No state metadata for 'review'" in out


def test_inspect_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["inspect", str(tmp_path / "missing.md")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_formatter_falls_back_to_unknown_error(capsys: pytest.CaptureFixture[str]) -> None:
    OutputFormatter().error(RuntimeError())

    assert capsys.readouterr().err.strip() == "Error: Unknown error occurred"


def test_formatter_key_values_only_in_text_mode(capsys: pytest.CaptureFixture[str]) -> None:
    OutputFormatter(json_mode=True).text_kv("a", True)
    OutputFormatter().text_kv("a", True)

    assert capsys.readouterr().out == "  a: True\n"
