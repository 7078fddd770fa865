import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'checkbox_workflow' and tests/helpers as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_checkbox_workflow_caches  # noqa: E402


_LEAK_PRONE_ENV_PREFIXES = ("CHECKBOX_WORKFLOW_", "INPUT_")
_LEAK_PRONE_ENV_KEYS = [
    "GITHUB_ACTIONS",
    "GITHUB_API_URL",
    "GITHUB_EVENT_PATH",
    "GITHUB_OUTPUT",
    "GITHUB_REPOSITORY",
]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch):
    """Strip Actions variables leaking in from a CI runner and reset caches."""
    for key in list(os.environ):
        if key.startswith(_LEAK_PRONE_ENV_PREFIXES) or key in _LEAK_PRONE_ENV_KEYS:
            monkeypatch.delenv(key, raising=False)
    reset_checkbox_workflow_caches()
    yield
    reset_checkbox_workflow_caches()


@pytest.fixture
def action_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Minimal GitHub Actions environment; returns the GITHUB_OUTPUT path."""
    output = tmp_path / "github_output"
    output.write_text("", encoding="utf-8")
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/widgets")
    monkeypatch.setenv("GITHUB_OUTPUT", str(output))
    monkeypatch.setenv("INPUT_ID", "review")
    monkeypatch.setenv("INPUT_NUMBER", "7")
    monkeypatch.setenv("INPUT_TOKEN", "ghs_test")
    return output
