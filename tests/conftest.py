import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'packinit' and tests/ importable for 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from packinit.core.stdlib_logging import reset_stdlib_logging_for_tests
from packinit.core.setup.questionnaire.prompts import ScriptedAnswerSource
from helpers.answers import answers


@pytest.fixture(autouse=True)
def _isolate_packinit_env(monkeypatch):
    """Drop PACKINIT_* overrides inherited from the developer's shell."""
    for key in list(os.environ):
        if key.startswith("PACKINIT_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_stdlib_logging_for_tests()


@pytest.fixture
def scripted():
    """Build a ScriptedAnswerSource from default answers plus overrides."""

    def _make(overrides=None, **kwargs):
        return ScriptedAnswerSource(answers(overrides, **kwargs))

    return _make


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root
