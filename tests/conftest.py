# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Allow running the tests without `pip install -e .`
sys.path.insert(0, str(Path(__file__).parent.parent))

import llmclip


class FakeSink(llmclip.ClipboardSink):
    """Records clipboard writes instead of touching the real clipboard."""

    def __init__(self):
        self.writes = []

    def write(self, text):
        self.writes.append(text)


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def no_tools(monkeypatch):
    """Pretend fd, fzf, tree and bat are not installed."""
    monkeypatch.setattr(llmclip.shutil, "which", lambda name: None)


@pytest.fixture
def sample_dir(tmp_path):
    """proj/ with a.txt ("hello") and b.txt ("world")."""
    root = tmp_path.resolve()
    proj = root / "proj"
    proj.mkdir()
    (proj / "a.txt").write_text("hello", encoding="utf-8")
    (proj / "b.txt").write_text("world", encoding="utf-8")
    return root


@pytest.fixture
def project(tmp_path):
    """
    A small repository-like tree:
    1. plain source files
    2. files excluded by .gitignore (src/debug.log, build/)
    3. a nested .ignore file (docs/draft.md)
    4. hidden entries and a .git directory
    """
    root = tmp_path.resolve()
    (root / "src").mkdir()
    (root / "build").mkdir()
    (root / "docs").mkdir()
    (root / ".hidden").mkdir()
    (root / ".git").mkdir()

    (root / "README.md").write_text("# Project\n", encoding="utf-8")
    (root / "src" / "main.py").write_text("print('main')\n", encoding="utf-8")
    (root / "src" / "util.py").write_text("def util(): pass\n", encoding="utf-8")
    (root / "src" / "debug.log").write_text("error...\n", encoding="utf-8")
    (root / "build" / "out.js").write_text("x()\n", encoding="utf-8")
    (root / "docs" / "guide.md").write_text("guide\n", encoding="utf-8")
    (root / "docs" / "draft.md").write_text("draft\n", encoding="utf-8")
    (root / "docs" / ".ignore").write_text("draft.md\n", encoding="utf-8")
    (root / ".hidden" / "secret.txt").write_text("s3cret\n", encoding="utf-8")
    (root / ".env").write_text("TOKEN=1\n", encoding="utf-8")
    (root / ".git" / "config").write_text("[core]\n", encoding="utf-8")
    (root / ".gitignore").write_text("*.log\nbuild/\n", encoding="utf-8")
    return root
