"""Pytest configuration and fixtures."""

import shutil
import subprocess
import sys
from pathlib import Path

import pytest

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


class RecordingOracle:
    """Fake IgnoreOracle with canned verdicts that counts calls per path."""

    def __init__(self, ignored=None, error=None):
        self.ignored = {str(p) for p in (ignored or [])}
        self.error = error
        self.calls: list[str] = []

    def is_ignored(self, path) -> bool:
        self.calls.append(str(path))
        if self.error is not None:
            raise self.error
        return str(path) in self.ignored

    def count(self, path) -> int:
        return self.calls.count(str(path))


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeChangeSource:
    """ChangeSource that records lifecycle calls instead of watching."""

    def __init__(self):
        self.watches = []
        self.started = False
        self.stopped = False

    def add_watch(self, root, excluded_dirs=()):
        self.watches.append((Path(root), tuple(excluded_dirs)))

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True


@pytest.fixture
def oracle():
    return RecordingOracle()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def change_source():
    return FakeChangeSource()


@pytest.fixture
def git_repo(tmp_path):
    """Create a git work tree with a .gitignore, or skip if git is unavailable."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", "-q"], cwd=repo, check=True)
    (repo / ".gitignore").write_text("*.log\nbuild/\n")
    return repo
