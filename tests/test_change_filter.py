"""Tests for gitwatch_core.change_filter."""

from pathlib import Path

import pytest

from conftest import RecordingOracle
from gitwatch_core.change_filter import ChangeFilter
from gitwatch_core.ignore_cache import IgnoreCache
from gitwatch_core.models import ChangeEvent, EventKind
from gitwatch_core.oracle import OracleError


@pytest.fixture
def root(tmp_path):
    return tmp_path


@pytest.fixture
def signals():
    return []


def make_filter(root, signals, ignored=(), error=None):
    oracle = RecordingOracle(ignored=[root / p for p in ignored], error=error)
    cache = IgnoreCache(oracle, max_age=30, max_size=100)
    return ChangeFilter(cache, on_actionable=signals.append, excluded_dirs=[root / ".git"]), oracle


class TestEventKinds:
    """Only completed writes are actionable."""

    @pytest.mark.parametrize(
        "kind",
        [EventKind.OPENED, EventKind.MODIFIED, EventKind.CREATED, EventKind.DELETED, EventKind.MOVED, EventKind.OTHER],
    )
    def test_non_write_kinds_dropped_without_oracle(self, root, signals, kind):
        change_filter, oracle = make_filter(root, signals)

        assert change_filter.handle(ChangeEvent(root / "a.py", kind)) is False
        assert signals == []
        assert oracle.calls == []

    def test_write_complete_is_actionable(self, root, signals):
        change_filter, _ = make_filter(root, signals)

        assert change_filter.handle(ChangeEvent(root / "a.py", EventKind.WRITE_COMPLETE)) is True
        assert signals == [root / "a.py"]
        assert change_filter.seen == 1
        assert change_filter.actionable == 1


class TestExclusions:
    """Metadata subtree and ignored paths never signal."""

    @pytest.mark.parametrize("relative", [".git/index", ".git/objects/ab/cdef", ".git"])
    def test_metadata_subtree_excluded_without_oracle(self, root, signals, relative):
        change_filter, oracle = make_filter(root, signals)

        assert change_filter.handle(ChangeEvent(root / relative, EventKind.WRITE_COMPLETE)) is False
        assert oracle.calls == []

    def test_similar_prefix_is_not_excluded(self, root, signals):
        change_filter, _ = make_filter(root, signals)

        assert change_filter.handle(ChangeEvent(root / ".github" / "ci.yml", EventKind.WRITE_COMPLETE))

    def test_ignored_path_dropped(self, root, signals):
        change_filter, oracle = make_filter(root, signals, ignored=["debug.log"])

        assert change_filter.handle(ChangeEvent(root / "debug.log", EventKind.WRITE_COMPLETE)) is False
        assert signals == []
        assert oracle.count(root / "debug.log") == 1

    def test_repeated_events_use_cache(self, root, signals):
        change_filter, oracle = make_filter(root, signals)
        event = ChangeEvent(root / "a.py", EventKind.WRITE_COMPLETE)

        for _ in range(3):
            change_filter.handle(event)

        assert len(signals) == 3
        assert oracle.count(root / "a.py") == 1

    def test_exclude_adds_subtree_once(self, root, signals):
        change_filter, _ = make_filter(root, signals)
        change_filter.exclude(root / "vendor")
        change_filter.exclude(root / "vendor")

        assert change_filter.excluded_dirs.count(Path(root / "vendor")) == 1
        assert not change_filter.handle(ChangeEvent(root / "vendor" / "x.py", EventKind.WRITE_COMPLETE))


def test_oracle_error_propagates(root, signals):
    change_filter, _ = make_filter(root, signals, error=OracleError("not a repo"))

    with pytest.raises(OracleError):
        change_filter.handle(ChangeEvent(root / "a.py", EventKind.WRITE_COMPLETE))
    assert signals == []


def test_nested_repository_metadata_excluded(root, signals):
    change_filter, oracle = make_filter(root, signals)

    assert not change_filter.handle(ChangeEvent(root / "vendor" / ".git" / "index", EventKind.WRITE_COMPLETE))
    assert signals == []
    assert oracle.calls == []
