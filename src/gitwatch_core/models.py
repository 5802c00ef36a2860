"""Shared data models for gitwatch_core."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal


class EventKind(Enum):
    """Kind of a raw file system notification."""

    WRITE_COMPLETE = "write_complete"
    OPENED = "opened"
    MODIFIED = "modified"
    CREATED = "created"
    DELETED = "deleted"
    MOVED = "moved"
    OTHER = "other"


@dataclass(frozen=True)
class ChangeEvent:
    """A raw change notification delivered by a change source."""

    path: Path
    """Path the notification refers to."""

    kind: EventKind
    """What happened to the path."""

    @property
    def is_write_complete(self) -> bool:
        """Whether a writer finished writing the file's content."""
        return self.kind is EventKind.WRITE_COMPLETE


@dataclass(frozen=True)
class CacheEntry:
    """Cached ignore verdict for one path."""

    path: str
    """Normalized path the verdict belongs to."""

    verdict: bool
    """True if version control ignores the path."""

    inserted_at: float
    """Clock reading when the verdict was stored."""

    def expired(self, max_age: float, now: float) -> bool:
        """Check whether the entry has outlived max_age at time now."""
        return self.inserted_at + max_age <= now


@dataclass
class TriggerOutcome:
    """Result of firing the configured command once."""

    argv: list[str]
    """Command line that was spawned."""

    status: Literal["completed", "not_found"]
    """Whether the process ran to completion or could not be spawned."""

    exit_code: int | None = None
    """Exit status for completed runs."""

    error: str | None = None
    """Spawn error message for not_found outcomes."""

    duration: float = 0.0
    """Wall-clock seconds spent in the command."""

    @classmethod
    def completed(cls, argv: list[str], exit_code: int, duration: float = 0.0) -> "TriggerOutcome":
        """Create an outcome for a process that ran and exited."""
        return cls(argv=list(argv), status="completed", exit_code=exit_code, duration=duration)

    @classmethod
    def not_found(cls, argv: list[str], error: str) -> "TriggerOutcome":
        """Create an outcome for a process that could not be spawned."""
        return cls(argv=list(argv), status="not_found", error=error)

    @property
    def succeeded(self) -> bool:
        """True only for completed runs with exit status 0."""
        return self.status == "completed" and self.exit_code == 0

    def describe(self) -> str:
        """Short human-readable summary used in log lines."""
        if self.status == "not_found":
            return f"could not start {self.argv[0]!r}: {self.error}"
        if self.exit_code == 0:
            return f"succeeded in {self.duration:.2f}s"
        return f"failed with exit code {self.exit_code} after {self.duration:.2f}s"
