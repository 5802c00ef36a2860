"""Abstract change source protocol for file watching implementations."""

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol


class ChangeSource(Protocol):
    """Protocol for anything that delivers ChangeEvents for a directory tree."""

    def add_watch(self, root: Path, excluded_dirs: Iterable[Path] = ()) -> None:
        """Watch root recursively, leaving out the excluded subtrees."""
        ...

    def start(self) -> None:
        """Start delivering events."""
        ...

    def stop(self) -> None:
        """Stop delivering events."""
        ...
