"""Turns raw change notifications into actionable signals."""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from gitwatch_core.ignore_cache import IgnoreCache
from gitwatch_core.models import ChangeEvent

logger = logging.getLogger(__name__)

METADATA_DIR_NAME = ".git"


class ChangeFilter:
    """Decide whether a change event should count towards the next trigger.

    An event is actionable when it is a completed write, lies outside every
    excluded subtree, and git does not ignore the path. Actionable events are
    passed to on_actionable, the producer side of the debounce coordinator.
    """

    def __init__(
        self,
        cache: IgnoreCache,
        on_actionable: Callable[[Path], None],
        excluded_dirs: Iterable[str | Path] = (),
    ):
        """Initialize filter.

        Args:
            cache: Ignore cache consulted for every candidate path
            on_actionable: Called with the path of each actionable event
            excluded_dirs: Absolute directories whose contents are never actionable
        """
        self.cache = cache
        self.on_actionable = on_actionable
        self.excluded_dirs = tuple(Path(d).absolute() for d in excluded_dirs)
        self.seen = 0
        self.actionable = 0

    def exclude(self, directory: str | Path) -> None:
        """Add another excluded subtree. Call before events start flowing."""
        directory = Path(directory).absolute()
        if directory not in self.excluded_dirs:
            self.excluded_dirs = (*self.excluded_dirs, directory)

    def _is_excluded(self, path: Path) -> bool:
        # Metadata of nested repositories counts too, wherever it sits.
        if METADATA_DIR_NAME in path.parts:
            return True
        return any(path == d or d in path.parents for d in self.excluded_dirs)

    def is_actionable(self, event: ChangeEvent) -> bool:
        """Apply the filter rules without notifying anyone."""
        if not event.is_write_complete:
            return False

        path = Path(event.path).absolute()
        if self._is_excluded(path):
            return False

        return not self.cache.query(path)

    def handle(self, event: ChangeEvent) -> bool:
        """Filter one event and signal it if actionable.

        Returns:
            True if the event was actionable
        """
        self.seen += 1
        if not self.is_actionable(event):
            logger.debug(f"Skipping {event.kind.value} event for {event.path}")
            return False

        self.actionable += 1
        logger.debug(f"Actionable change: {event.path}")
        self.on_actionable(Path(event.path))
        return True
