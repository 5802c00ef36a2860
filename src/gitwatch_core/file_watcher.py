"""Change source implementation using watchdog."""

import logging
import os
from collections.abc import Callable, Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from gitwatch_core.models import ChangeEvent, EventKind

logger = logging.getLogger(__name__)

# watchdog event_type -> EventKind. "closed" is only sent after a file opened
# for writing is closed; "closed_no_write" is a read-only close.
_EVENT_KINDS = {
    "closed": EventKind.WRITE_COMPLETE,
    "opened": EventKind.OPENED,
    "modified": EventKind.MODIFIED,
    "created": EventKind.CREATED,
    "deleted": EventKind.DELETED,
    "moved": EventKind.MOVED,
}


def to_change_event(event: FileSystemEvent) -> ChangeEvent | None:
    """Translate a watchdog event, or return None for directory events."""
    if event.is_directory:
        return None
    src_path = event.src_path
    if isinstance(src_path, bytes):
        src_path = src_path.decode()
    return ChangeEvent(path=Path(src_path), kind=_EVENT_KINDS.get(event.event_type, EventKind.OTHER))


class _ChangeEventHandler(FileSystemEventHandler):
    """Forwards every file event under root, minus excluded subtrees."""

    def __init__(
        self,
        on_event: Callable[[ChangeEvent], None],
        excluded_dirs: Iterable[Path] = (),
    ):
        """Initialize handler.

        Args:
            on_event: Receives translated events, on the observer thread
            excluded_dirs: Absolute directories whose events are dropped
        """
        self.on_event = on_event
        self.excluded_prefixes = tuple(str(Path(d).absolute()) for d in excluded_dirs)

    def _excluded(self, path: Path) -> bool:
        text = str(path)
        return any(text == p or text.startswith(p + os.sep) for p in self.excluded_prefixes)

    def on_any_event(self, event: FileSystemEvent) -> None:
        change = to_change_event(event)
        if change is None or self._excluded(change.path):
            return
        self.on_event(change)


class FileWatcherManager:
    """Manages the watchdog observer feeding a single event callback."""

    def __init__(self, on_event: Callable[[ChangeEvent], None]):
        """Initialize file watcher manager.

        Args:
            on_event: Called on the observer thread for every file event
        """
        self.on_event = on_event
        self.observer = Observer()
        self.handlers: list[_ChangeEventHandler] = []

    def add_watch(self, root: Path, excluded_dirs: Iterable[Path] = ()) -> None:
        """Watch root recursively.

        Args:
            root: Directory to watch
            excluded_dirs: Subtrees under root to leave out

        Raises:
            FileNotFoundError: If root does not exist
        """
        root = Path(root)
        if not root.is_dir():
            raise FileNotFoundError(f"Watch directory does not exist: {root}")

        excluded = [Path(d) for d in excluded_dirs]
        handler = _ChangeEventHandler(self.on_event, excluded)
        self.observer.schedule(handler, str(root), recursive=True)
        self.handlers.append(handler)

        logger.info(f"Watching {root} (excluding {', '.join(str(d) for d in excluded) or 'nothing'})")

    def start(self) -> None:
        """Start the observer thread."""
        if not self.handlers:
            logger.debug("No watches configured")
            return

        self.observer.start()
        logger.debug(f"Started {len(self.handlers)} watch(es)")

    def stop(self) -> None:
        """Stop the observer thread and wait for it to exit."""
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join(timeout=2.0)
            logger.debug("Stopped file watcher")
