"""Controller wiring the change source, filter, debounce loop, and command trigger."""

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from gitwatch_core.change_filter import ChangeFilter
from gitwatch_core.config import WatchConfig
from gitwatch_core.debounce import DebounceCoordinator
from gitwatch_core.file_watcher import FileWatcherManager
from gitwatch_core.ignore_cache import IgnoreCache
from gitwatch_core.models import ChangeEvent, TriggerOutcome
from gitwatch_core.notifier import NoOpNotifier, WatchNotifier
from gitwatch_core.oracle import GitIgnoreOracle, IgnoreOracle, OracleError
from gitwatch_core.trigger import CommandNotFoundError, CommandTrigger
from gitwatch_core.watchers import ChangeSource

logger = logging.getLogger(__name__)


class GitWatchController:
    """Runs a command once per settled burst of changes to tracked files.

    Events arrive through on_change() on the change source's thread (the
    producer). run() is the consumer and blocks the calling thread until
    stop() is called, one-shot mode finishes, or a fatal error occurs.
    """

    def __init__(
        self,
        config: WatchConfig,
        notifier: WatchNotifier | None = None,
        oracle: IgnoreOracle | None = None,
        trigger: CommandTrigger | None = None,
        change_source: ChangeSource | None = None,
        enable_watchers: bool = True,
    ):
        """Initialize controller.

        Args:
            config: Validated watch configuration
            notifier: Optional notification handler (defaults to NoOpNotifier - silent)
            oracle: Ignore oracle (defaults to git check-ignore in config.root)
            trigger: Command trigger (defaults to config.command run in config.root)
            change_source: Event source (defaults to a watchdog observer on config.root)
            enable_watchers: If False, no change source is started; feed on_change() directly
        """
        self.config = config
        self.notifier = notifier or NoOpNotifier()
        self.enable_watchers = enable_watchers

        self.oracle = oracle or GitIgnoreOracle(config.root)
        self.cache = IgnoreCache(
            self.oracle,
            max_age=config.max_cache_age,
            max_size=config.max_cache_size,
        )
        self.coordinator = DebounceCoordinator(config.settle)
        self.change_filter = ChangeFilter(
            self.cache,
            on_actionable=self._on_actionable,
            excluded_dirs=config.excluded_paths(),
        )
        self.trigger = trigger or CommandTrigger(config.command, cwd=config.root)
        self.change_source = change_source

        self._attached = False
        self._owns_change_source = False
        self._fatal_error: Exception | None = None
        self._error_lock = threading.Lock()

        # Outbound events (host wires these)
        self.on_command_finished: Callable[[TriggerOutcome], None] | None = None

    @property
    def fatal_error(self) -> Exception | None:
        """Error raised on the producer side that ended the run, if any."""
        with self._error_lock:
            return self._fatal_error

    def attach(self) -> None:
        """Verify the ignore oracle and start watching. Idempotent.

        Raises:
            OracleError: If git cannot answer ignore queries for config.root
            FileNotFoundError: If config.root does not exist
        """
        if self._attached:
            return

        root = Path(self.config.root)
        if not root.is_dir():
            raise FileNotFoundError(f"Watch directory does not exist: {root}")

        if isinstance(self.oracle, GitIgnoreOracle):
            self.oracle.verify()
            metadata_dir = self.oracle.metadata_dir()
            if root.absolute() in metadata_dir.parents:
                self.change_filter.exclude(metadata_dir)

        if self.enable_watchers:
            if self.change_source is None:
                # A watchdog observer can only be started once; detach() drops it.
                self.change_source = FileWatcherManager(self.on_change)
                self._owns_change_source = True
            self.change_source.add_watch(root, self.change_filter.excluded_dirs)
            self.change_source.start()
            self.notifier.info(f"Watching {root} for changes")

        self._attached = True

    def detach(self) -> None:
        """Stop the change source."""
        if self.change_source is not None and self._attached and self.enable_watchers:
            try:
                self.change_source.stop()
            except Exception as e:
                logger.error(f"Error stopping change source: {e}")
        if self._owns_change_source:
            self.change_source = None
            self._owns_change_source = False
        self._attached = False

    def on_change(self, event: ChangeEvent) -> None:
        """Producer entry point, called once per raw change event.

        An OracleError ends the run: it is stored, the consumer loop is
        stopped, and run() re-raises it.
        """
        if self.fatal_error is not None:
            return
        try:
            self.change_filter.handle(event)
        except OracleError as e:
            logger.error(f"Ignore check failed: {e}")
            with self._error_lock:
                self._fatal_error = e
            self.coordinator.stop()

    def _on_actionable(self, path: Path) -> None:
        self.coordinator.signal()

    def _on_settled(self) -> None:
        outcome = self.trigger.fire()

        if self.on_command_finished:
            self.on_command_finished(outcome)

        if outcome.status == "not_found":
            raise CommandNotFoundError(outcome)

        if outcome.succeeded:
            self.notifier.info(f"{self.trigger.command_line} {outcome.describe()}")
        else:
            self.notifier.warning(f"{self.trigger.command_line} {outcome.describe()}")

    def run(self) -> int:
        """Attach, run the consumer loop, and detach.

        Returns:
            Number of times the command ran

        Raises:
            CommandNotFoundError: If the command cannot be spawned
            OracleError: If git fails to answer an ignore query
        """
        self.attach()
        try:
            fired = self.coordinator.run(self._on_settled, one_shot=self.config.once)
        finally:
            self.detach()

        error = self.fatal_error
        if error is not None:
            raise error
        return fired

    def stop(self) -> None:
        """Ask run() to return. Safe to call from any thread."""
        self.coordinator.stop()
