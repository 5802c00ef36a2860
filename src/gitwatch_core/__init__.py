"""gitwatch-core: ignore-aware change filtering and debounced command triggering."""

__version__ = "0.1.0"

# Models
from gitwatch_core.models import CacheEntry, ChangeEvent, EventKind, TriggerOutcome

# Engine
from gitwatch_core.change_filter import ChangeFilter
from gitwatch_core.debounce import DebounceCoordinator
from gitwatch_core.ignore_cache import IgnoreCache
from gitwatch_core.oracle import GitIgnoreOracle, IgnoreOracle, OracleError
from gitwatch_core.trigger import CommandNotFoundError, CommandTrigger

# Notifiers
from gitwatch_core.notifier import LoggingNotifier, NoOpNotifier, WatchNotifier

# Config
from gitwatch_core.config import WatchConfig, build_config, load_watch_config

__all__ = [
    "__version__",
    # Models
    "CacheEntry",
    "ChangeEvent",
    "EventKind",
    "TriggerOutcome",
    # Engine
    "IgnoreCache",
    "IgnoreOracle",
    "GitIgnoreOracle",
    "OracleError",
    "ChangeFilter",
    "DebounceCoordinator",
    "CommandTrigger",
    "CommandNotFoundError",
    # Notifiers
    "WatchNotifier",
    "NoOpNotifier",
    "LoggingNotifier",
    # Config
    "WatchConfig",
    "build_config",
    "load_watch_config",
]
