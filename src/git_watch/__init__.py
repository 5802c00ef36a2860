"""git-watch: rerun a command whenever tracked files in a git work tree settle."""

__version__ = "0.1.0"

# Public API
from git_watch.controller import GitWatchController
from gitwatch_core.config import WatchConfig

__all__ = [
    "__version__",
    # Primary components
    "GitWatchController",
    "WatchConfig",
]
