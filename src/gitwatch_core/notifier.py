"""Pluggable notification protocol for gitwatch_core.

Lets the controller report user-facing messages without depending on how they
are shown. Hosts embedding the controller can pass their own implementation.
"""

import logging
from typing import Protocol

logger = logging.getLogger("git_watch")


class WatchNotifier(Protocol):
    """Protocol for notifications - host can provide custom implementation."""

    def info(self, message: str) -> None:
        """Informational message."""
        ...

    def warning(self, message: str) -> None:
        """Warning message."""
        ...

    def error(self, message: str) -> None:
        """Error message."""
        ...


class NoOpNotifier:
    """Silent notifier, the default when the controller is embedded."""

    def info(self, msg: str) -> None:
        pass

    def warning(self, msg: str) -> None:
        pass

    def error(self, msg: str) -> None:
        pass


class LoggingNotifier:
    """Implementation using stdlib logging, used by the command-line tool."""

    def info(self, msg: str) -> None:
        logger.info(msg)

    def warning(self, msg: str) -> None:
        logger.warning(msg)

    def error(self, msg: str) -> None:
        logger.error(msg)
