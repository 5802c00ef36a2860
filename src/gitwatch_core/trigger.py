"""Command trigger: runs the configured command and classifies the result."""

import logging
import shlex
import subprocess
import time
from pathlib import Path

from gitwatch_core.models import TriggerOutcome

logger = logging.getLogger(__name__)


class CommandNotFoundError(RuntimeError):
    """Raised when the configured command cannot be spawned at all."""

    def __init__(self, outcome: TriggerOutcome):
        self.outcome = outcome
        super().__init__(f"Command not found: {outcome.argv[0]} ({outcome.error})")


class CommandTrigger:
    """Spawn a fixed argv synchronously, once per fire()."""

    def __init__(self, argv: list[str], cwd: str | Path | None = None):
        """Initialize trigger.

        Args:
            argv: Command and arguments to run
            cwd: Working directory for the command (default: current directory)

        Raises:
            ValueError: If argv is empty
        """
        if not argv:
            raise ValueError("No command configured")
        self.argv = list(argv)
        self.cwd = Path(cwd) if cwd is not None else None
        self.runs = 0

    @property
    def command_line(self) -> str:
        """The command as a shell-quoted string, for display."""
        return shlex.join(self.argv)

    def fire(self, argv: list[str] | None = None) -> TriggerOutcome:
        """Run the command and wait for it to exit.

        Args:
            argv: Override for the configured argv

        Returns:
            TriggerOutcome, "not_found" if the process could not be spawned

        Raises:
            ValueError: If argv is given but empty
        """
        if argv is None:
            argv = self.argv
        elif not argv:
            raise ValueError("No command configured")
        else:
            argv = list(argv)
        logger.info(f"Running: {shlex.join(argv)}")
        self.runs += 1

        start = time.monotonic()
        try:
            result = subprocess.run(argv, cwd=self.cwd, check=False)
        except OSError as e:
            logger.error(f"Failed to start {argv[0]!r}: {e}")
            return TriggerOutcome.not_found(argv, str(e))

        outcome = TriggerOutcome.completed(argv, result.returncode, time.monotonic() - start)
        if outcome.succeeded:
            logger.info(f"Command {outcome.describe()}")
        else:
            logger.warning(f"Command {outcome.describe()}")
        return outcome
