"""Ignore oracle: asks git whether a path is ignored."""

import logging
import subprocess
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

# git check-ignore refuses paths that belong to a submodule with this message.
_SUBMODULE_PATHSPEC = "is in submodule"


class OracleError(RuntimeError):
    """Raised when the ignore check itself cannot run."""


class IgnoreOracle(Protocol):
    """Protocol for anything that can answer "is this path ignored?"."""

    def is_ignored(self, path: str | Path) -> bool:
        """Return True if version control ignores path."""
        ...


class GitIgnoreOracle:
    """IgnoreOracle backed by `git check-ignore`.

    Each query spawns git in the work tree root. Exit status 0 means the path is
    ignored, 1 means it is not. A refusal because the path lies in a submodule
    is retried from inside the submodule. Any other status, or a missing git
    executable, raises OracleError.
    """

    def __init__(self, root: str | Path, git: str = "git"):
        """Initialize oracle.

        Args:
            root: Directory inside the git work tree to run git from
            git: git executable name or path
        """
        self.root = Path(root)
        self.git = git

    def _run(self, *args: str, cwd: Path | None = None) -> subprocess.CompletedProcess:
        argv = [self.git, *args]
        try:
            return subprocess.run(
                argv,
                cwd=cwd or self.root,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise OracleError(f"Failed to run {self.git!r}: {e}") from e

    def is_ignored(self, path: str | Path) -> bool:
        """Ask git whether path is ignored.

        Args:
            path: Absolute path or path relative to the root

        Returns:
            True if ignored, False if actionable

        Paths inside a submodule are answered by the submodule's own repository,
        since the superproject refuses to check them.

        Raises:
            OracleError: If git fails to answer
        """
        return self._check_ignore(path, self.root)

    def _check_ignore(self, path: str | Path, cwd: Path) -> bool:
        result = self._run("check-ignore", "-q", "--", str(path), cwd=cwd)
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False

        if _SUBMODULE_PATHSPEC in result.stderr:
            directory = (self.root / path).parent
            if not directory.is_dir():
                # Removed since the event; nothing left to act on.
                logger.debug(f"Skipping ignore check for vanished {path}")
                return True
            if directory.resolve() != cwd.resolve():
                logger.debug(f"{path} is in a submodule, asking git from {directory}")
                return self._check_ignore((self.root / path).absolute(), directory)

        message = result.stderr.strip() or f"exit code {result.returncode}"
        raise OracleError(f"git check-ignore failed for {path}: {message}")

    def verify(self) -> None:
        """Check that git runs and the root is inside a work tree.

        Raises:
            OracleError: If git is missing or root is not in a work tree
        """
        result = self._run("rev-parse", "--is-inside-work-tree")
        if result.returncode != 0 or result.stdout.strip() != "true":
            message = result.stderr.strip() or result.stdout.strip()
            raise OracleError(f"{self.root} is not inside a git work tree: {message}")
        logger.debug(f"git work tree verified at {self.root}")

    def metadata_dir(self) -> Path:
        """Return the absolute path of the repository's .git directory."""
        result = self._run("rev-parse", "--absolute-git-dir")
        if result.returncode != 0:
            raise OracleError(f"Unable to locate git directory: {result.stderr.strip()}")
        return Path(result.stdout.strip())
