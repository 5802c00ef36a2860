"""Configuration parsing for git-watch."""

import logging
import shlex
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

logger = logging.getLogger(__name__)

DEFAULT_MAX_CACHE_AGE = 30.0
DEFAULT_MAX_CACHE_SIZE = 1000
DEFAULT_SETTLE = 0.2

CONFIG_TABLE = "git_watch"


@dataclass
class WatchConfig:
    """Runtime configuration for one git-watch session."""

    command: list[str] = field(default_factory=list)
    """Command and arguments run after each settled burst."""

    root: Path = field(default_factory=Path.cwd)
    """Directory to watch recursively."""

    max_cache_age: float = DEFAULT_MAX_CACHE_AGE
    """Seconds before a cached ignore verdict is re-checked."""

    max_cache_size: int = DEFAULT_MAX_CACHE_SIZE
    """Maximum number of cached ignore verdicts."""

    settle: float = DEFAULT_SETTLE
    """Quiet window in seconds before the command runs."""

    once: bool = False
    """Stop after the first run of the command."""

    quiet: bool = False
    """Only log warnings and errors."""

    verbose: int = 0
    """Verbosity level; 1 or more enables debug logging."""

    excluded_dirs: list[str] = field(default_factory=lambda: [".git"])
    """Directories under root that never trigger the command."""

    def validate(self) -> None:
        """Check values, raising ValueError on the first problem."""
        if not self.command:
            raise ValueError("No command configured (use --command or pass it after --)")
        if self.max_cache_age < 0:
            raise ValueError(f"max_cache_age must be >= 0, got {self.max_cache_age}")
        if self.max_cache_size < 0:
            raise ValueError(f"max_cache_size must be >= 0, got {self.max_cache_size}")
        if self.settle <= 0:
            raise ValueError(f"settle must be > 0, got {self.settle}")
        if self.quiet and self.verbose:
            raise ValueError("quiet and verbose are mutually exclusive")

    def excluded_paths(self) -> list[Path]:
        """Excluded directories resolved against root."""
        return [(self.root / d).absolute() for d in self.excluded_dirs]


def parse_command(value: str | list[str] | None) -> list[str]:
    """Normalize a command given as a shell string or an argv list."""
    if value is None:
        return []
    if isinstance(value, str):
        return shlex.split(value)
    return [str(part) for part in value]


def load_watch_config(path: str | Path) -> dict[str, Any]:
    """Load the [git_watch] table from a TOML file.

    Args:
        path: Path to TOML config file

    Returns:
        Dict of WatchConfig field values found in the file

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be parsed or has unknown keys
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to parse config file {path}: {e}") from e

    table = raw.get(CONFIG_TABLE, {})
    known = {f.name for f in fields(WatchConfig)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise ValueError(f"Unknown option(s) in {path}: {', '.join(unknown)}")

    values = dict(table)
    if "command" in values:
        values["command"] = parse_command(values["command"])
    if "root" in values:
        values["root"] = path.parent / Path(values["root"])

    logger.debug(f"Loaded {len(values)} option(s) from {path}")
    return values


def build_config(file_values: dict[str, Any] | None = None, **overrides: Any) -> WatchConfig:
    """Merge file values with overrides (None means "not given") and validate.

    Raises:
        ValueError: If the merged configuration is invalid
    """
    values = dict(file_values or {})
    values.update({k: v for k, v in overrides.items() if v is not None})

    config = WatchConfig(**values)
    config.root = Path(config.root).absolute()
    config.validate()
    return config
