"""CLI entry point for git-watch: parses options, configures logging, runs the controller."""

import argparse
import logging
import signal
import sys
from pathlib import Path

from git_watch import __version__
from git_watch.controller import GitWatchController
from gitwatch_core.config import (
    DEFAULT_MAX_CACHE_AGE,
    DEFAULT_MAX_CACHE_SIZE,
    DEFAULT_SETTLE,
    WatchConfig,
    build_config,
    load_watch_config,
    parse_command,
)
from gitwatch_core.notifier import LoggingNotifier
from gitwatch_core.oracle import OracleError
from gitwatch_core.trigger import CommandNotFoundError

logger = logging.getLogger("git_watch")

DEFAULT_CONFIG_NAME = ".git-watch.toml"

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(message)s"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Options left unset are None so that values from a config file can fill them.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="git-watch",
        description="Run a command whenever files tracked by git stop changing.",
        epilog="Examples:\n"
        "  git-watch -c 'make test'          # Rerun tests after each save\n"
        "  git-watch -s 1 -- pytest -x       # Wait 1s of quiet before running\n"
        "  git-watch --once -- ./build.sh    # Run once after the next change\n"
        f"\nOptions may also be set in a [git_watch] table in {DEFAULT_CONFIG_NAME}.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-c",
        "--command",
        help="Command to execute, as a single shell-quoted string",
    )

    parser.add_argument(
        "argv",
        nargs="*",
        help="Command to execute, given after --",
    )

    parser.add_argument(
        "-d",
        "--dir",
        dest="root",
        help="Directory to watch (default: current directory)",
    )

    parser.add_argument(
        "-a",
        "--max-cache-age",
        type=float,
        help=f"Age of cache to be periodically pruned, in seconds (default: {DEFAULT_MAX_CACHE_AGE:g})",
    )

    parser.add_argument(
        "-n",
        "--max-cache-size",
        type=int,
        help=f"Maximum number of elements to retain in cache (default: {DEFAULT_MAX_CACHE_SIZE})",
    )

    parser.add_argument(
        "-s",
        "--settle",
        type=float,
        help="Time allowed for the filesystem to settle before launching command, "
        f"in seconds (default: {DEFAULT_SETTLE:g})",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        default=None,
        help="Exit after the command has run once",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=None,
        help="Only report warnings and errors",
    )
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=None,
        help="Show debug output",
    )

    parser.add_argument(
        "--config",
        help=f"Path to config file (default: {DEFAULT_CONFIG_NAME} in the watched directory, if present)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args(argv)
    if args.argv and args.argv[0] == "--":
        args.argv = args.argv[1:]
    if args.command and args.argv:
        parser.error("give the command either with --command or after --, not both")
    return args


def configure_logging(quiet: bool = False, verbose: int = 0) -> None:
    """Configure root logging for the command-line tool."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)
    # watchdog is chatty at DEBUG
    logging.getLogger("watchdog").setLevel(max(level, logging.INFO))


def load_config(args: argparse.Namespace) -> WatchConfig:
    """
    Build the effective configuration from a config file and CLI arguments.

    Raises:
        FileNotFoundError: If an explicit --config file does not exist
        ValueError: If the configuration is invalid
    """
    root = Path(args.root) if args.root else Path.cwd()

    file_values = {}
    if args.config:
        file_values = load_watch_config(args.config)
    elif (root / DEFAULT_CONFIG_NAME).exists():
        file_values = load_watch_config(root / DEFAULT_CONFIG_NAME)

    command = parse_command(args.command) if args.command else args.argv or None

    return build_config(
        file_values,
        command=command,
        root=Path(args.root) if args.root else file_values.get("root", root),
        max_cache_age=args.max_cache_age,
        max_cache_size=args.max_cache_size,
        settle=args.settle,
        once=args.once,
        quiet=args.quiet,
        verbose=args.verbose,
    )


def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for git-watch CLI.

    Handles:
    - Argument parsing and config file merging
    - Logging setup
    - Running the controller until stopped
    - Error handling and exit codes
    """
    args = parse_args(argv)

    try:
        config = load_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(config.quiet, config.verbose)
    logger.debug(f"Configuration: {config}")

    controller = GitWatchController(config, notifier=LoggingNotifier())
    signal.signal(signal.SIGTERM, lambda signum, frame: controller.stop())

    try:
        fired = controller.run()
        logger.debug(f"Exiting after {fired} run(s)")
    except KeyboardInterrupt:
        # Gracefully handle Ctrl+C
        sys.exit(130)
    except CommandNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except OracleError as e:
        print(f"Error: git: {e}", file=sys.stderr)
        sys.exit(1)
    except (PermissionError, OSError) as e:
        print(f"Error: failed to watch {config.root}: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
