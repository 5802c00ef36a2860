#!/usr/bin/env python3
"""
Example: Embedding GitWatchController
Shows how to drive git-watch from another program instead of the CLI.

This example demonstrates:
- Building a WatchConfig in code
- Receiving each command outcome through on_command_finished
- Stopping the watch loop from another thread
"""

import sys
import threading
from pathlib import Path

try:
    from git_watch import GitWatchController
    from gitwatch_core import TriggerOutcome, build_config
except ImportError:
    print("Error: Install git-watch first: pip install -e .")
    sys.exit(1)


class PrintNotifier:
    """Minimal notifier that prints instead of logging."""

    def info(self, msg: str) -> None:
        print(f"[info] {msg}")

    def warning(self, msg: str) -> None:
        print(f"[warn] {msg}")

    def error(self, msg: str) -> None:
        print(f"[error] {msg}")


def main() -> None:
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()
    config = build_config(command=["git", "status", "--short"], root=root, settle=0.5)

    controller = GitWatchController(config, notifier=PrintNotifier())
    history: list[TriggerOutcome] = []

    def record(outcome: TriggerOutcome) -> None:
        history.append(outcome)
        if len(history) >= 3:
            controller.stop()

    controller.on_command_finished = record

    # Give up after five minutes even if nothing changes
    timer = threading.Timer(300, controller.stop)
    timer.start()
    try:
        runs = controller.run()
    finally:
        timer.cancel()

    print(f"Ran {runs} time(s): {[o.describe() for o in history]}")


if __name__ == "__main__":
    main()
