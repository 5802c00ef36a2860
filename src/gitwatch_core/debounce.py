"""Debounce coordinator: coalesces bursts of signals into one settled callback.

The producer side only increments a counter and notifies. The consumer compares
the counter by value against the last value it acted on, so any number of
notifications between two consumer wake-ups collapse into one observation and a
signal sent before the consumer starts waiting is never missed.
"""

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class DebounceCoordinator:
    """Shared counter + condition variable for one producer and one consumer.

    Attributes:
        settle (float): Quiet window in seconds that ends a burst.
    """

    def __init__(self, settle: float = 0.2):
        """Initialize coordinator.

        Args:
            settle: Seconds without signals before a burst counts as settled

        Raises:
            ValueError: If settle is not positive
        """
        if settle <= 0:
            raise ValueError(f"settle must be > 0, got {settle}")

        self.settle = settle
        self._condition = threading.Condition()
        self._counter = 0
        self._stopped = False

    def __repr__(self) -> str:
        return f"<DebounceCoordinator settle={self.settle} counter={self._counter} stopped={self._stopped}>"

    @property
    def counter(self) -> int:
        """Number of signals received so far."""
        with self._condition:
            return self._counter

    @property
    def stopped(self) -> bool:
        with self._condition:
            return self._stopped

    def signal(self) -> None:
        """Record one actionable event and wake the consumer. Never blocks on the consumer."""
        with self._condition:
            self._counter += 1
            self._condition.notify()

    def stop(self) -> None:
        """Wake every waiter and make the consumer loop return without firing."""
        with self._condition:
            self._stopped = True
            self._condition.notify_all()

    def wait_for_change(self, baseline: int, timeout: float | None = None) -> int | None:
        """Block until the counter differs from baseline.

        Args:
            baseline: Counter value the consumer last acted on
            timeout: Optional upper bound in seconds

        Returns:
            The new counter value, or None if stopped or timed out
        """
        with self._condition:
            changed = self._condition.wait_for(
                lambda: self._stopped or self._counter != baseline,
                timeout=timeout,
            )
            if self._stopped or not changed:
                return None
            return self._counter

    def wait_for_settle(self) -> int | None:
        """Block until a full settle window passes with no new signal.

        Every signal received during the window restarts it.

        Returns:
            Counter value at the moment the burst settled, or None if stopped
        """
        with self._condition:
            while not self._stopped:
                seen = self._counter
                woken = self._condition.wait_for(
                    lambda: self._stopped or self._counter != seen,
                    timeout=self.settle,
                )
                if not woken:
                    return self._counter
                if not self._stopped:
                    logger.debug(f"Settle window restarted (counter={self._counter})")
            return None

    def run(self, on_settled: Callable[[], None], one_shot: bool = False) -> int:
        """Consumer loop: fire on_settled once per settled burst.

        Runs until stop() is called, or after the first firing when one_shot is
        set. Exceptions from on_settled propagate to the caller.

        Args:
            on_settled: Called once per settled burst
            one_shot: Return after the first firing

        Returns:
            Number of times on_settled was called
        """
        fired = 0
        last_observed = 0

        while True:
            if self.wait_for_change(last_observed) is None:
                break
            if self.wait_for_settle() is None:
                break

            logger.debug(f"Burst settled after {self.counter - last_observed} signal(s)")
            on_settled()
            fired += 1

            # Signals raised while on_settled ran are absorbed here.
            last_observed = self.counter
            if one_shot:
                break

        return fired
