# browser_testing/core/waiter.py
from __future__ import annotations

"""Polling waiter
-----------------
One blocking "poll until true or time out" loop shared by every wait helper.
"""

from typing import Any, Callable, Optional

from browser_testing.core.errors import WaitTimeoutError
from browser_testing.utils.logger import get_logger
from browser_testing.utils.timing import Stopwatch, sleep_ms

DEFAULT_INTERVAL_MS = 100


def format_timeout_message(message: str, expected: Any) -> str:
    """Build a `%s`-style template naming what was awaited."""
    return message + " [" + str(expected).replace("%", "%%") + "]."


def _render(message: Optional[str], seconds: float) -> str:
    if not message:
        return f"Waited {seconds} seconds for callback."
    try:
        return message % seconds
    except (TypeError, ValueError):
        # not a usable %-template
        return message


class Waiter:
    """
    Blocks the calling thread until a predicate holds or the deadline passes.

    Exceptions raised by the predicate count as "not yet"; elements that are
    still rendering must not abort a wait early.
    """

    def __init__(
        self,
        default_seconds: float = 5,
        sleep: Callable[[int], None] = sleep_ms,
    ) -> None:
        self.default_seconds = default_seconds
        self._sleep = sleep
        self.log = get_logger(__name__)

    def pause(self, milliseconds: int) -> None:
        self._sleep(milliseconds)

    def wait_using(
        self,
        seconds: Optional[float],
        interval_ms: int,
        predicate: Callable[[], Any],
        message: Optional[str] = None,
    ) -> None:
        seconds = self.default_seconds if seconds is None else seconds
        if isinstance(seconds, float) and seconds.is_integer():
            seconds = int(seconds)

        self.pause(interval_ms)

        with Stopwatch() as sw:
            while True:
                try:
                    if predicate():
                        return
                except Exception as e:
                    self.log.debug(f"wait predicate not satisfied yet: {e!r}")

                if sw.elapsed_seconds() > seconds:
                    raise WaitTimeoutError(_render(message, seconds), seconds=seconds)

                self.pause(interval_ms)
