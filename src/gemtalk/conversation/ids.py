"""Message id generation.

Ids are millisecond timestamps rendered as strings. Two ids requested
within the same millisecond (the user message and the reply of one
request cycle) are offset so they never collide.
"""

import time
from collections.abc import Callable


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class MessageIdGenerator:
    """Issues strictly increasing timestamp-based message ids."""

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._last = 0

    def next_id(self) -> str:
        """Return a new id, greater than every id issued before it."""
        value = max(self._clock(), self._last + 1)
        self._last = value
        return str(value)
