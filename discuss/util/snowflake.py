"""Snowflake identifier generation.

Layout of the 64-bit value (most significant first):
- 42 bits: milliseconds since the custom epoch (2024-01-01T00:00:00Z)
- 10 bits: random
- 12 bits: per-millisecond sequence

Identifiers are rendered as decimal strings. They sort by creation
millisecond; ids from the same millisecond are unique but unordered.
"""

import secrets
import threading
import time
from datetime import datetime, timezone

CUSTOM_EPOCH_MS = 1704067200000
TIME_SHIFT = 22
RANDOM_BITS = 10
SEQUENCE_BITS = 12
SEQUENCE_MASK = (1 << SEQUENCE_BITS) - 1


class SnowflakeGenerator:
    """Thread-safe snowflake id generator."""

    def __init__(self, clock=None) -> None:
        """Initialize generator.

        Args:
            clock: Callable returning the current time in epoch milliseconds
        """
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._lock = threading.Lock()
        self._last_timestamp = 0
        self._sequence = 0

    def generate(self) -> str:
        """Return a new identifier."""
        with self._lock:
            timestamp = self._clock()
            if timestamp < self._last_timestamp:
                # Clock went backwards, keep ids monotonic
                timestamp = self._last_timestamp
            if timestamp == self._last_timestamp:
                self._sequence = (self._sequence + 1) & SEQUENCE_MASK
                if self._sequence == 0:
                    while timestamp <= self._last_timestamp:
                        timestamp = self._clock()
            else:
                self._sequence = 0
            self._last_timestamp = timestamp

            random_part = secrets.randbits(RANDOM_BITS)
            value = (
                ((timestamp - CUSTOM_EPOCH_MS) << TIME_SHIFT)
                | (random_part << SEQUENCE_BITS)
                | self._sequence
            )
            return str(value)

    def now_ms(self) -> int:
        """Current clock reading in epoch milliseconds."""
        return self._clock()


def snowflake_timestamp(value: str) -> datetime | None:
    """Creation time encoded in an identifier, None if it is not a snowflake."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    if number < 0:
        return None
    milliseconds = (number >> TIME_SHIFT) + CUSTOM_EPOCH_MS
    try:
        return datetime.fromtimestamp(milliseconds / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
