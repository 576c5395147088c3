"""
Primary key generation.

The mapper draws one key per write from an injectable `KeyGenerator`. The
default `CounterKeyGenerator` is process-local and not durable: a new
generator starts again from its configured start value, regardless of the
keys already present in the table.
"""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from minimapper.domain.types import INT64_MAX


@runtime_checkable
class KeyGenerator(Protocol):
    """Source of primary key values for inserted rows."""

    def next_key(self) -> int:
        """Return a key never returned before by this generator."""
        ...


class CounterKeyGenerator:
    """
    Thread-safe monotonically increasing 64-bit counter.

    `next_key` increments then returns, so a generator started at 0 hands
    out 1, 2, 3, ...
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0 or start > INT64_MAX:
            raise ValueError(f"start must be within [0, {INT64_MAX}], got {start}")
        self._value = start
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        """Last key handed out (the start value if none yet)."""
        with self._lock:
            return self._value

    def next_key(self) -> int:
        with self._lock:
            if self._value >= INT64_MAX:
                raise OverflowError("primary key counter exhausted the 64-bit range")
            self._value += 1
            return self._value

    def __repr__(self) -> str:
        return f"CounterKeyGenerator(current={self.current})"


__all__ = ["KeyGenerator", "CounterKeyGenerator"]
