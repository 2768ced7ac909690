"""
Access Traces

An access trace is the ascending, duplicate-free list of ticks at which the
resource is needed. Offline instances read it through a cursor so they can
look ahead to the next access.
"""

from typing import Iterable, Iterator, Optional, Tuple

import numpy as np


class AccessTrace:
    """Immutable, strictly increasing sequence of positive access ticks."""

    def __init__(self, ticks: Iterable[int] = ()):
        ticks = tuple(int(t) for t in ticks)
        for prev, cur in zip(ticks, ticks[1:]):
            if cur <= prev:
                raise ValueError(f"Access ticks must be strictly increasing: {prev} then {cur}")
        if ticks and ticks[0] <= 0:
            raise ValueError(f"Access ticks must be positive, got {ticks[0]}")

        self._ticks: Tuple[int, ...] = ticks
        self._members = frozenset(ticks)

    @classmethod
    def coerce(cls, ticks) -> "AccessTrace":
        return ticks if isinstance(ticks, cls) else cls(ticks)

    @property
    def last(self) -> Optional[int]:
        return self._ticks[-1] if self._ticks else None

    def within(self, num_ticks: int) -> "AccessTrace":
        """Accesses that fall inside a simulation of ``num_ticks`` ticks."""
        return AccessTrace(t for t in self._ticks if t <= num_ticks)

    def cursor(self) -> "TraceCursor":
        return TraceCursor(self)

    def __contains__(self, tick) -> bool:
        return tick in self._members

    def __iter__(self) -> Iterator[int]:
        return iter(self._ticks)

    def __len__(self) -> int:
        return len(self._ticks)

    def __getitem__(self, index):
        return self._ticks[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, AccessTrace):
            return self._ticks == other._ticks
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._ticks)

    def __repr__(self) -> str:
        return f"AccessTrace({list(self._ticks)})"


class TraceCursor:
    """Lookahead position into an :class:`AccessTrace`."""

    def __init__(self, trace: AccessTrace):
        self.trace = trace
        self.index = 0

    def peek(self) -> Optional[int]:
        """Next unconsumed access tick, or None once the trace is exhausted."""
        if self.index < len(self.trace):
            return self.trace[self.index]
        return None

    def advance(self) -> Optional[int]:
        tick = self.peek()
        if tick is not None:
            self.index += 1
        return tick

    @property
    def exhausted(self) -> bool:
        return self.index >= len(self.trace)


def generate_access_list(length: int, max_value: int,
                         rng: Optional[np.random.Generator] = None) -> AccessTrace:
    """
    Draw a random access trace.

    Args:
        length: Number of uniform draws; duplicates collapse so the trace may be shorter
        max_value: Largest tick that can be drawn (draws are from ``[1, max_value]``)
        rng: Random source

    Returns:
        Sorted, deduplicated access trace
    """
    if length < 0:
        raise ValueError("length must be non-negative")
    if max_value < 1:
        raise ValueError("max_value must be at least 1")
    if rng is None:
        rng = np.random.default_rng()

    draws = rng.integers(1, max_value, size=length, endpoint=True)
    return AccessTrace(np.unique(draws).tolist())
