"""Window elements, the maximum sentinel and a fixed-size ring buffer."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from itertools import chain
from typing import Any, Generic, Iterator, TypeVar

V = TypeVar("V")


@functools.total_ordering
class Top:
    """A value that compares greater than every other value.

    Used as the neutral element when taking minima over windows.
    """

    _instance: "Top | None" = None

    def __new__(cls) -> "Top":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Top)

    def __gt__(self, other: object) -> bool:
        return not isinstance(other, Top)

    def __hash__(self) -> int:
        return hash(Top)

    def __repr__(self) -> str:
        return "TOP"


TOP = Top()


@dataclass(frozen=True, order=True)
class Elem:
    """A value at an absolute position.

    Elements order by value first; ties are broken in favour of the smaller
    position.
    """

    val: Any
    pos: int = 0


class RingBuf(Generic[V]):
    """A buffer holding the last ``w`` pushed values."""

    def __init__(self, w: int, fill: V) -> None:
        if w < 1:
            raise ValueError("ring buffer size must be positive")
        self._w = w
        self._idx = 0
        self._data: list[V] = [fill] * w

    @property
    def w(self) -> int:
        """Capacity of the buffer."""
        return self._w

    @property
    def idx(self) -> int:
        """Slot that the next push will overwrite (the oldest value)."""
        return self._idx

    def push(self, value: V) -> None:
        """Overwrite the oldest value with ``value``."""
        self._data[self._idx] = value
        self._idx += 1
        if self._idx == self._w:
            self._idx = 0

    def forward_slices(self) -> tuple[list[V], list[V]]:
        """The stored values split in two, oldest first."""
        return self._data[self._idx:], self._data[: self._idx]

    def forward_min(self) -> Elem:
        """Leftmost minimum in oldest-first order, with its offset in that order."""
        best = Elem(TOP, 0)
        for offset, value in enumerate(chain(*self.forward_slices())):
            if value < best.val:
                best = Elem(value, offset)
        return best

    def __getitem__(self, index):
        return self._data[index]

    def __setitem__(self, index, value) -> None:
        self._data[index] = value

    def __len__(self) -> int:
        return self._w

    def __iter__(self) -> Iterator[V]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"RingBuf(w={self._w}, idx={self._idx}, data={self._data!r})"