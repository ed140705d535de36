"""Sliding window minimum algorithms.

Every algorithm takes a window size ``w`` and an iterable of values and yields
one :class:`~kmerwin.elements.Elem` per window: the minimal value in the window
together with its absolute position.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from itertools import accumulate, islice
from typing import Any, Iterable, Iterator, Sequence

from kmerwin.elements import TOP, Elem, RingBuf

_VAL_MASK = 0xFFFF_0000
_POS_MASK = 0x0000_FFFF
_U32_MAX = 0xFFFF_FFFF


def _check_w(w: int) -> None:
    if w < 1:
        raise ValueError("window size w must be positive")


def _suffix_minima(items: Iterable, pick) -> list:
    """Suffix minima of ``items``, combining from the right with ``pick``."""
    return list(accumulate(reversed(list(items)), pick))[::-1]


def sliding_min(values: Iterable, w: int, alg: "SlidingMin") -> Iterator[Elem]:
    """Run the sliding window minimum algorithm ``alg`` over ``values``."""
    return alg.sliding_min(w, values)


class SlidingMin(ABC):
    """A sliding window minimum algorithm."""

    @abstractmethod
    def sliding_min(self, w: int, values: Iterable) -> Iterator[Elem]:
        """Minima of the windows of ``w`` consecutive values, with positions."""


class Buffered(SlidingMin):
    """Keeps the last ``w`` elements and scans all of them for every window."""

    def sliding_min(self, w: int, values: Iterable) -> Iterator[Elem]:
        _check_w(w)
        # The first w-1 values do not complete a window.
        return islice(self._minima(w, values), w - 1, None)

    @staticmethod
    def _minima(w: int, values: Iterable) -> Iterator[Elem]:
        ring = RingBuf(w, Elem(TOP, 0))
        for pos, val in enumerate(values):
            ring.push(Elem(val, pos))
            yield min(ring)


class BufferedOpt(SlidingMin):
    """Like :class:`Buffered`, but only stores values and scans oldest first."""

    def sliding_min(self, w: int, values: Iterable) -> Iterator[Elem]:
        _check_w(w)
        return self._minima(w, values)

    @staticmethod
    def _minima(w: int, values: Iterable) -> Iterator[Elem]:
        ring = RingBuf(w, TOP)
        for pos, val in enumerate(values):
            ring.push(val)
            if pos >= w - 1:
                best = ring.forward_min()
                yield Elem(best.val, best.pos + pos - w + 1)


class Queue(SlidingMin):
    """Monotone queue.

    Unlike the other algorithms this yields an element for every input value,
    including the first ``w - 1`` incomplete windows, and ties between equal
    values go to the rightmost one.
    """

    def sliding_min(self, w: int, values: Iterable) -> Iterator[Elem]:
        _check_w(w)
        return self._minima(w, values)

    @staticmethod
    def _minima(w: int, values: Iterable) -> Iterator[Elem]:
        queue: deque[Elem] = deque()
        for pos, val in enumerate(values):
            while queue and queue[-1].val >= val:
                queue.pop()
            queue.append(Elem(val, pos))
            if pos - queue[0].pos >= w:
                queue.popleft()
            yield queue[0]


class Rescan(SlidingMin):
    """Tracks the running minimum and rescans when it leaves the window."""

    def sliding_min(self, w: int, values: Iterable) -> Iterator[Elem]:
        _check_w(w)
        return self._minima(w, values)

    @staticmethod
    def _minima(w: int, values: Iterable) -> Iterator[Elem]:
        best = Elem(TOP, 0)
        ring = RingBuf(w, best)
        for pos, val in enumerate(values):
            elem = Elem(val, pos)
            ring.push(elem)
            best = min(best, elem)
            if pos - best.pos == w:
                best = min(ring)
            if pos >= w - 1:
                yield best


class RescanOpt(SlidingMin):
    """Like :class:`Rescan`, but only stores values in the buffer."""

    def sliding_min(self, w: int, values: Iterable) -> Iterator[Elem]:
        _check_w(w)
        return self._minima(w, values)

    @staticmethod
    def _minima(w: int, values: Iterable) -> Iterator[Elem]:
        best = Elem(TOP, 0)
        ring = RingBuf(w, TOP)
        for pos, val in enumerate(values):
            ring.push(val)
            if val < best.val:
                best = Elem(val, pos)
            if pos - best.pos == w:
                found = ring.forward_min()
                best = Elem(found.val, found.pos + pos - w + 1)
            if pos >= w - 1:
                yield best


class Split(SlidingMin):
    """Two-stacks method: suffix minima of each full chunk plus a prefix minimum."""

    def sliding_min(self, w: int, values: Iterable) -> Iterator[Elem]:
        _check_w(w)
        return self._minima(w, values)

    @staticmethod
    def _minima(w: int, values: Iterable) -> Iterator[Elem]:
        empty = Elem(TOP, 0)
        prefix = empty
        ring = RingBuf(w, empty)
        for pos, val in enumerate(values):
            elem = Elem(val, pos)
            ring.push(elem)
            prefix = min(prefix, elem)
            if ring.idx == 0:
                for slot, value in enumerate(_suffix_minima(ring, min)):
                    ring[slot] = value
                prefix = empty
            if pos >= w - 1:
                yield min(prefix, ring[ring.idx])


def _later_on_tie(acc: Elem, elem: Elem) -> Elem:
    return acc if acc.val <= elem.val else elem


class SplitOpt(SlidingMin):
    """Like :class:`Split`, comparing only values.

    Within a chunk's suffix minima ties go to the later element.
    """

    def sliding_min(self, w: int, values: Iterable) -> Iterator[Elem]:
        _check_w(w)
        return self._minima(w, values)

    @staticmethod
    def _minima(w: int, values: Iterable) -> Iterator[Elem]:
        empty = Elem(TOP, 0)
        prefix = empty
        ring = RingBuf(w, empty)
        for pos, val in enumerate(values):
            elem = Elem(val, pos)
            ring.push(elem)
            if val < prefix.val:
                prefix = elem
            if ring.idx == 0:
                for slot, value in enumerate(_suffix_minima(ring, _later_on_tie)):
                    ring[slot] = value
                prefix = empty
            if pos >= w - 1:
                suffix = ring[ring.idx]
                yield suffix if suffix.val <= prefix.val else prefix


def _lane_min(a: Sequence[int], b: Sequence[int]) -> tuple[int, ...]:
    return tuple(map(min, a, b))


class SplitSimd:
    """Two-stacks sliding minimum over several lanes of 32-bit hashes at once.

    Hashes are compared by their upper 16 bits only, with ties broken in
    favour of the lower position.  Positions are kept in the lower 16 bits,
    so the input is assumed to have fewer than 2**16 rows.  One row of window
    minimum positions is yielded per input row, including the first ``w - 1``.
    """

    def sliding_min(self, w: int, lanes: Iterable[Sequence[int]]) -> Iterator[tuple[int, ...]]:
        _check_w(w)
        return self._minima(w, lanes)

    @staticmethod
    def _minima(w: int, rows: Iterable[Sequence[int]]) -> Iterator[tuple[int, ...]]:
        ring: RingBuf[Any] | None = None
        prefix: tuple[int, ...] = ()
        width = 0
        for pos, row in enumerate(rows):
            row = tuple(row)
            if ring is None:
                width = len(row)
                prefix = (_U32_MAX,) * width
                ring = RingBuf(w, prefix)
            elif len(row) != width:
                raise ValueError(f"row has {len(row)} lanes, expected {width}")
            elem = tuple(((value & _VAL_MASK) | pos) & _U32_MAX for value in row)
            ring.push(elem)
            prefix = _lane_min(prefix, elem)
            if ring.idx == 0:
                for slot, value in enumerate(_suffix_minima(ring, _lane_min)):
                    ring[slot] = value
                prefix = elem
            suffix = ring[ring.idx]
            yield tuple(min(p, s) & _POS_MASK for p, s in zip(prefix, suffix))