"""Count the hash comparisons each minimizer algorithm performs."""

from __future__ import annotations

import argparse
import operator
import random
import sys
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Sequence

from kmerwin.elements import TOP, Top
from kmerwin.hashing import FxHash, Hasher, Text
from kmerwin.minimizers import JumpingMinimizer, Minimizer, SlidingWindowMinimizer
from kmerwin.windows import Buffered, Queue, Rescan, Split

_DEFAULT_KMERS = 10_000_000
_DEFAULT_WS = (10, 20)


@dataclass
class Counter:
    """A shared tally of comparisons."""

    count: int = 0

    def increment(self) -> None:
        """Add one comparison."""
        self.count += 1


class CountCompare:
    """A hash value that records every comparison made with it.

    A comparison is only recorded when both sides carry a counter, so
    comparisons with the maximum sentinel are not counted.  An equality test
    counts only when it finds the values equal; ordering a pair of elements by
    value and then position thus costs one comparison, as a three-way compare
    would.
    """

    __slots__ = ("val", "counter")

    def __init__(self, val: Any, counter: Counter | None = None) -> None:
        self.val = val
        self.counter = counter

    def _other(self, other: object) -> tuple[Any, Counter | None] | None:
        if isinstance(other, CountCompare):
            return other.val, other.counter
        if isinstance(other, Top):
            return TOP, None
        return None

    def _record(self, other_counter: Counter | None) -> None:
        if self.counter is not None and other_counter is not None:
            self.counter.increment()

    def _order(self, other: object, op: Callable[[Any, Any], bool]) -> Any:
        found = self._other(other)
        if found is None:
            return NotImplemented
        other_val, other_counter = found
        self._record(other_counter)
        return op(self.val, other_val)

    def __lt__(self, other: object) -> Any:
        return self._order(other, operator.lt)

    def __le__(self, other: object) -> Any:
        return self._order(other, operator.le)

    def __gt__(self, other: object) -> Any:
        return self._order(other, operator.gt)

    def __ge__(self, other: object) -> Any:
        return self._order(other, operator.ge)

    def __eq__(self, other: object) -> Any:
        found = self._other(other)
        if found is None:
            return NotImplemented
        other_val, other_counter = found
        equal = self.val == other_val
        if equal:
            self._record(other_counter)
        return equal

    def __hash__(self) -> int:
        return hash(self.val)

    def __repr__(self) -> str:
        return f"CountCompare({self.val!r})"


class CountingHash(Hasher):
    """Wraps a hasher so that its hashes count their comparisons."""

    def __init__(self, counter: Counter, hasher: Hasher | None = None) -> None:
        self.counter = counter
        self.hasher = hasher if hasher is not None else FxHash()

    def hash(self, text: Text) -> CountCompare:  # type: ignore[override]
        return CountCompare(self.hasher.hash(text), self.counter)

    def hash_kmers(self, k: int, text: Text) -> Iterator[CountCompare]:  # type: ignore[override]
        counter = self.counter
        return (CountCompare(val, counter) for val in self.hasher.hash_kmers(k, text))


def _schemes(w: int, k: int, hasher: Hasher) -> list[tuple[str, Minimizer, bool]]:
    return [
        ("buffered", SlidingWindowMinimizer(w, k, Buffered(), hasher), True),
        ("queue", SlidingWindowMinimizer(w, k, Queue(), hasher), True),
        ("jumping", JumpingMinimizer(w, k, hasher), False),
        ("rescan", SlidingWindowMinimizer(w, k, Rescan(), hasher), True),
        ("split", SlidingWindowMinimizer(w, k, Split(), hasher), True),
    ]


def count_comparisons(
    k: int = 21,
    n: int | None = None,
    ws: Sequence[int] = _DEFAULT_WS,
    seed: int | None = None,
) -> list[tuple[str, int, float]]:
    """Comparisons per character made by each algorithm on random DNA.

    ``n`` is the text length; by default there are ten million k-mers.  For
    every window size a fresh random text is drawn, and one
    ``(name, w, comparisons / n)`` triple is returned per algorithm.
    """
    if k < 1:
        raise ValueError("k must be positive")
    if n is None:
        n = _DEFAULT_KMERS + k - 1
    ws = list(ws)
    if any(w < 1 for w in ws):
        raise ValueError("window sizes must be positive")
    num_kmers = n - k + 1
    if ws and num_kmers < max(ws):
        raise ValueError(f"text of length {n} has fewer than w k-mers")

    rng = random.Random(seed)
    results: list[tuple[str, int, float]] = []
    for w in ws:
        text = bytes(rng.choice(b"ACGT") for _ in range(n))
        counter = Counter()
        hasher = CountingHash(counter, FxHash())
        for name, scheme, per_window in _schemes(w, k, hasher):
            counter.count = 0
            if per_window:
                scheme.window_minimizers(text)
            else:
                scheme.minimizer_positions(text)
            results.append((name, w, counter.count / n))
    return results


def main(argv: Sequence[str] | None = None) -> int:
    """Print the comparison counts of every algorithm."""
    parser = argparse.ArgumentParser(
        description="Count hash comparisons made by minimizer algorithms."
    )
    parser.add_argument("-k", type=int, default=21, help="k-mer length")
    parser.add_argument("-n", type=int, default=None, help="text length")
    parser.add_argument(
        "-w", type=int, action="append", dest="ws", help="window size (repeatable)"
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    args = parser.parse_args(argv)
    try:
        results = count_comparisons(
            args.k, args.n, args.ws or _DEFAULT_WS, args.seed
        )
    except ValueError as error:
        parser.error(str(error))
    for name, w, per_char in results:
        print(f"{name:<10}: w={w:>2} {per_char:.6f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())