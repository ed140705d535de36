"""Minimizer schemes built on k-mer hashes and sliding window minima."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from typing import Iterator

from kmerwin.hashing import FxHash, Hasher, Text
from kmerwin.windows import SlidingMin

_MASK64 = (1 << 64) - 1
_MUL_CONSTANT = 0x517CC1B727220A95


def _as_bytes(text: Text) -> bytes:
    if isinstance(text, str):
        return text.encode("ascii")
    return bytes(text)


def _check_params(w: int, k: int) -> None:
    if w < 1:
        raise ValueError("window size w must be positive")
    if k < 1:
        raise ValueError("k must be positive")


@dataclass(frozen=True)
class SuperKmer:
    """A run of consecutive windows sharing one minimizer."""

    start_pos: int
    """Index of the first window of the run; the run ends where the next starts."""
    minimizer_pos: int
    """Absolute position of the run's minimizer."""


class Minimizer:
    """A minimizer scheme.

    Subclasses provide :meth:`window_minimizers`, :meth:`minimizer_positions`
    or both.
    """

    def minimizer_positions(self, text: Text) -> list[int]:
        """Absolute positions of all distinct consecutive minimizers."""
        return [pos for pos, _ in groupby(self.window_minimizers(text))]

    def window_minimizers(self, text: Text) -> list[int]:
        """For each window, the absolute position of its minimizer."""
        raise TypeError(f"{type(self).__name__} does not compute window minimizers")

    def super_kmers(self, text: Text) -> list[SuperKmer]:
        """The super-k-mers of ``text``."""
        return [
            SuperKmer(start_pos=next(group)[0], minimizer_pos=pos)
            for pos, group in groupby(
                enumerate(self.window_minimizers(text)), key=lambda item: item[1]
            )
        ]


class NaiveMinimizer(Minimizer):
    """Hashes every k-mer of every window and takes the leftmost minimum."""

    def __init__(self, w: int, k: int, hasher: Hasher | None = None) -> None:
        _check_params(w, k)
        self.w = w
        self.k = k
        self.hasher = hasher if hasher is not None else FxHash()

    def window_minimizers(self, text: Text) -> list[int]:
        data = _as_bytes(text)
        w, k = self.w, self.k
        span = w + k - 1
        result = []
        for start in range(len(data) - span + 1):
            window = data[start:start + span]
            offset = min(range(w), key=lambda i: self.hasher.hash(window[i:i + k]))
            result.append(start + offset)
        return result


class JumpingMinimizer(Minimizer):
    """Jumps to the window right after each found minimizer."""

    def __init__(self, w: int, k: int, hasher: Hasher | None = None) -> None:
        _check_params(w, k)
        self.w = w
        self.k = k
        self.hasher = hasher if hasher is not None else FxHash()

    def minimizer_positions(self, text: Text) -> list[int]:
        hashes = list(self.hasher.hash_kmers(self.k, text))
        w = self.w
        if len(hashes) < w:
            raise ValueError(f"text has {len(hashes)} k-mers, fewer than w={w}")

        def leftmost_min(start: int, stop: int) -> int:
            return min(range(start, stop), key=hashes.__getitem__)

        positions: list[int] = []
        start = 0
        while start < len(hashes) - w:
            found = leftmost_min(start, start + w)
            positions.append(found)
            start = found + 1
        found = leftmost_min(len(hashes) - w, len(hashes))
        if not positions or positions[-1] != found:
            positions.append(found)
        return positions


class SlidingWindowMinimizer(Minimizer):
    """Hashes all k-mers and runs a sliding window minimum algorithm over them."""

    def __init__(self, w: int, k: int, alg: SlidingMin, hasher: Hasher | None = None) -> None:
        _check_params(w, k)
        self.w = w
        self.k = k
        self.alg = alg
        self.hasher = hasher if hasher is not None else FxHash()

    def window_minimizers(self, text: Text) -> list[int]:
        hashes = self.hasher.hash_kmers(self.k, text)
        return [elem.pos for elem in self.alg.sliding_min(self.w, hashes)]


class RescanDaniel(Minimizer):
    """Rolling ntHash with a rescan whenever the minimum leaves the window."""

    def __init__(self, k: int, w: int) -> None:
        _check_params(w, k)
        self.k = k
        self.w = w

    def window_minimizers(self, text: Text) -> list[int]:
        return list(robust_winnowing(text, self.w + self.k - 1, self.k))


def _build_lut() -> tuple[int, ...]:
    table = [0] * 256
    table[ord("A")] = 0x3C8BFBB395C60474
    table[ord("C")] = 0x3193C18562A02B4C
    table[ord("G")] = 0x20323ED082572324
    table[ord("T")] = 0x295549F54BE24456
    return tuple(table)


_LUT = _build_lut()


def _rotl(value: int, amount: int) -> int:
    amount %= 64
    return ((value << amount) & _MASK64) | (value >> (64 - amount))


def _lookup(base: int, mul: bool) -> int:
    return (base * _MUL_CONSTANT) & _MASK64 if mul else _LUT[base]


def _leftmost_minimum(window: bytes, k: int, mul: bool) -> tuple[int, int, int]:
    """Offset and hash of the leftmost minimal k-mer, and the last k-mer's hash."""
    current = 0
    for offset, base in enumerate(window[:k]):
        current ^= _rotl(_lookup(base, mul), k - 1 - offset)
    best, best_offset = current, 0
    for offset, base in enumerate(window[k:]):
        current = (
            _rotl(current, 1)
            ^ _rotl(_lookup(window[offset], mul), k)
            ^ _lookup(base, mul)
        )
        if current < best:
            best, best_offset = current, offset + 1
    return best_offset, best, current


def robust_winnowing(
    text: Text, l: int, k: int, dedup: bool = False, mul: bool = False
) -> Iterator[int]:
    """Yield minimizer positions of the windows of ``l`` characters.

    Without ``dedup`` one position is yielded per window; with it, only when
    the minimizer changes.  ``mul`` hashes bases by multiplication instead of
    the ntHash table.  Ties go to the leftmost k-mer.
    """
    data = _as_bytes(text)
    if k < 1:
        raise ValueError("k must be positive")
    if l < k:
        raise ValueError(f"window length l={l} is shorter than k={k}")
    best = best_idx = current = 0
    for i in range(len(data) - l + 1):
        if i == 0 or i > best_idx:
            offset, best, current = _leftmost_minimum(data[i:i + l], k, mul)
            best_idx = i + offset
            yield best_idx
            continue
        current = (
            _rotl(current, 1)
            ^ _rotl(_lookup(data[i + l - 1 - k], mul), k)
            ^ _lookup(data[i + l - 1], mul)
        )
        if current < best:
            best_idx = i + l - k
            best = current
            if dedup:
                yield best_idx
        if not dedup:
            yield best_idx