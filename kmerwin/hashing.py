"""K-mer hash functions and adaptors that buffer their output."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from itertools import islice
from typing import Iterable, Iterator, Union

Text = Union[bytes, bytearray, memoryview, str]

_MASK64 = (1 << 64) - 1
_FX_SEED = 0x517CC1B727220A95
_FX_ROTATE = 5


def _as_bytes(text: Text) -> bytes:
    if isinstance(text, str):
        return text.encode("ascii")
    return bytes(text)


def _rotl(value: int, amount: int) -> int:
    amount %= 64
    return ((value << amount) & _MASK64) | (value >> (64 - amount))


def _check_k(k: int, length: int) -> None:
    if k < 1:
        raise ValueError("k must be positive")
    if k > length:
        raise ValueError(f"k={k} exceeds sequence length {length}")


def _kmer_count(length: int, k: int) -> int:
    if k < 1:
        raise ValueError("k must be positive")
    count = length - k + 1
    if count < 0:
        raise ValueError(f"k={k} exceeds sequence length {length}")
    return count


def _take_exact(values: Iterable, count: int) -> list:
    items = list(islice(values, count))
    if len(items) < count:
        raise ValueError(f"hasher yielded {len(items)} values, expected {count}")
    return items


def _fx_word(state: int, word: int) -> int:
    return ((_rotl(state, _FX_ROTATE) ^ word) * _FX_SEED) & _MASK64


def fxhash64(data: Text) -> int:
    """64-bit Fx hash of a byte string, length-prefixed as slices are hashed."""
    data = _as_bytes(data)
    state = _fx_word(0, len(data))
    pos = 0
    while len(data) - pos >= 8:
        state = _fx_word(state, int.from_bytes(data[pos:pos + 8], "little"))
        pos += 8
    if len(data) - pos >= 4:
        state = _fx_word(state, int.from_bytes(data[pos:pos + 4], "little"))
        pos += 4
    for byte in data[pos:]:
        state = _fx_word(state, byte)
    return state


def _build_nt_lookup() -> tuple[int, ...]:
    table = [1] * 256
    table[ord("A")] = 0x3C8B_FBB3_95C6_0474
    table[ord("C")] = 0x3193_C185_62A0_2B4C
    table[ord("G")] = 0x2032_3ED0_8257_2324
    table[ord("T")] = 0x2955_49F5_4BE2_4456
    table[ord("N")] = 0
    return tuple(table)


_NT_LOOKUP = _build_nt_lookup()


def _rotated_lookup(k: int) -> tuple[int, ...]:
    return tuple(_rotl(value, k) for value in _NT_LOOKUP)


def nthash_forward(kmer: Text) -> int:
    """Forward ntHash of a whole k-mer."""
    kmer = _as_bytes(kmer)
    k = len(kmer)
    if k == 0:
        raise ValueError("cannot hash an empty k-mer")
    result = 0
    for offset, base in enumerate(kmer):
        result ^= _rotl(_NT_LOOKUP[base], k - offset - 1)
    return result


class Hasher(ABC):
    """Hashes k-mers; by default each window is hashed independently."""

    @abstractmethod
    def hash(self, text: Text) -> int:
        """Hash of one k-mer."""

    def hash_kmers(self, k: int, text: Text) -> Iterator[int]:
        """Hashes of every k-mer of ``text``, left to right."""
        data = _as_bytes(text)
        if k < 1:
            raise ValueError("k must be positive")
        return (self.hash(data[start:start + k]) for start in range(len(data) - k + 1))


class FxHash(Hasher):
    """Fx hash of each k-mer."""

    def hash(self, text: Text) -> int:
        return fxhash64(text)

    def __repr__(self) -> str:
        return "FxHash()"


class NtHashIter:
    """Rolling forward ntHash over all k-mers of a sequence."""

    def __init__(self, seq: Text, k: int) -> None:
        seq = _as_bytes(seq)
        _check_k(k, len(seq))
        self._seq = seq
        self._k = k
        self._fh = nthash_forward(seq[:k])
        self._index = 0
        self._end = len(seq) - k + 1
        self._rot_k = _rotated_lookup(k)

    def __iter__(self) -> "NtHashIter":
        return self

    def __next__(self) -> int:
        if self._index == self._end:
            raise StopIteration
        if self._index:
            i = self._index - 1
            self._fh = (
                _rotl(self._fh, 1)
                ^ self._rot_k[self._seq[i]]
                ^ _NT_LOOKUP[self._seq[i + self._k]]
            )
        self._index += 1
        return self._fh


class NtHash(Hasher):
    """Forward ntHash, rolled over consecutive k-mers."""

    def hash(self, text: Text) -> int:
        return nthash_forward(text)

    def hash_kmers(self, k: int, text: Text) -> Iterator[int]:
        return NtHashIter(text, k)

    def __repr__(self) -> str:
        return "NtHash()"


class Buffer(Hasher):
    """Collects all hashes of the inner hasher before handing them out."""

    def __init__(self, hasher: Hasher) -> None:
        self.hasher = hasher

    def hash(self, text: Text) -> int:
        return self.hasher.hash(text)

    def hash_kmers(self, k: int, text: Text) -> Iterator[int]:
        return iter(list(self.hasher.hash_kmers(k, text)))


class BufferOpt(Hasher):
    """Buffers exactly the expected number of hashes of the inner hasher."""

    def __init__(self, hasher: Hasher) -> None:
        self.hasher = hasher

    def hash(self, text: Text) -> int:
        return self.hasher.hash(text)

    def hash_kmers(self, k: int, text: Text) -> Iterator[int]:
        data = _as_bytes(text)
        count = _kmer_count(len(data), k)
        return iter(_take_exact(self.hasher.hash_kmers(k, data), count))


class BufferDouble(Hasher):
    """Hashes the two halves of the text with two hashers.

    With an odd number of k-mers the last one is dropped.
    """

    def __init__(self, hasher: Hasher) -> None:
        self.hasher1 = copy.copy(hasher)
        self.hasher2 = hasher

    def hash(self, text: Text) -> int:
        return self.hasher1.hash(text)

    def hash_kmers(self, k: int, text: Text) -> Iterator[int]:
        data = _as_bytes(text)
        per_part = _kmer_count(len(data), k) // 2
        part_len = per_part + k - 1
        first = self.hasher1.hash_kmers(k, data[:part_len])
        second = self.hasher2.hash_kmers(k, data[per_part:per_part + part_len])
        return iter(_take_exact(first, per_part) + _take_exact(second, per_part))


class NtHashParIter:
    """Rolling ntHash over ``lanes`` equal chunks of k-mers at once.

    Lane ``l`` covers k-mers ``l*n .. l*n + n - 1`` where ``n`` is the number
    of k-mers divided by ``lanes``; each step yields one hash per lane.
    """

    def __init__(self, seq: Text, k: int, lanes: int) -> None:
        if lanes < 1:
            raise ValueError("lanes must be positive")
        seq = _as_bytes(seq)
        _check_k(k, len(seq))
        self._seq = seq
        self._k = k
        self._n = (len(seq) - k + 1) // lanes
        self._starts = [lane * self._n for lane in range(lanes)]
        self._fh = [nthash_forward(seq[start:start + k]) for start in self._starts]
        self._index = 0
        self._rot_k = _rotated_lookup(k)

    def __iter__(self) -> "NtHashParIter":
        return self

    def __next__(self) -> tuple[int, ...]:
        if self._index == self._n:
            raise StopIteration
        if self._index:
            i = self._index - 1
            seq, k = self._seq, self._k
            self._fh = [
                _rotl(fh, 1) ^ self._rot_k[seq[start + i]] ^ _NT_LOOKUP[seq[start + i + k]]
                for fh, start in zip(self._fh, self._starts)
            ]
        self._index += 1
        return tuple(self._fh)


class NtHashPar:
    """Parallel-lane ntHash."""

    def __init__(self, lanes: int) -> None:
        if lanes < 1:
            raise ValueError("lanes must be positive")
        self.lanes = lanes

    def hash_kmers(self, k: int, text: Text) -> Iterator[tuple[int, ...]]:
        return NtHashParIter(text, k, self.lanes)


def _lane_rows(hasher, k: int, data: bytes, count: int) -> list[tuple]:
    rows = _take_exact(hasher.hash_kmers(k, data), count)
    return [tuple(row) for row in rows]


class BufferPar:
    """Buffers the per-lane hashes of a parallel hasher over plain text."""

    def __init__(self, hasher) -> None:
        self.hasher = hasher

    @property
    def lanes(self) -> int:
        return self.hasher.lanes

    def hash_kmers(self, k: int, text: Text) -> Iterator[tuple]:
        data = _as_bytes(text)
        count = _kmer_count(len(data), k) // self.lanes
        return iter(_lane_rows(self.hasher, k, data, count))


def _packed_row_count(length: int, k: int, lanes: int) -> int:
    return _kmer_count(4 * length, k) // lanes


class PackedBufferPar:
    """Buffers a parallel hasher over 2-bit packed text (four bases per byte)."""

    def __init__(self, hasher) -> None:
        self.hasher = hasher

    @property
    def lanes(self) -> int:
        return self.hasher.lanes

    def hash_kmers(self, k: int, text: Text) -> Iterator[tuple]:
        data = _as_bytes(text)
        count = _packed_row_count(len(data), k, self.lanes)
        return iter(_lane_rows(self.hasher, k, data, count))


class BufferParCached:
    """Like :class:`PackedBufferPar`, but reuses one buffer between calls.

    The returned iterator reads the shared buffer, so it is only valid until
    the next call.
    """

    def __init__(self, hasher) -> None:
        self.hasher = hasher
        self._buffer: list[tuple] = []

    @property
    def lanes(self) -> int:
        return self.hasher.lanes

    def hash_kmers(self, k: int, text: Text) -> Iterator[tuple]:
        data = _as_bytes(text)
        count = _packed_row_count(len(data), k, self.lanes)
        self._buffer[:] = _lane_rows(self.hasher, k, data, count)
        return iter(self._buffer)