import itertools

import pytest
from hypothesis import given, strategies as st

from kmerwin.hashing import (
    Buffer,
    BufferDouble,
    BufferOpt,
    BufferPar,
    BufferParCached,
    FxHash,
    Hasher,
    NtHash,
    NtHashIter,
    NtHashPar,
    NtHashParIter,
    PackedBufferPar,
    fxhash64,
    nthash_forward,
)


@st.composite
def seq_and_k(draw, alphabet="ACGT", max_size=60):
    seq = draw(st.text(alphabet=alphabet, min_size=1, max_size=max_size))
    k = draw(st.integers(1, len(seq)))
    return seq.encode(), k


class _CountingLanes:
    lanes = 3

    def hash_kmers(self, k, text):
        return ((i, i + 1, i + 2) for i in itertools.count())


def test_single_base_hashes_are_table_values():
    assert nthash_forward(b"A") == 0x3C8BFBB395C60474
    assert nthash_forward(b"C") == 0x3193C18562A02B4C
    assert nthash_forward(b"G") == 0x20323ED082572324
    assert nthash_forward(b"T") == 0x295549F54BE24456
    assert nthash_forward(b"N") == 0


def test_nthash_accepts_str_like_bytes():
    assert nthash_forward("ACGTTGCA") == nthash_forward(b"ACGTTGCA")


def test_empty_kmer_is_rejected():
    with pytest.raises(ValueError):
        nthash_forward(b"")


@given(seq_and_k())
def test_rolling_nthash_matches_window_hashing(case):
    seq, k = case
    rolled = list(NtHash().hash_kmers(k, seq))
    direct = list(Hasher.hash_kmers(NtHash(), k, seq))
    assert rolled == direct
    assert len(rolled) == len(seq) - k + 1


@given(st.binary(min_size=1, max_size=40), st.data())
def test_rolling_nthash_matches_on_arbitrary_bytes(seq, data):
    k = data.draw(st.integers(1, len(seq)))
    rolled = list(NtHashIter(seq, k))
    assert rolled == [nthash_forward(seq[i:i + k]) for i in range(len(seq) - k + 1)]


def test_nthash_iter_rejects_bad_k():
    with pytest.raises(ValueError):
        NtHashIter(b"ACG", 4)
    with pytest.raises(ValueError):
        NtHashIter(b"ACG", 0)


def test_fxhash_of_empty_input_is_zero():
    assert fxhash64(b"") == 0


def test_fxhash_values_fit_in_64_bits_and_differ_by_length():
    hashes = [fxhash64(b"a" * n) for n in range(20)]
    assert all(0 <= h < 2**64 for h in hashes)
    assert len(set(hashes)) == 20
    assert fxhash64("ACGT") == fxhash64(b"ACGT")


@given(seq_and_k())
def test_fxhash_kmers_hash_each_window(case):
    seq, k = case
    hashes = list(FxHash().hash_kmers(k, seq))
    assert hashes[0] == fxhash64(seq[:k])
    assert hashes[-1] == fxhash64(seq[-k:])
    assert len(hashes) == len(seq) - k + 1


@given(seq_and_k())
def test_buffers_preserve_hashes(case):
    seq, k = case
    expected = list(NtHash().hash_kmers(k, seq))
    assert list(Buffer(NtHash()).hash_kmers(k, seq)) == expected
    assert list(BufferOpt(NtHash()).hash_kmers(k, seq)) == expected


def test_buffer_hash_delegates():
    assert Buffer(FxHash()).hash(b"ACGT") == fxhash64(b"ACGT")
    assert BufferOpt(NtHash()).hash(b"ACGT") == nthash_forward(b"ACGT")
    assert BufferDouble(NtHash()).hash(b"GATT") == nthash_forward(b"GATT")


def test_buffer_opt_rejects_too_large_k():
    with pytest.raises(ValueError):
        BufferOpt(FxHash()).hash_kmers(5, b"ACG")


@given(seq_and_k())
def test_buffer_double_drops_odd_last_kmer(case):
    seq, k = case
    full = list(FxHash().hash_kmers(k, seq))
    halves = list(BufferDouble(FxHash()).hash_kmers(k, seq))
    assert halves == full[: 2 * (len(full) // 2)]


@given(seq_and_k(), st.integers(1, 4))
def test_parallel_lanes_cover_consecutive_chunks(case, lanes):
    seq, k = case
    full = list(NtHash().hash_kmers(k, seq))
    rows = list(NtHashPar(lanes).hash_kmers(k, seq))
    n = len(full) // lanes
    assert len(rows) == n
    for j, row in enumerate(rows):
        assert len(row) == lanes
        for lane, value in enumerate(row):
            assert value == full[lane * n + j]


@given(seq_and_k(), st.integers(1, 4))
def test_buffer_par_matches_parallel_hasher(case, lanes):
    seq, k = case
    expected = list(NtHashPar(lanes).hash_kmers(k, seq))
    assert list(BufferPar(NtHashPar(lanes)).hash_kmers(k, seq)) == expected


def test_parallel_hasher_rejects_zero_lanes():
    with pytest.raises(ValueError):
        NtHashPar(0)
    with pytest.raises(ValueError):
        NtHashParIter(b"ACGT", 2, 0)


def test_packed_buffer_counts_four_bases_per_byte():
    text = bytes(10)
    rows = list(PackedBufferPar(_CountingLanes()).hash_kmers(5, text))
    assert len(rows) == (4 * len(text) - 5 + 1) // 3
    assert rows[0] == (0, 1, 2)
    assert rows[-1][0] == len(rows) - 1


def test_packed_buffer_fails_when_hasher_runs_short():
    with pytest.raises(ValueError):
        PackedBufferPar(NtHashPar(2)).hash_kmers(3, b"ACGTACGT")


def test_cached_buffer_is_resized_between_calls():
    cached = BufferParCached(_CountingLanes())
    long_rows = list(cached.hash_kmers(4, bytes(12)))
    short_rows = list(cached.hash_kmers(4, bytes(3)))
    assert long_rows == list(PackedBufferPar(_CountingLanes()).hash_kmers(4, bytes(12)))
    assert short_rows == list(PackedBufferPar(_CountingLanes()).hash_kmers(4, bytes(3)))
    assert len(short_rows) < len(long_rows)