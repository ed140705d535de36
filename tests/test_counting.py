import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from kmerwin.counting import (
    CountCompare,
    Counter,
    CountingHash,
    count_comparisons,
    main,
)
from kmerwin.elements import TOP, Elem
from kmerwin.hashing import FxHash, fxhash64
from kmerwin.minimizers import JumpingMinimizer, SlidingWindowMinimizer
from kmerwin.windows import Buffered, Queue, Rescan, Split

NAMES = ["buffered", "queue", "jumping", "rescan", "split"]


def test_counter_increment():
    counter = Counter()
    counter.increment()
    counter.increment()
    assert counter.count == 2


def test_ordering_counts_once_per_comparison():
    counter = Counter()
    a = CountCompare(5, counter)
    b = CountCompare(7, counter)
    assert a < b
    assert counter.count == 1
    assert b >= a
    assert counter.count == 2


def test_unequal_equality_test_is_not_counted():
    counter = Counter()
    a = CountCompare(5, counter)
    b = CountCompare(7, counter)
    assert not (a == b)
    assert counter.count == 0
    assert a == CountCompare(5, counter)
    assert counter.count == 1


def test_elem_comparison_counts_once():
    counter = Counter()
    first = Elem(CountCompare(3, counter), 0)
    second = Elem(CountCompare(9, counter), 1)
    assert first < second
    assert counter.count == 1


def test_sentinel_comparisons_not_counted():
    counter = Counter()
    a = CountCompare(5, counter)
    assert a < TOP
    assert not (TOP < a)
    assert min(TOP, a) is a
    assert counter.count == 0


def test_missing_counter_not_counted():
    counter = Counter()
    a = CountCompare(5, counter)
    b = CountCompare(1, None)
    assert b < a
    assert counter.count == 0


def test_counting_hash_values_match_inner_hasher():
    counter = Counter()
    hasher = CountingHash(counter, FxHash())
    result = hasher.hash(b"ACGTA")
    assert result.val == fxhash64(b"ACGTA")
    assert result.counter is counter
    text = b"ACGTTGCAACGT"
    assert [h.val for h in hasher.hash_kmers(4, text)] == list(
        FxHash().hash_kmers(4, text)
    )
    assert counter.count == 0


@settings(max_examples=30, deadline=None)
@given(
    text=st.text(alphabet="ACGT", min_size=12, max_size=60),
    w=st.integers(min_value=1, max_value=5),
    k=st.integers(min_value=1, max_value=6),
)
def test_counting_does_not_change_minimizers(text, w, k):
    counter = Counter()
    counting = CountingHash(counter, FxHash())
    plain = FxHash()
    for alg in (Buffered(), Queue(), Rescan(), Split()):
        counted = SlidingWindowMinimizer(w, k, alg, counting).window_minimizers(text)
        expected = SlidingWindowMinimizer(w, k, alg, plain).window_minimizers(text)
        assert counted == expected
    assert JumpingMinimizer(w, k, counting).minimizer_positions(
        text
    ) == JumpingMinimizer(w, k, plain).minimizer_positions(text)


def test_buffered_comparison_bounds():
    counter = Counter()
    hasher = CountingHash(counter, FxHash())
    text = b"ACGTTGCATGCAAGTCCGATAGCTAGGCTA" * 3
    k, w = 5, 4
    num_kmers = len(text) - k + 1
    SlidingWindowMinimizer(w, k, Buffered(), hasher).window_minimizers(text)
    assert (num_kmers - w + 1) * (w - 1) <= counter.count <= num_kmers * (w - 1)


def test_buffered_single_window_makes_no_comparisons():
    counter = Counter()
    hasher = CountingHash(counter, FxHash())
    SlidingWindowMinimizer(1, 3, Buffered(), hasher).window_minimizers(b"ACGTACGTTT")
    assert counter.count == 0


def test_count_comparisons_shape_and_determinism():
    results = count_comparisons(k=5, n=300, ws=[3, 6], seed=7)
    assert [name for name, _, _ in results] == NAMES * 2
    assert [w for _, w, _ in results] == [3] * 5 + [6] * 5
    assert all(value > 0 for _, _, value in results)
    assert results == count_comparisons(k=5, n=300, ws=[3, 6], seed=7)


def test_count_comparisons_too_short_text():
    with pytest.raises(ValueError):
        count_comparisons(k=5, n=8, ws=[10], seed=1)


def test_count_comparisons_bad_window():
    with pytest.raises(ValueError):
        count_comparisons(k=5, n=100, ws=[0], seed=1)


def test_main_prints_one_line_per_algorithm(capsys):
    assert main(["-k", "4", "-n", "200", "-w", "3", "--seed", "2"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 5
    assert [line.split(":")[0].strip() for line in lines] == NAMES
    assert all("w= 3" in line for line in lines)


def test_main_rejects_short_text():
    with pytest.raises(SystemExit):
        main(["-k", "4", "-n", "5", "-w", "10"])