# kmerwin

Random minimizers of DNA sequences in pure Python: k-mer hashes,
several sliding window minimum algorithms, and minimizer schemes built
on top of them. Texts may be given as `bytes`, `bytearray`,
`memoryview` or ASCII `str`.

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `kmerwin.hashing`

- `fxhash64(data)`: 64-bit Fx hash of a byte string.
- `nthash_forward(kmer)`: forward ntHash of a whole k-mer.
- `Hasher`: base class with `hash(text)` and `hash_kmers(k, text)`; the
  default `hash_kmers` hashes every k-mer independently.
- `FxHash`: `fxhash64` of each k-mer.
- `NtHash`: forward ntHash, rolled over consecutive k-mers with
  `NtHashIter(seq, k)`.
- `NtHashPar(lanes)` / `NtHashParIter(seq, k, lanes)`: rolling ntHash over
  `lanes` equal chunks of the k-mers at once, yielding one tuple of hashes
  per step.
- Buffering wrappers that compute all hashes up front: `Buffer`,
  `BufferOpt`, `BufferDouble` (hashes the two halves with two hashers and
  drops the last k-mer when their number is odd), `BufferPar`, and
  `PackedBufferPar` / `BufferParCached`, which size their output as for
  text packed four bases per byte. `BufferParCached` reuses one buffer, so
  its iterator is only valid until the next call.

Invalid `k` (not positive, or longer than the text) raises `ValueError`.

### `kmerwin.elements`

- `Elem(val, pos)`: a value at a position, ordered by value and then by
  position.
- `Top` and its single instance `TOP`: compares greater than every other
  value.
- `RingBuf(w, fill)`: a fixed-size buffer of the last `w` values, with
  `push`, `idx`, `forward_slices()` (oldest first) and `forward_min()`.

### `kmerwin.windows`

Sliding window minimum algorithms, each with `sliding_min(w, values)`,
and the helper `sliding_min(values, w, alg)`:

- `Buffered`, `BufferedOpt`, `Rescan`, `RescanOpt`, `Split`: one `Elem` per
  complete window, the leftmost minimum.
- `SplitOpt`: as `Split`, but comparing only values; within a chunk's
  suffix minima ties go to the later element.
- `Queue`: a monotone queue that yields an element for every input value,
  including the first `w - 1` incomplete windows, and breaks ties in
  favour of the rightmost value.
- `SplitSimd`: lane-wise two-stacks minimum over rows of 32-bit hashes,
  comparing only their upper 16 bits and yielding rows of positions
  (assumes fewer than 2**16 rows).

`w` must be positive, otherwise `ValueError` is raised.

### `kmerwin.minimizers`

Every `Minimizer` offers `window_minimizers(text)` (the minimizer
position of each window), `minimizer_positions(text)` (consecutive
duplicates removed) and `super_kmers(text)`, a list of
`SuperKmer(start_pos, minimizer_pos)`.

- `NaiveMinimizer(w, k, hasher)`: hashes every k-mer of every window.
- `SlidingWindowMinimizer(w, k, alg, hasher)`: hashes all k-mers once and
  runs a window algorithm from `kmerwin.windows`.
- `JumpingMinimizer(w, k, hasher)`: only `minimizer_positions`; its
  `window_minimizers` raises `TypeError`.
- `RescanDaniel(k, w)` and `robust_winnowing(text, l, k, dedup=False,
  mul=False)`: rolling ntHash (or multiplicative hash with `mul=True`)
  with a rescan when the minimum leaves the window; ties go to the
  leftmost k-mer.

The hasher defaults to `FxHash()`.

### `kmerwin.counting`

`CountingHash(counter, hasher)` wraps a hasher so that its hashes are
`CountCompare` values, which add to a shared `Counter` on every
comparison between two counted hashes. `count_comparisons(k, n, ws,
seed)` returns `(name, w, comparisons / n)` triples for the buffered,
queue, jumping, rescan and split schemes on random DNA.

## Example

```python
from kmerwin.hashing import FxHash
from kmerwin.minimizers import SlidingWindowMinimizer
from kmerwin.windows import Rescan

text = b"ACGTTGCAACGTAGCTAGCTAGGACTTACG"
scheme = SlidingWindowMinimizer(w=5, k=7, alg=Rescan(), hasher=FxHash())

print(scheme.window_minimizers(text))    # one position per window
print(scheme.minimizer_positions(text))  # distinct consecutive positions
for sk in scheme.super_kmers(text):
    print(sk.start_pos, sk.minimizer_pos)
```

## Counting comparisons

```
kmerwin-count -k 21 -n 100000 -w 10 -w 20 --seed 1
```

prints one line per algorithm and window size with the number of hash
comparisons made per character of a random DNA text. Without `-n` the
text holds ten million k-mers, which takes a long time; without `-w` the
window sizes are 10 and 20.

## What it does not do

There are no canonical (strand-independent) minimizers, no reading of
sequence files such as FASTA, and no timing benchmarks; the package works
on texts already in memory and is written for clarity, not speed.