"""Histograms of integer keys, built bucket by bucket.

Keys are first bucket-sorted by a hash of their high bits; each bucket is
then counted in its own linear-probing table.  Very frequent keys
("heavy hitters") can be given buckets of their own so that they are
counted without a table.  ``apply_f`` receives ``(key, count)`` pairs and
returns the value to emit, or None to drop the key.  The order of the
output follows the buckets, not the keys.
"""

from __future__ import annotations

import math

from parlgraph.counting_sort import count_sort
from parlgraph.sequential_ht import SequentialHT, hash32, log2_up

MAX_BUCKETS = 1024
SEQ_THRESHOLD = 4096
MEDIUM_THRESHOLD = 5_000_000
LOW_MASK = ~15


class HistTable:
    """Reusable backing storage for histogram hash tables."""

    def __init__(self, empty, size=0):
        self.empty = tuple(empty)
        self.size = size
        self.table = [self.empty] * size

    def resize(self, req_size):
        """Grow to at least ``req_size`` slots, rounded up to a power of two."""
        if req_size > self.size:
            rounded = 1 << log2_up(req_size)
            self.table = [self.empty] * rounded
            self.size = rounded


class BucketAssigner:
    """Maps an index to a bucket, giving heavy-hitter keys buckets of their own.

    Light keys go to one of ``2 ** bits`` hashed buckets; the ``j``-th heavy
    key goes to bucket ``2 ** bits + j``.
    """

    def __init__(self, keys, bits):
        self.keys = keys
        self.num_buckets = 1 << bits
        self.bucket_mask = self.num_buckets - 1
        count = 2 * self.num_buckets
        self.heavy, self.k = self.heavy_hitters(len(keys), count)
        self._index = {key: j for j, key in enumerate(self.heavy)}

    def heavy_hitters(self, n, count):
        """Sample ``count`` keys; return those seen at least three times and their number."""
        if n == 0:
            return [], 0
        sample = sorted(self.keys[hash32(i) % n] for i in range(count))
        heavy = []
        run = 0
        for previous, current in zip(sample, sample[1:]):
            if current == previous:
                run += 1
                if run == 2:
                    heavy.append(current)
            else:
                run = 0
        return heavy, len(heavy)

    def __call__(self, i):
        key = self.keys[i]
        if self.k > 0:
            index = self._index.get(key)
            if index is not None:
                return index + self.num_buckets
        return hash32(key & LOW_MASK) & self.bucket_mask


def _num_buckets(n):
    root = math.ceil(math.sqrt(n))
    buckets = root // 5 if n < 20_000_000 else root
    buckets = max(1 << log2_up(buckets), 1)
    return min(buckets, MAX_BUCKETS)


def _table_size(size):
    return 1 << log2_up(size + 1) if size > 0 else 0


def _segments(counts, num_blocks, stride, n, bucket, last_bucket):
    """Return ``(offset, length)`` of ``bucket`` in every sorted block."""
    block_size = (n - 1) // num_blocks + 1
    result = []
    for j in range(num_blocks):
        start = min(j * block_size, n)
        end = min(start + block_size, n)
        off = counts[j * stride + bucket]
        if bucket == last_bucket:
            length = (end - start) - off
        else:
            length = counts[j * stride + bucket + 1] - off
        result.append((start + off, length))
    return result


def _bucket_items(elements, segments):
    for offset, length in segments:
        yield from elements[offset:offset + length]


def _process_light_buckets(elements, counts, num_blocks, stride, n, num_light,
                           last_bucket, table, add, apply_f):
    """Fill one table per light bucket with ``add`` and collect ``apply_f`` results."""
    bucket_segments = [
        _segments(counts, num_blocks, stride, n, bucket, last_bucket)
        for bucket in range(num_light)
    ]
    sizes = [_table_size(sum(length for _, length in segs)) for segs in bucket_segments]
    table.resize(sum(sizes))
    out = []
    for segs, size in zip(bucket_segments, sizes):
        if size == 0:
            continue
        local = SequentialHT(size, table.empty)
        for item in _bucket_items(elements, segs):
            add(local, item)
        out.extend(local.compact_into(apply_f))
    return out


def _count_key(local, key):
    local.insert_add(key)


def _sequential_histogram(keys, apply_f, table):
    n = len(keys)
    table.resize(1 << log2_up(n + 1))
    local = SequentialHT(n, table.empty, load_factor=1.0)
    for key in keys:
        local.insert_add(key)
    return local.compact_into(apply_f)


def histogram_medium(keys, apply_f, table):
    """Histogram over hashed buckets without separate heavy-hitter buckets."""
    keys = list(keys)
    n = len(keys)
    if n == 0:
        return []
    num_buckets = _num_buckets(n)
    bucket_mask = num_buckets - 1

    def get_bucket(i):
        return hash32(keys[i] & LOW_MASK) & bucket_mask

    elements, counts, num_blocks, _ = count_sort(keys, get_bucket, num_buckets)
    return _process_light_buckets(
        elements, counts, num_blocks, num_buckets, n, num_buckets,
        num_buckets - 1, table, _count_key, apply_f,
    )


def _histogram_heavy(keys, apply_f, table, num_buckets):
    """Histogram with light hashed buckets plus one bucket per heavy key."""
    n = len(keys)
    assigner = BucketAssigner(keys, log2_up(num_buckets))
    num_heavy = assigner.k
    if num_heavy == 0:
        return histogram_medium(keys, apply_f, table)

    num_total = 2 * num_buckets
    elements, counts, num_blocks, _ = count_sort(keys, assigner, num_total)
    light = _process_light_buckets(
        elements, counts, num_blocks, num_total, n, num_buckets,
        num_total - 1, table, _count_key, apply_f,
    )

    heavy = []
    for bucket in range(num_buckets, num_buckets + num_heavy):
        segs = _segments(counts, num_blocks, num_total, n, bucket, num_total - 1)
        key = next((elements[offset] for offset, length in segs if length), None)
        total = sum(length for _, length in segs)
        if key is None or key == table.empty[0]:
            continue
        value = apply_f((key, total))
        if value is not None:
            heavy.append(value)
    return light + heavy


def histogram(keys, apply_f, table):
    """Count each key and return ``apply_f((key, count))`` for every kept key.

    Keys equal to the table's empty key are not reported.
    """
    keys = list(keys)
    n = len(keys)
    if n < SEQ_THRESHOLD:
        return _sequential_histogram(keys, apply_f, table)
    if n < MEDIUM_THRESHOLD:
        return histogram_medium(keys, apply_f, table)
    return _histogram_heavy(keys, apply_f, table, _num_buckets(n))


def seq_histogram_reduce(elements, reduce_f, apply_f, table):
    """Fold every element into one table with ``reduce_f(table, element)``."""
    elements = list(elements)
    n = len(elements)
    table.resize(1 << log2_up(n + 1))
    local = SequentialHT(n, table.empty, load_factor=1.0)
    for element in elements:
        reduce_f(local, element)
    return local.compact_into(apply_f)


def histogram_reduce(elements, keys, reduce_f, apply_f, table):
    """Group ``elements`` by ``keys[i]`` and fold each group with ``reduce_f``.

    ``keys[i]`` is the key of ``elements[i]``; it decides the bucket, while
    ``reduce_f(table, element)`` decides what is stored.
    """
    elements = list(elements)
    n = len(elements)
    if n < SEQ_THRESHOLD:
        return seq_histogram_reduce(elements, reduce_f, apply_f, table)

    num_buckets = _num_buckets(n)
    bucket_mask = num_buckets - 1

    def get_bucket(i):
        return hash32(keys[i] & LOW_MASK) & bucket_mask

    sorted_elements, counts, num_blocks, _ = count_sort(elements, get_bucket, num_buckets)
    return _process_light_buckets(
        sorted_elements, counts, num_blocks, num_buckets, n, num_buckets,
        num_buckets - 1, table, reduce_f, apply_f,
    )