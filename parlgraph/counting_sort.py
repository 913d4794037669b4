"""Counting sort into buckets, optionally block by block without a transpose."""

from __future__ import annotations

import math
from itertools import accumulate

from parlgraph.sequential_ht import log2_up

SEQ_THRESHOLD = 2048
MAX_BLOCKS = 512


def _sort_block(items, get_key, start, end, num_buckets):
    """Stable bucket sort of ``items[start:end]``; returns (sorted, bucket starts)."""
    keys = [get_key(i) for i in range(start, end)]
    sizes = [0] * num_buckets
    for key in keys:
        if not 0 <= key < num_buckets:
            raise ValueError(f"bucket {key} out of range for {num_buckets} buckets")
        sizes[key] += 1
    starts = list(accumulate(sizes, initial=0))[:-1]
    out = [None] * (end - start)
    positions = list(starts)
    for index, key in zip(range(start, end), keys):
        out[positions[key]] = items[index]
        positions[key] += 1
    return out, starts


def seq_count_sort(items, get_key, num_buckets):
    """Stably sort ``items`` by bucket ``get_key(i)`` of each index ``i``.

    Returns the sorted list and the start offset of every bucket in it.
    """
    return _sort_block(items, get_key, 0, len(items), num_buckets)


def count_sort(items, get_key, num_buckets):
    """Bucket-sort ``items`` in independent blocks.

    The result is ``(elements, counts, num_blocks, m)``.  ``elements`` is
    made of ``num_blocks`` consecutive blocks, each sorted by bucket on its
    own; ``counts[j * num_buckets + b]`` is where bucket ``b`` starts inside
    block ``j``, relative to the block's start.  Small inputs are sorted as
    a single block, in which case ``counts`` has one extra trailing entry
    holding the total length and ``m`` is ``num_buckets + 1``.
    """
    n = len(items)
    root = math.ceil(math.sqrt(n))
    num_blocks = root // 10 if n < 20_000_000 else root
    num_blocks = min(num_blocks, MAX_BLOCKS)
    num_blocks = 1 << log2_up(num_blocks)

    if n < SEQ_THRESHOLD or num_blocks == 1:
        elements, counts = _sort_block(items, get_key, 0, n, num_buckets)
        return elements, counts + [n], 1, num_buckets + 1

    block_size = (n - 1) // num_blocks + 1
    elements = []
    counts = []
    for block in range(num_blocks):
        start = min(block * block_size, n)
        end = min(start + block_size, n)
        sorted_block, starts = _sort_block(items, get_key, start, end, num_buckets)
        elements.extend(sorted_block)
        counts.extend(starts)
    return elements, counts, num_blocks, num_blocks * num_buckets