"""A growable multimap of (key, value) pairs with linear probing."""

from __future__ import annotations

import threading

from parlgraph.sequential_ht import hash64, log2_up


class ResizableTable:
    """Open-addressing table storing distinct (key, value) pairs.

    A key may appear with several values; all entries for a key lie on its
    probe chain.  ``empty`` is the pair stored in unused slots.
    """

    def __init__(self, size, empty, key_hash=hash64):
        self.empty = tuple(empty)
        self.empty_key = self.empty[0]
        self.key_hash = key_hash
        self.m = 1 << log2_up(int(1.1 * size))
        self.mask = self.m - 1
        self.ne = 0
        self.table = [self.empty] * self.m
        self._lock = threading.Lock()

    def _probe(self, key):
        h = self.key_hash(key) & self.mask
        for _ in range(self.m):
            yield h
            h = (h + 1) & self.mask

    def maybe_resize(self, n_inc):
        """Grow before ``n_inc`` more insertions would pass a quarter full."""
        nt = self.ne + n_inc
        if nt > 0.25 * self.m:
            new_m = 1 << log2_up(10 * nt)
            if new_m == self.m:
                return
            old = self.table
            self.m = new_m
            self.mask = new_m - 1
            self.ne = 0
            self.table = [self.empty] * new_m
            for kv in old:
                if kv[0] != self.empty_key:
                    self.insert(kv)

    def get_iter(self, key):
        """Yield every stored pair whose key is ``key``."""
        for h in self._probe(key):
            kv = self.table[h]
            if kv[0] == self.empty_key:
                return
            if kv[0] == key:
                yield kv

    def insert(self, kv):
        """Store ``kv`` unless that exact pair is present; return True if stored."""
        kv = tuple(kv)
        with self._lock:
            for h in self._probe(kv[0]):
                current = self.table[h]
                if current[0] == self.empty_key:
                    self.table[h] = kv
                    self.ne += 1
                    return True
                if current == kv:
                    return False
        raise OverflowError("resizable table is full")

    def insert_seq(self, kv):
        """Store ``kv`` in the first free slot without checking for duplicates."""
        kv = tuple(kv)
        for h in self._probe(kv[0]):
            if self.table[h][0] == self.empty_key:
                self.table[h] = kv
                self.ne += 1
                return True
        raise OverflowError("resizable table is full")

    def num_appearances(self, key):
        return sum(1 for _ in self.get_iter(key))

    def contains(self, key):
        return any(True for _ in self.get_iter(key))

    def contains_pair(self, key, value):
        return any(v == value for _, v in self.get_iter(key))

    def map(self, f):
        """Call ``f(pair)`` for every occupied slot."""
        for kv in self.entries():
            f(kv)

    def entries(self):
        return [kv for kv in self.table if kv[0] != self.empty_key]

    def analyze(self):
        """Print probe-chain statistics and return the chain lengths, sorted."""
        lengths = []
        chain = 0
        for kv in self.table:
            if kv[0] == self.empty_key:
                if chain > 0:
                    lengths.append(chain)
                chain = 0
            else:
                chain += 1
        lengths.sort()
        print(f"Analyzed table, m = {self.m} ne = {self.ne} num_probes = {len(lengths)}")
        shown = [str(length) for length in reversed(lengths[1:])][:251]
        print(" ".join(shown))
        print("End of table analysis")
        return lengths

    def clear(self):
        self.table = [self.empty] * self.m
        self.ne = 0