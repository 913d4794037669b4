"""Open-addressing hash tables keyed on a reserved empty key."""

from __future__ import annotations

import threading

from parlgraph.sequential_ht import hash64, log2_up

DEFAULT_SPACE_MULT = 1.1
DEFAULT_MAX_PROBES = 10000


class SparseTable:
    """Linear-probing table of (key, value) pairs with a fixed empty pair.

    ``size`` is the number of entries the table is expected to hold; the
    table itself is ``space_mult * size + 1`` rounded up to a power of two.
    Only the first value stored for a key is kept by :meth:`insert`.
    """

    def __init__(self, size, empty, key_hash=hash64, space_mult=None):
        if space_mult is None:
            space_mult = DEFAULT_SPACE_MULT
        self.empty = tuple(empty)
        self.empty_key = self.empty[0]
        self.key_hash = key_hash
        self._lock = threading.Lock()
        self._allocate(1 << log2_up(int(space_mult * size) + 1))

    def _allocate(self, m):
        self.m = m
        self.mask = m - 1
        self.table = [self.empty] * m

    def __len__(self):
        return self.m

    def _probe(self, key):
        h = self.key_hash(key) & self.mask
        for _ in range(self.m):
            yield h
            h = (h + 1) & self.mask

    def idx(self, key):
        """Return the slot holding ``key``; raise KeyError if it is absent."""
        for h in self._probe(key):
            k = self.table[h][0]
            if k == key:
                return h
            if k == self.empty_key:
                break
        raise KeyError(key)

    def insert(self, kv):
        """Store ``kv`` unless its key is present; return True if stored."""
        key, value = kv
        with self._lock:
            for h in self._probe(key):
                k = self.table[h][0]
                if k == self.empty_key:
                    self.table[h] = (key, value)
                    return True
                if k == key:
                    return False
        raise OverflowError("sparse table is full")

    def insert_f(self, kv, f):
        """Set the value for ``kv[0]`` to ``f(current_value, kv)``.

        For a new key the current value is the empty pair's value.
        Returns True if the key was new.
        """
        key = kv[0]
        with self._lock:
            for h in self._probe(key):
                k, current = self.table[h]
                if k == self.empty_key:
                    self.table[h] = (key, f(current, kv))
                    return True
                if k == key:
                    self.table[h] = (key, f(current, kv))
                    return False
        raise OverflowError("sparse table is full")

    def insert_seq(self, kv):
        """Single-threaded :meth:`insert`."""
        key, value = kv
        for h in self._probe(key):
            k = self.table[h][0]
            if k == self.empty_key:
                self.table[h] = (key, value)
                return True
            if k == key:
                return False
        raise OverflowError("sparse table is full")

    def insert_check(self, kv, max_probes=DEFAULT_MAX_PROBES):
        """Like :meth:`insert`, but raise OverflowError after too many probes."""
        key, value = kv
        n_probes = 0
        with self._lock:
            for h in self._probe(key):
                k = self.table[h][0]
                if k == self.empty_key:
                    self.table[h] = (key, value)
                    return True
                if k == key:
                    return False
                n_probes += 1
                if n_probes > max_probes:
                    break
        raise OverflowError(f"gave up inserting {key!r} after {n_probes} probes")

    def mark_seq(self, key):
        """Replace ``key`` with the tombstone key ``empty_key - 1``."""
        for h in self._probe(key):
            k, value = self.table[h]
            if k == self.empty_key:
                return
            if k == key:
                self.table[h] = (self.empty_key - 1, value)
                return

    def contains(self, key):
        for h in self._probe(key):
            k = self.table[h][0]
            if k == key:
                return True
            if k == self.empty_key:
                return False
        return False

    def find(self, key, default=None):
        """Return the value stored for ``key``, or ``default``."""
        for h in self._probe(key):
            k, value = self.table[h]
            if k == key:
                return value
            if k == self.empty_key:
                return default
        return default

    def map(self, f):
        """Call ``f(pair)`` for every occupied slot."""
        for kv in self.entries():
            f(kv)

    def entries(self):
        """Return the occupied pairs in slot order."""
        return [kv for kv in self.table if kv[0] != self.empty_key]

    def resize_no_copy(self, incoming):
        """Grow to ``incoming`` slots (a power of two), discarding contents."""
        if incoming > self.m:
            self._allocate(incoming)

    def resize(self, incoming):
        """Grow to hold ``incoming`` more slots, keeping the contents."""
        if incoming > self.m:
            old = self.table
            self._allocate(1 << log2_up(2 * (self.m + incoming)))
            for kv in old:
                if kv[0] != self.empty_key:
                    self.insert(kv)

    def clear_table(self):
        self.table = [self.empty] * self.m


class SparseAdditiveMap:
    """Hash map whose insertions add into the value already stored."""

    def __init__(self, size, empty):
        self.m = 1 << log2_up(int(1.1 * size))
        self.mask = self.m - 1
        self.empty = tuple(empty)
        self.empty_key = self.empty[0]
        self.table = [self.empty] * self.m
        self._lock = threading.Lock()

    def _probe(self, key):
        h = hash64(key) & self.mask
        for _ in range(self.m):
            yield h
            h = (h + 1) & self.mask

    def insert(self, kv):
        """Add ``kv[1]`` to the value for ``kv[0]``; return True if the key was new."""
        key, amount = kv
        with self._lock:
            for h in self._probe(key):
                k, current = self.table[h]
                if k == self.empty_key:
                    self.table[h] = (key, current + amount)
                    return True
                if k == key:
                    self.table[h] = (key, current + amount)
                    return False
        raise OverflowError("additive map is full")

    def contains(self, key):
        for h in self._probe(key):
            k = self.table[h][0]
            if k == key:
                return True
            if k == self.empty_key:
                return False
        return False

    def entries(self):
        return [kv for kv in self.table if kv[0] != self.empty_key]

    def clear(self):
        self.table = [self.empty] * self.m