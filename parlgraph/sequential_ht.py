"""Hash functions and a single-threaded open-addressing hash table."""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def hash32(value):
    """Mix a 32-bit integer."""
    a = value & _MASK32
    a = ((a + 0x7ED55D16) + (a << 12)) & _MASK32
    a = ((a ^ 0xC761C23C) ^ (a >> 19)) & _MASK32
    a = ((a + 0x165667B1) + (a << 5)) & _MASK32
    a = ((a + 0xD3A2646C) ^ (a << 9)) & _MASK32
    a = ((a + 0xFD7046C5) + (a << 3)) & _MASK32
    a = ((a ^ 0xB55A4F09) ^ (a >> 16)) & _MASK32
    return a


def hash64(value):
    """Mix a 64-bit integer."""
    v = ((value & _MASK64) * 3935559000370003845 + 2691343689449507681) & _MASK64
    v ^= v >> 21
    v = (v ^ (v << 37)) & _MASK64
    v ^= v >> 4
    v = (v * 4768777513237032717) & _MASK64
    v = (v ^ (v << 20)) & _MASK64
    v ^= v >> 41
    v = (v ^ (v << 5)) & _MASK64
    return v


def log2_up(n):
    """Smallest ``a`` with ``2 ** a >= n`` (0 for ``n <= 1``)."""
    return (n - 1).bit_length() if n > 1 else 0


class SequentialHT:
    """Linear-probing table of (key, value) pairs.

    ``empty`` is the pair stored in unused slots; its key marks emptiness.
    Without ``load_factor`` the size is used as-is and must be a power of
    two; with it the table holds ``load_factor * size + 1`` rounded up to a
    power of two.
    """

    def __init__(self, size, empty, load_factor=None):
        if load_factor is None:
            if size < 1 or size & (size - 1):
                raise ValueError("table size must be a power of two")
            self.m = size
        else:
            self.m = 1 << log2_up(int(load_factor * size + 1))
        self.mask = self.m - 1
        self.empty = tuple(empty)
        self.empty_key = self.empty[0]
        self.table = [self.empty] * self.m

    def _probe(self, key):
        h = hash64(key) & self.mask
        for _ in range(self.m):
            yield h
            h = (h + 1) & self.mask
        raise OverflowError("hash table is full")

    def insert_f(self, entry, f):
        """Set the value for ``entry[0]`` to ``f(current_value, entry)``."""
        key = entry[0]
        for h in self._probe(key):
            k, current = self.table[h]
            if k == self.empty_key or k == key:
                self.table[h] = (key, f(current, entry))
                return

    def insert_add(self, key):
        """Count one occurrence of ``key``; return True if it was new."""
        for h in self._probe(key):
            k, current = self.table[h]
            if k == self.empty_key:
                self.table[h] = (key, 1)
                return True
            if k == key:
                self.table[h] = (key, current + 1)
                return False

    def insert_add_entry(self, entry):
        """Add ``entry[1]`` to an existing key; a new key starts at 1."""
        key, amount = entry
        for h in self._probe(key):
            k, current = self.table[h]
            if k == self.empty_key:
                self.table[h] = (key, 1)
                return True
            if k == key:
                self.table[h] = (key, current + amount)
                return False

    def find(self, key):
        """Return the stored pair for ``key``, or the empty pair."""
        for h in self._probe(key):
            entry = self.table[h]
            if entry[0] == self.empty_key:
                return self.empty
            if entry[0] == key:
                return entry

    def compact_into(self, f):
        """Clear the table, returning ``f(pair)`` for each pair it gave a result."""
        out = []
        for i, kv in enumerate(self.table):
            if kv[0] != self.empty_key:
                self.table[i] = self.empty
                value = f(kv)
                if value is not None:
                    out.append(value)
        return out

    def compact_into_self(self, f):
        """Like :meth:`compact_into`, but write results to the table front.

        Returns how many results now sit in ``table[:k]``.
        """
        k = 0
        for i, kv in enumerate(self.table):
            if kv[0] != self.empty_key:
                self.table[i] = self.empty
                value = f(kv)
                if value is not None:
                    self.table[k] = value
                    k += 1
        return k