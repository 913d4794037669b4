"""A growable array with explicit size and capacity."""

from __future__ import annotations

MIN_BUCKET_SIZE = 2000


class DynArray:
    """Array whose slots beyond ``size`` may be written before being counted.

    ``size`` is the number of valid elements and may be advanced directly
    after filling slots with :meth:`insert`.
    """

    def __init__(self, capacity=0):
        self._items = [None] * capacity
        self.size = 0

    @property
    def capacity(self):
        return len(self._items)

    def __len__(self):
        return self.size

    def __iter__(self):
        return iter(self._items[: self.size])

    def resize(self, n):
        """Ensure room for ``n`` more elements past the current size."""
        needed = n + self.size
        if needed > self.capacity:
            new_capacity = max(2 * needed, MIN_BUCKET_SIZE)
            self._items.extend([None] * (new_capacity - self.capacity))

    def insert(self, val, pos):
        """Write ``val`` at ``pos`` slots past the end without growing size."""
        self._items[self.size + pos] = val

    def push_back(self, val):
        self._items[self.size] = val
        self.size += 1

    def copy_in(self, values, n):
        """Append the first ``n`` items of ``values``."""
        self.resize(n)
        chunk = list(values[:n])
        if len(chunk) < n:
            raise IndexError("not enough values to copy")
        self._items[self.size : self.size + n] = chunk
        self.size += n

    def copy_in_f(self, f, n):
        """Append ``f(0), ..., f(n - 1)``."""
        self.resize(n)
        self._items[self.size : self.size + n] = [f(i) for i in range(n)]
        self.size += n

    def map(self, f):
        for item in self:
            f(item)

    def clear(self):
        self.size = 0

    def to_list(self):
        """Return the elements and release the storage."""
        result = self._items[: self.size]
        self._items = []
        self.size = 0
        return result