"""Thread-safe maximum and sum counters."""

from __future__ import annotations

import os
import threading


class AtomicMaxCounter:
    """Keeps the largest value seen; starts at zero."""

    def __init__(self):
        self._lock = threading.Lock()
        self._entry = 0

    def reset(self):
        with self._lock:
            self._entry = 0

    def value(self):
        return self._entry

    def update_value(self, new_val):
        with self._lock:
            if new_val > self._entry:
                self._entry = new_val


class AtomicSumCounter:
    """A sum kept as one partial total per worker."""

    def __init__(self, num_workers=None):
        if num_workers is None:
            num_workers = os.cpu_count() or 1
        if num_workers < 1:
            raise ValueError("num_workers must be at least 1")
        self.num_workers = num_workers
        self._lock = threading.Lock()
        self._entries = [0] * num_workers
        self._slots = {}

    def reset(self):
        with self._lock:
            self._entries = [0] * self.num_workers

    def value(self):
        with self._lock:
            return sum(self._entries)

    def _current_slot(self):
        ident = threading.get_ident()
        slot = self._slots.get(ident)
        if slot is None:
            slot = self._slots[ident] = len(self._slots) % self.num_workers
        return slot

    def update_value(self, new_val, worker_id=None):
        with self._lock:
            if worker_id is None:
                worker_id = self._current_slot()
            elif not 0 <= worker_id < self.num_workers:
                raise ValueError(f"worker id {worker_id} out of range")
            self._entries[worker_id] += new_val