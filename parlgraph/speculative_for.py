"""Deterministic reservations: run a loop speculatively in rounds.

A step object supplies ``reserve(i)`` and ``commit(i)``.  In every round
all active iterations reserve first, then all commit; iterations whose
reserve returned True and whose commit returned False are retried in the
next round, ahead of fresh ones.
"""

from __future__ import annotations

import threading

_UNRESERVED = float("inf")


class TooManyRoundsError(RuntimeError):
    """Raised when a speculative loop needs more rounds than allowed."""


class Reservation:
    """Holds the smallest index that has reserved it."""

    def __init__(self):
        self._lock = threading.Lock()
        self.r = _UNRESERVED

    def reserve(self, i):
        with self._lock:
            if i < self.r:
                self.r = i

    def reserved(self):
        return self.r < _UNRESERVED

    def reset(self):
        self.r = _UNRESERVED

    def check(self, i):
        return self.r == i

    def check_reset(self, i):
        """Release the reservation if ``i`` holds it; return whether it did."""
        if self.r == i:
            self.r = _UNRESERVED
            return True
        return False


def _run_round(step, kept, done, size):
    indices = kept + [done + i for i in range(len(kept), size)]
    keep = [step.reserve(i) for i in indices]
    keep = [k and not step.commit(i) for i, k in zip(indices, keep)]
    return [i for i, k in zip(indices, keep) if k]


def _check_round(round_number, max_tries):
    if max_tries is not None and round_number > max_tries:
        raise TooManyRoundsError("speculative_for: too many iterations, increase max_tries")


def speculative_for(step, start, end, granularity, max_tries=None):
    """Run iterations ``start..end-1`` of ``step``; return how many were tried.

    Round sizes shrink when many iterations fail and grow when few do.
    ``max_tries`` defaults to ``100 + 200 * granularity``.
    """
    if max_tries is None or max_tries < 0:
        max_tries = 100 + 200 * granularity
    max_round_size = (end - start) // granularity + 1
    current_round_size = max_round_size

    kept = []
    round_number = 0
    done = start
    total_processed = 0
    while done < end:
        _check_round(round_number, max_tries)
        round_number += 1
        size = min(current_round_size, end - done)
        total_processed += size
        kept = _run_round(step, kept, done, size)
        done += size - len(kept)

        ratio = len(kept) / size
        if ratio > 0.2:
            current_round_size = max(
                current_round_size // 2, max(max_round_size // 64 + 1, len(kept))
            )
        elif ratio < 0.1:
            current_round_size = min(current_round_size * 2, max_round_size)
    return total_processed


def eff_for(step, start, end, granularity, max_tries=None):
    """Like :func:`speculative_for`, but round sizes never shrink.

    Without ``max_tries`` the number of rounds is unlimited.
    """
    max_round_size = (end - start) // granularity + 1
    current_round_size = max_round_size

    kept = []
    round_number = 0
    done = start
    total_processed = 0
    while done < end:
        _check_round(round_number, max_tries)
        round_number += 1
        size = min(current_round_size, end - done)
        total_processed += size
        kept = _run_round(step, kept, done, size)
        done += size - len(kept)

        if len(kept) / size < 0.1:
            current_round_size = min(current_round_size * 2, max_round_size)
    return total_processed