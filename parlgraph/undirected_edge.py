"""Direction-free edge between two vertices."""

from __future__ import annotations


class UndirectedEdge:
    """An unweighted, undirected edge.

    ``UndirectedEdge(u, v) == UndirectedEdge(v, u)``, so edges can be stored
    in sets or used as dictionary keys without caring about direction.
    The endpoints may be given as two vertices or as a single pair.
    """

    __slots__ = ("_edge",)

    def __init__(self, u, v=None):
        if v is None:
            u, v = u
        self._edge = (u, v) if u <= v else (v, u)

    def endpoints(self):
        """Return the two vertices, smaller one first."""
        return self._edge

    def __eq__(self, other):
        if not isinstance(other, UndirectedEdge):
            return NotImplemented
        return self._edge == other._edge

    def __lt__(self, other):
        if not isinstance(other, UndirectedEdge):
            return NotImplemented
        return self._edge < other._edge

    def __hash__(self):
        return hash(self._edge)

    def __str__(self):
        first, second = self._edge
        return f"{{{first}, {second}}}"

    def __repr__(self):
        first, second = self._edge
        return f"UndirectedEdge({first}, {second})"