"""Compressed-sparse-row graphs and their construction from edge lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import accumulate
from typing import NamedTuple


class Edge(NamedTuple):
    """A directed edge; ``weight`` is None for unweighted graphs."""

    source: int
    target: int
    weight: object = None


@dataclass(frozen=True)
class VertexData:
    """Where a vertex's neighbours start in the edge array, and how many."""

    offset: int
    degree: int


@dataclass(frozen=True)
class Vertex:
    """A vertex's out- and in-neighbours as ``(neighbour, weight)`` pairs."""

    out_edges: tuple = field(default_factory=tuple)
    in_edges: tuple = field(default_factory=tuple)

    def out_degree(self):
        return len(self.out_edges)

    def in_degree(self):
        return len(self.in_edges)

    def out_neighbors(self):
        return list(self.out_edges)

    def in_neighbors(self):
        return list(self.in_edges)


def _slice(edges, data):
    return tuple(edges[data.offset:data.offset + data.degree])


def _check_vertex(i, n):
    if not 0 <= i < n:
        raise IndexError(f"vertex {i} out of range for {n} vertices")


class SymmetricGraph:
    """An undirected graph: every vertex's in-neighbours are its out-neighbours."""

    def __init__(self, vertex_data=(), n=0, m=0, edges=()):
        self.vertex_data = list(vertex_data)
        self.n = n
        self.m = m
        self.adjacency = list(edges)
        if len(self.vertex_data) != n:
            raise ValueError("vertex data does not match the number of vertices")

    def get_vertex(self, i):
        _check_vertex(i, self.n)
        neighbours = _slice(self.adjacency, self.vertex_data[i])
        return Vertex(neighbours, neighbours)

    def edges(self):
        """Return every stored edge as a ``(source, target, weight)`` triple."""
        return [
            (i, target, weight)
            for i, data in enumerate(self.vertex_data)
            for target, weight in _slice(self.adjacency, data)
        ]


class AsymmetricGraph:
    """A directed graph storing both out- and in-adjacency lists."""

    def __init__(self, out_data=(), in_data=(), n=0, m=0, out_edges=(), in_edges=()):
        self.out_data = list(out_data)
        self.in_data = list(in_data)
        self.n = n
        self.m = m
        self.out_adjacency = list(out_edges)
        self.in_adjacency = list(in_edges)
        if len(self.out_data) != n or len(self.in_data) != n:
            raise ValueError("vertex data does not match the number of vertices")

    def get_vertex(self, i):
        _check_vertex(i, self.n)
        return Vertex(
            _slice(self.out_adjacency, self.out_data[i]),
            _slice(self.in_adjacency, self.in_data[i]),
        )

    def edges(self):
        """Return every out-edge as a ``(source, target, weight)`` triple."""
        return [
            (i, target, weight)
            for i, data in enumerate(self.out_data)
            for target, weight in _slice(self.out_adjacency, data)
        ]


class EdgeArray:
    """A flat list of ``(source, target, weight)`` triples over ``n`` vertices."""

    def __init__(self, edges=(), n=0):
        self.edges = list(edges)
        self.n = n

    def __len__(self):
        return len(self.edges)

    def to_seq(self):
        """Return the triples and empty this array."""
        edges, self.edges, self.n = self.edges, [], 0
        return edges

    def map_edges(self, f):
        """Call ``f(source, target, weight)`` for every edge."""
        for u, v, w in self.edges:
            f(u, v, w)


def to_edge_array(graph):
    """Collect a graph's out-edges, grouped by source vertex."""
    triples = [
        (i, target, weight)
        for i in range(graph.n)
        for target, weight in graph.get_vertex(i).out_neighbors()
    ]
    if len(triples) != graph.m:
        raise ValueError("graph edge count does not match its adjacency lists")
    return EdgeArray(triples, graph.n)


def _endpoints(edge):
    return (edge.source, edge.target)


def sort_and_dedupe(edges):
    """Sort edges by endpoints, dropping self-loops and repeated endpoint pairs.

    When one pair of endpoints carries several weights, the first is kept.
    """
    result = []
    previous = None
    for edge in sorted(edges, key=_endpoints):
        pair = _endpoints(edge)
        if edge.source != edge.target and pair != previous:
            result.append(edge)
        previous = pair
    return result


def num_vertices_from_edges(edges):
    """Smallest vertex count that includes every endpoint (0 for no edges)."""
    return max((max(e.source, e.target) for e in edges), default=-1) + 1


def sorted_edges_to_vertex_data(num_vertices, edges):
    """Build per-vertex offsets and degrees from edges sorted by source."""
    degrees = [0] * num_vertices
    for edge in edges:
        if not 0 <= edge.source < num_vertices:
            raise ValueError(f"vertex {edge.source} out of range for {num_vertices} vertices")
        degrees[edge.source] += 1
    offsets = accumulate(degrees, initial=0)
    return [VertexData(offset, degree) for offset, degree in zip(offsets, degrees)]


def _as_edge(item):
    return item if isinstance(item, Edge) else Edge(*item)


def _adjacency(edges):
    return [(e.target, e.weight) for e in edges]


def edge_list_to_asymmetric_graph(edge_list):
    """Build a directed graph with sorted adjacency lists from an edge list.

    Duplicate edges and self-loops are removed.
    """
    edge_list = [_as_edge(e) for e in edge_list]
    if not edge_list:
        return AsymmetricGraph()
    out_edges = sort_and_dedupe(edge_list)
    n = num_vertices_from_edges(out_edges)
    in_edges = sorted(
        (Edge(e.target, e.source, e.weight) for e in out_edges), key=_endpoints
    )
    return AsymmetricGraph(
        sorted_edges_to_vertex_data(n, out_edges),
        sorted_edges_to_vertex_data(n, in_edges),
        n,
        len(out_edges),
        _adjacency(out_edges),
        _adjacency(in_edges),
    )


def _symmetric_from_edges(edges):
    both = []
    for edge in edges:
        both.append(edge)
        both.append(Edge(edge.target, edge.source, edge.weight))
    deduped = sort_and_dedupe(both)
    n = num_vertices_from_edges(deduped)
    return SymmetricGraph(
        sorted_edges_to_vertex_data(n, deduped), n, len(deduped), _adjacency(deduped)
    )


def edge_list_to_symmetric_graph(edge_list):
    """Build an undirected graph from edges given in either direction.

    Duplicate edges and self-loops are removed.
    """
    edge_list = [_as_edge(e) for e in edge_list]
    if not edge_list:
        return SymmetricGraph()
    return _symmetric_from_edges(edge_list)


def edge_array_to_symmetric_graph(edge_array):
    """Like :func:`edge_list_to_symmetric_graph`, from an :class:`EdgeArray`."""
    if len(edge_array) == 0:
        return SymmetricGraph()
    return _symmetric_from_edges([Edge(u, v, w) for u, v, w in edge_array.edges])


def make_unweighted_symmetric_graph(num_vertices, edges):
    """Build an unweighted undirected graph from a set of undirected edges."""
    directed = []
    for edge in edges:
        u, v = edge.endpoints()
        for a, b in ((u, v), (v, u)):
            if not 0 <= a < num_vertices:
                raise ValueError(f"vertex {a} out of range for {num_vertices} vertices")
            directed.append(Edge(a, b))
    directed.sort(key=_endpoints)
    return SymmetricGraph(
        sorted_edges_to_vertex_data(num_vertices, directed),
        num_vertices,
        len(directed),
        _adjacency(directed),
    )