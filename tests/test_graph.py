import pytest

from parlgraph.graph import (
    AsymmetricGraph,
    Edge,
    EdgeArray,
    SymmetricGraph,
    VertexData,
    edge_array_to_symmetric_graph,
    edge_list_to_asymmetric_graph,
    edge_list_to_symmetric_graph,
    make_unweighted_symmetric_graph,
    num_vertices_from_edges,
    sort_and_dedupe,
    sorted_edges_to_vertex_data,
    to_edge_array,
)
from parlgraph.undirected_edge import UndirectedEdge


def ids(pairs):
    return [neighbour for neighbour, _ in pairs]


def out_ids(graph, i):
    return ids(graph.get_vertex(i).out_neighbors())


def in_ids(graph, i):
    return ids(graph.get_vertex(i).in_neighbors())


# Asymmetric conversion


def test_asymmetric_no_edges():
    graph = edge_list_to_asymmetric_graph([])
    assert graph.n == 0
    assert graph.m == 0


def test_asymmetric_duplicate_edges():
    graph = edge_list_to_asymmetric_graph([Edge(0, 1), Edge(0, 1)])
    assert graph.n == 2
    assert graph.m == 1
    assert out_ids(graph, 0) == [1]
    assert graph.get_vertex(0).in_degree() == 0
    assert graph.get_vertex(1).out_degree() == 0
    assert in_ids(graph, 1) == [0]


def test_asymmetric_skip_first_vertex():
    edges = [Edge(1, 2)]
    graph = edge_list_to_asymmetric_graph(edges)
    assert graph.n == 3
    assert graph.m == len(edges)
    assert graph.get_vertex(0).out_degree() == 0
    assert graph.get_vertex(0).in_degree() == 0
    assert out_ids(graph, 1) == [2]
    assert graph.get_vertex(1).in_degree() == 0
    assert graph.get_vertex(2).out_degree() == 0
    assert in_ids(graph, 2) == [1]


def test_asymmetric_out_of_order_edges():
    edges = [(3, 6), (0, 2), (5, 0), (5, 1), (2, 5), (0, 1), (5, 2)]
    graph = edge_list_to_asymmetric_graph([Edge(u, v) for u, v in edges])
    assert graph.n == 7
    assert graph.m == len(edges)
    expected = {
        0: ([1, 2], [5]),
        1: ([], [0, 5]),
        2: ([5], [0, 5]),
        3: ([6], []),
        4: ([], []),
        5: ([0, 1, 2], [2]),
        6: ([], [3]),
    }
    for vertex, (outs, ins) in expected.items():
        assert out_ids(graph, vertex) == outs
        assert in_ids(graph, vertex) == ins


def test_asymmetric_edges_triples():
    graph = edge_list_to_asymmetric_graph([(1, 0, 4), (0, 1, 7)])
    assert graph.edges() == [(0, 1, 7), (1, 0, 4)]


# Symmetric conversion


def test_symmetric_no_edges():
    graph = edge_list_to_symmetric_graph([])
    assert graph.n == 0
    assert graph.m == 0


def test_symmetric_duplicate_edges():
    graph = edge_list_to_symmetric_graph([Edge(0, 1), Edge(1, 0), Edge(0, 1)])
    assert graph.n == 2
    assert graph.m == 2
    assert out_ids(graph, 0) == [1]
    assert out_ids(graph, 1) == [0]


def test_symmetric_skip_first_vertex():
    graph = edge_list_to_symmetric_graph([Edge(1, 2)])
    assert graph.n == 3
    assert graph.m == 2
    assert graph.get_vertex(0).out_degree() == 0
    assert out_ids(graph, 1) == [2]
    assert out_ids(graph, 2) == [1]


def test_symmetric_out_of_order_edges():
    edges = [(1, 5), (0, 5), (6, 3), (2, 0), (1, 0)]
    graph = edge_list_to_symmetric_graph([Edge(u, v) for u, v in edges])
    assert graph.n == 7
    assert graph.m == 10
    expected = {0: [1, 2, 5], 1: [0, 5], 2: [0], 3: [6], 4: [], 5: [0, 1], 6: [3]}
    for vertex, outs in expected.items():
        assert out_ids(graph, vertex) == outs
        assert in_ids(graph, vertex) == outs


def test_symmetric_weighted_neighbours_and_edges():
    graph = edge_list_to_symmetric_graph([Edge(0, 1, 2.5), Edge(1, 2, 3.0)])
    assert graph.get_vertex(1).out_neighbors() == [(0, 2.5), (2, 3.0)]
    assert graph.edges() == [(0, 1, 2.5), (1, 0, 2.5), (1, 2, 3.0), (2, 1, 3.0)]


def test_symmetric_self_loops_removed():
    graph = edge_list_to_symmetric_graph([Edge(0, 0), Edge(0, 1)])
    assert graph.m == 2
    assert out_ids(graph, 0) == [1]


def test_get_vertex_out_of_range():
    graph = edge_list_to_symmetric_graph([Edge(0, 1)])
    with pytest.raises(IndexError):
        graph.get_vertex(2)


def test_graph_vertex_data_length_checked():
    with pytest.raises(ValueError):
        SymmetricGraph([VertexData(0, 0)], 2, 0, [])
    with pytest.raises(ValueError):
        AsymmetricGraph([VertexData(0, 0)], [], 1, 0, [], [])


# Helpers


def test_sort_and_dedupe_keeps_first_weight():
    result = sort_and_dedupe([Edge(2, 1, 5), Edge(0, 1, 1), Edge(2, 1, 9), Edge(3, 3, 0)])
    assert result == [Edge(0, 1, 1), Edge(2, 1, 5)]


def test_num_vertices_from_edges():
    assert num_vertices_from_edges([Edge(0, 4), Edge(2, 1)]) == 5
    assert num_vertices_from_edges([]) == 0


def test_sorted_edges_to_vertex_data():
    data = sorted_edges_to_vertex_data(4, [Edge(1, 0), Edge(1, 2), Edge(3, 1)])
    assert data == [
        VertexData(0, 0),
        VertexData(0, 2),
        VertexData(2, 0),
        VertexData(2, 1),
    ]


def test_sorted_edges_to_vertex_data_rejects_out_of_range():
    with pytest.raises(ValueError):
        sorted_edges_to_vertex_data(2, [Edge(2, 0)])


# Edge arrays


def test_edge_array_round_trip():
    graph = edge_list_to_symmetric_graph([Edge(0, 1, 2), Edge(1, 2, 3)])
    array = to_edge_array(graph)
    assert array.n == 3
    assert len(array) == 4
    assert array.edges == [(0, 1, 2), (1, 0, 2), (1, 2, 3), (2, 1, 3)]
    rebuilt = edge_array_to_symmetric_graph(array)
    assert rebuilt.edges() == graph.edges()


def test_edge_array_map_edges_sums_weights():
    array = EdgeArray([(0, 1, 2), (1, 0, 2), (1, 2, 3), (2, 1, 3)], 3)
    total = []
    array.map_edges(lambda u, v, w: total.append(w))
    assert sum(total) == 10


def test_edge_array_to_seq_clears():
    array = EdgeArray([(0, 1, None)], 2)
    assert array.to_seq() == [(0, 1, None)]
    assert len(array) == 0
    assert array.n == 0


def test_empty_edge_array_gives_empty_graph():
    graph = edge_array_to_symmetric_graph(EdgeArray([], 5))
    assert (graph.n, graph.m) == (0, 0)


# Test-graph builder


def test_make_unweighted_symmetric_graph_with_singletons():
    graph = make_unweighted_symmetric_graph(4, {UndirectedEdge(0, 1)})
    assert graph.n == 4
    assert [graph.get_vertex(i).out_degree() for i in range(4)] == [1, 1, 0, 0]


def test_make_unweighted_symmetric_graph_broken_path():
    pairs = [(0, 1), (0, 10), (1, 10)] + [(i, i + 1) for i in range(3, 10)]
    graph = make_unweighted_symmetric_graph(11, {UndirectedEdge(u, v) for u, v in pairs})
    assert graph.n == 11
    degrees = [graph.get_vertex(i).out_degree() for i in range(11)]
    assert degrees == [2, 2, 0, 1, 2, 2, 2, 2, 2, 2, 3]
    assert out_ids(graph, 10) == [0, 1, 9]


def test_make_unweighted_symmetric_graph_rejects_out_of_range():
    with pytest.raises(ValueError):
        make_unweighted_symmetric_graph(2, {UndirectedEdge(0, 5)})