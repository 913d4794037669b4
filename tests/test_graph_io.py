import struct

import pytest

from parlgraph.graph import (
    Edge,
    edge_list_to_asymmetric_graph,
    edge_list_to_symmetric_graph,
)
from parlgraph.graph_io import (
    GraphFormatError,
    parse_unweighted_graph,
    parse_weighted_graph,
    read_unweighted_asymmetric_graph,
    read_unweighted_edge_list,
    read_unweighted_symmetric_graph,
    read_weighted_asymmetric_graph,
    read_weighted_edge_list,
    read_weighted_symmetric_graph,
    skip_comments,
    string_to_weight,
    write_graph_to_file,
)


def _section(n, m, offsets, edges):
    return (
        struct.pack("<3q", n, m, 0)
        + struct.pack(f"<{n + 1}Q", *offsets)
        + struct.pack(f"<{m}I", *edges)
    )


def _out_lists(graph):
    return [graph.get_vertex(i).out_neighbors() for i in range(graph.n)]


def _in_lists(graph):
    return [graph.get_vertex(i).in_neighbors() for i in range(graph.n)]


def test_parse_unweighted_text():
    text = "AdjacencyGraph\n3\n2\n0\n1\n2\n1\n2\n"
    n, m, offsets, edges = parse_unweighted_graph(data=text)
    assert (n, m) == (3, 2)
    assert offsets == [0, 1, 2, 2]
    assert edges == [1, 2]


def test_parse_unweighted_bad_header():
    with pytest.raises(GraphFormatError):
        parse_unweighted_graph(data="WeightedAdjacencyGraph\n1\n0\n0\n")


def test_parse_unweighted_wrong_length():
    with pytest.raises(GraphFormatError):
        parse_unweighted_graph(data="AdjacencyGraph\n2\n1\n0\n1\n")


def test_parse_requires_path_or_data():
    with pytest.raises(ValueError):
        parse_unweighted_graph()


def test_decreasing_offsets_rejected():
    with pytest.raises(GraphFormatError):
        read_unweighted_symmetric_graph(data="AdjacencyGraph\n2\n2\n1\n0\n1\n0\n")


def test_symmetric_round_trip(tmp_path):
    original = edge_list_to_symmetric_graph([(1, 5), (0, 5), (6, 3), (2, 0), (1, 0)])
    path = tmp_path / "g.adj"
    write_graph_to_file(path, original)
    loaded = read_unweighted_symmetric_graph(path)
    assert (loaded.n, loaded.m) == (original.n, original.m)
    assert _out_lists(loaded) == _out_lists(original)


def test_write_unweighted_text(tmp_path):
    graph = edge_list_to_symmetric_graph([(0, 1)])
    path = tmp_path / "g.adj"
    write_graph_to_file(path, graph)
    assert path.read_text() == "AdjacencyGraph\n2\n2\n0\n1\n1\n0\n"


def test_asymmetric_round_trip_recomputes_in_edges(tmp_path):
    original = edge_list_to_asymmetric_graph(
        [(3, 6), (0, 2), (5, 0), (5, 1), (2, 5), (0, 1), (5, 2)]
    )
    path = tmp_path / "g.adj"
    write_graph_to_file(path, original)
    loaded = read_unweighted_asymmetric_graph(path)
    assert (loaded.n, loaded.m) == (original.n, original.m)
    assert _out_lists(loaded) == _out_lists(original)
    assert _in_lists(loaded) == _in_lists(original)


def test_weighted_symmetric_round_trip(tmp_path):
    original = edge_list_to_symmetric_graph([Edge(0, 1, 1.5), Edge(1, 2, 2.25)])
    path = tmp_path / "w.adj"
    write_graph_to_file(path, original)
    assert path.read_text().splitlines()[0] == "WeightedAdjacencyGraph"
    loaded = read_weighted_symmetric_graph(path)
    assert _out_lists(loaded) == _out_lists(original)


def test_weighted_asymmetric_round_trip(tmp_path):
    original = edge_list_to_asymmetric_graph([Edge(2, 0, 0.5), Edge(0, 1, 4.0)])
    path = tmp_path / "w.adj"
    write_graph_to_file(path, original)
    loaded = read_weighted_asymmetric_graph(path)
    assert _out_lists(loaded) == _out_lists(original)
    assert _in_lists(loaded) == _in_lists(original)


def test_weighted_asymmetric_binary_rejected():
    with pytest.raises(ValueError):
        read_weighted_asymmetric_graph(data=b"", binary=True)


def test_parse_weighted_int_weights():
    text = "WeightedAdjacencyGraph 2 1 0 1 1 7"
    n, m, offsets, edges = parse_weighted_graph(data=text, weight_type=int)
    assert (n, m, offsets) == (2, 1, [0, 1, 1])
    assert edges == [(1, 7)]


def test_parse_weighted_wrong_length():
    with pytest.raises(GraphFormatError):
        parse_weighted_graph(data="WeightedAdjacencyGraph 2 1 0 1 1")


def test_binary_symmetric():
    data = _section(3, 4, [0, 1, 3, 4], [1, 0, 2, 1])
    graph = read_unweighted_symmetric_graph(binary=True, data=data)
    assert (graph.n, graph.m) == (3, 4)
    assert graph.edges() == [(0, 1, None), (1, 0, None), (1, 2, None), (2, 1, None)]


def test_binary_asymmetric():
    data = _section(3, 2, [0, 1, 2, 2], [1, 2]) + _section(3, 2, [0, 0, 1, 2], [0, 1])
    graph = read_unweighted_asymmetric_graph(binary=True, data=data)
    assert _out_lists(graph) == [[(1, None)], [(2, None)], []]
    assert _in_lists(graph) == [[], [(0, None)], [(1, None)]]


def test_binary_truncated():
    with pytest.raises(GraphFormatError):
        parse_unweighted_graph(binary=True, data=_section(3, 4, [0, 1, 3, 4], [1, 0, 2, 1])[:-2])


def test_binary_weighted_symmetric():
    data = (
        struct.pack("<3q", 2, 2, 0)
        + struct.pack("<3Q", 0, 1, 2)
        + struct.pack("<If", 1, 0.5)
        + struct.pack("<If", 0, 0.5)
    )
    graph = read_weighted_symmetric_graph(binary=True, data=data)
    assert graph.edges() == [(0, 1, 0.5), (1, 0, 0.5)]


def test_read_unweighted_edge_list_skips_comments(tmp_path):
    path = tmp_path / "edges.txt"
    path.write_text("# comment\n\n# another\n0 1\n2 3\n")
    assert read_unweighted_edge_list(path) == [Edge(0, 1), Edge(2, 3)]


def test_read_unweighted_edge_list_stops_at_bad_token(tmp_path):
    path = tmp_path / "edges.txt"
    path.write_text("0 1\n# late comment\n2 3\n")
    assert read_unweighted_edge_list(path) == [Edge(0, 1)]


def test_read_edge_list_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_unweighted_edge_list(tmp_path / "absent.txt")


def test_read_weighted_edge_list(tmp_path):
    path = tmp_path / "edges.txt"
    path.write_text("# w\n0 1 2.5\n1 2 3\n")
    assert read_weighted_edge_list(path) == [Edge(0, 1, 2.5), Edge(1, 2, 3.0)]
    assert read_weighted_edge_list(path, int) == []


def test_read_weighted_edge_list_int(tmp_path):
    path = tmp_path / "edges.txt"
    path.write_text("4 5 -2\n")
    assert read_weighted_edge_list(path, int) == [Edge(4, 5, -2)]


def test_string_to_weight():
    assert string_to_weight("42abc", int) == 42
    assert string_to_weight("3.5kg", float) == 3.5
    assert string_to_weight("x", int) == 0
    with pytest.raises(TypeError):
        string_to_weight("1", str)


def test_skip_comments():
    lines = ["# a\n", "\n", "#b\n", "1 2\n", "# kept\n"]
    assert list(skip_comments(lines)) == ["1 2\n", "# kept\n"]


def test_write_empty_graph_round_trip(tmp_path):
    graph = edge_list_to_symmetric_graph([])
    path = tmp_path / "empty.adj"
    write_graph_to_file(path, graph)
    loaded = read_unweighted_symmetric_graph(path)
    assert (loaded.n, loaded.m) == (0, 0)