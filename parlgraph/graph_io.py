"""Reading and writing graphs in adjacency-graph and edge-list formats.

Text adjacency graphs hold whitespace-separated tokens: a header
(``AdjacencyGraph`` or ``WeightedAdjacencyGraph``), the vertex count ``n``,
the edge count ``m``, ``n`` offsets, ``m`` neighbour ids and, for weighted
graphs, ``m`` weights.

Binary graphs are little-endian.  A section is three signed 64-bit
integers (``n``, ``m`` and a reserved value), ``n + 1`` unsigned 64-bit
offsets and ``m`` edge records.  An unweighted record is an unsigned
32-bit neighbour id; a weighted record is that id followed by a 32-bit
weight (IEEE float for ``float`` weights, signed integer for ``int``).
Asymmetric binary graphs hold an out-section followed by an in-section.
"""

from __future__ import annotations

import re
import struct
from itertools import accumulate, dropwhile, islice

from parlgraph.graph import (
    AsymmetricGraph,
    Edge,
    SymmetricGraph,
    VertexData,
    sorted_edges_to_vertex_data,
)
from parlgraph.io import read_string_from_file

UNWEIGHTED_HEADER = "AdjacencyGraph"
WEIGHTED_HEADER = "WeightedAdjacencyGraph"

_SECTION_HEADER = struct.Struct("<3q")
_NEIGHBOR = struct.Struct("<I")
_WEIGHTED_RECORDS = {float: struct.Struct("<If"), int: struct.Struct("<Ii")}

_ATOL_RE = re.compile(r"\s*([+-]?\d+)")
_ATOF_RE = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_UINT_PATTERN = re.compile(r"\+?\d+")
_INT_PATTERN = re.compile(r"[+-]?\d+")
_FLOAT_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class GraphFormatError(ValueError):
    """Raised when graph input does not follow the expected format."""


def skip_comments(lines):
    """Return an iterator over ``lines`` past the leading empty or ``#`` lines."""
    return dropwhile(
        lambda line: line.rstrip("\r\n") == "" or line.startswith("#"), lines
    )


def string_to_weight(text, weight_type=float):
    """Convert ``text`` to a weight the way ``atol``/``atof`` would.

    A leading number is used and anything after it ignored; text without
    one gives zero.
    """
    if isinstance(weight_type, type) and issubclass(weight_type, int):
        match = _ATOL_RE.match(text)
        return weight_type(int(match.group(1))) if match else weight_type(0)
    if isinstance(weight_type, type) and issubclass(weight_type, float):
        match = _ATOF_RE.match(text)
        return weight_type(float(match.group(1))) if match else weight_type(0.0)
    raise TypeError(f"cannot convert text to weight type {weight_type!r}")


def _load(path, data):
    if data is not None:
        return data
    if path is None:
        raise ValueError("either a path or data is required")
    return read_string_from_file(path)


def _text_tokens(data):
    if isinstance(data, (bytes, bytearray, memoryview)):
        data = bytes(data).decode("latin-1")
    return data.split()


def _uint(text):
    try:
        value = int(text)
    except ValueError as exc:
        raise GraphFormatError(f"expected an integer, got {text!r}") from exc
    if value < 0:
        raise GraphFormatError(f"expected a non-negative integer, got {text!r}")
    return value


def _check_header(tokens, header):
    if len(tokens) < 3:
        raise GraphFormatError("graph input is too short")
    if tokens[0] != header:
        raise GraphFormatError(f"expected header {header!r}, got {tokens[0]!r}")


def _buffer(data):
    return data.encode("latin-1") if isinstance(data, str) else bytes(data)


def _read_section_header(buf, pos):
    try:
        n, m, _ = _SECTION_HEADER.unpack_from(buf, pos)
    except struct.error as exc:
        raise GraphFormatError("truncated binary graph header") from exc
    if n < 0 or m < 0:
        raise GraphFormatError("negative size in binary graph header")
    return n, m, pos + _SECTION_HEADER.size


def _read_offsets(buf, pos, n):
    fmt = f"<{n + 1}Q"
    try:
        offsets = list(struct.unpack_from(fmt, buf, pos))
    except struct.error as exc:
        raise GraphFormatError("truncated binary graph offsets") from exc
    return offsets, pos + struct.calcsize(fmt)


def _read_records(buf, pos, count, record):
    end = pos + count * record.size
    if end > len(buf):
        raise GraphFormatError("truncated binary graph edges")
    return list(record.iter_unpack(buf[pos:end])), end


def _read_binary_section(buf, pos, n, m, record):
    """Read offsets and records of a section whose header starts at ``pos``."""
    _, _, pos = _read_section_header(buf, pos)
    offsets, pos = _read_offsets(buf, pos, n)
    records, pos = _read_records(buf, pos, m, record)
    return offsets, records, pos


def _vertex_data(offsets, m):
    data = []
    for offset, following in zip(offsets, offsets[1:]):
        if following < offset or following > m:
            raise GraphFormatError(f"invalid offsets {offset}, {following}")
        data.append(VertexData(offset, following - offset))
    return data


def _transpose(n, vertex_data, adjacency):
    """Return in-vertex data and in-adjacency for the given out-adjacency."""
    reversed_edges = sorted(
        (
            Edge(target, source, weight)
            for source, data in enumerate(vertex_data)
            for target, weight in adjacency[data.offset:data.offset + data.degree]
        ),
        key=lambda edge: edge.source,
    )
    for edge in reversed_edges:
        if not 0 <= edge.source < n:
            raise GraphFormatError(f"neighbour {edge.source} out of range for {n} vertices")
    in_data = sorted_edges_to_vertex_data(n, reversed_edges)
    return in_data, [(edge.target, edge.weight) for edge in reversed_edges]


def parse_unweighted_graph(path=None, binary=False, data=None):
    """Parse an unweighted adjacency graph.

    Returns ``(n, m, offsets, edges)``: ``offsets`` has ``n + 1`` entries,
    the last being ``m``, and ``edges`` holds the neighbour ids.
    ``data`` may supply the file contents instead of ``path``.
    """
    data = _load(path, data)
    if binary:
        buf = _buffer(data)
        n, m, pos = _read_section_header(buf, 0)
        offsets, pos = _read_offsets(buf, pos, n)
        records, _ = _read_records(buf, pos, m, _NEIGHBOR)
        return n, m, offsets, [neighbor for (neighbor,) in records]

    tokens = _text_tokens(data)
    _check_header(tokens, UNWEIGHTED_HEADER)
    n, m = _uint(tokens[1]), _uint(tokens[2])
    if len(tokens) - 1 != n + m + 2:
        raise GraphFormatError(
            f"expected {n + m + 2} values after the header, got {len(tokens) - 1}"
        )
    offsets = [_uint(text) for text in tokens[3:3 + n]] + [m]
    edges = [_uint(text) for text in tokens[3 + n:3 + n + m]]
    return n, m, offsets, edges


def read_unweighted_symmetric_graph(path=None, binary=False, data=None):
    """Read an unweighted adjacency graph as a symmetric graph."""
    n, m, offsets, edges = parse_unweighted_graph(path, binary, data)
    return SymmetricGraph(
        _vertex_data(offsets, m), n, m, [(neighbor, None) for neighbor in edges]
    )


def read_unweighted_asymmetric_graph(path=None, binary=False, data=None):
    """Read an unweighted adjacency graph as a directed graph.

    Text input holds only out-edges; the in-edges are computed from them.
    """
    if not binary:
        n, m, offsets, edges = parse_unweighted_graph(path, False, data)
        out_data = _vertex_data(offsets, m)
        adjacency = [(neighbor, None) for neighbor in edges]
        in_data, in_adjacency = _transpose(n, out_data, adjacency)
        return AsymmetricGraph(out_data, in_data, n, m, adjacency, in_adjacency)

    buf = _buffer(_load(path, data))
    n, m, _ = _read_section_header(buf, 0)
    out_offsets, out_records, pos = _read_binary_section(buf, 0, n, m, _NEIGHBOR)
    in_offsets, in_records, _ = _read_binary_section(buf, pos, n, m, _NEIGHBOR)
    return AsymmetricGraph(
        _vertex_data(out_offsets, m),
        _vertex_data(in_offsets, m),
        n,
        m,
        [(neighbor, None) for (neighbor,) in out_records],
        [(neighbor, None) for (neighbor,) in in_records],
    )


def _weighted_record(weight_type):
    for base, record in _WEIGHTED_RECORDS.items():
        if isinstance(weight_type, type) and issubclass(weight_type, base):
            return record
    raise TypeError(f"unsupported weight type {weight_type!r}")


def parse_weighted_graph(path=None, binary=False, data=None, weight_type=float):
    """Parse a weighted adjacency graph.

    Returns ``(n, m, offsets, edges)`` where ``edges`` holds
    ``(neighbour, weight)`` pairs.
    """
    data = _load(path, data)
    if binary:
        buf = _buffer(data)
        record = _weighted_record(weight_type)
        n, m, pos = _read_section_header(buf, 0)
        offsets, pos = _read_offsets(buf, pos, n)
        records, _ = _read_records(buf, pos, m, record)
        return n, m, offsets, [(neighbor, weight_type(w)) for neighbor, w in records]

    tokens = _text_tokens(data)
    _check_header(tokens, WEIGHTED_HEADER)
    n, m = _uint(tokens[1]), _uint(tokens[2])
    if len(tokens) - 1 != n + 2 * m + 2:
        raise GraphFormatError(
            f"expected {n + 2 * m + 2} values after the header, got {len(tokens) - 1}"
        )
    offsets = [_uint(text) for text in tokens[3:3 + n]] + [m]
    neighbors = tokens[3 + n:3 + n + m]
    weights = tokens[3 + n + m:3 + n + 2 * m]
    edges = [
        (_uint(neighbor), string_to_weight(weight, weight_type))
        for neighbor, weight in zip(neighbors, weights)
    ]
    return n, m, offsets, edges


def read_weighted_symmetric_graph(path=None, binary=False, data=None, weight_type=float):
    """Read a weighted adjacency graph as a symmetric graph."""
    n, m, offsets, edges = parse_weighted_graph(path, binary, data, weight_type)
    return SymmetricGraph(_vertex_data(offsets, m), n, m, edges)


def read_weighted_asymmetric_graph(path=None, binary=False, data=None, weight_type=float):
    """Read a weighted adjacency graph as a directed graph.

    Only text input is supported; the in-edges are computed from the out-edges.
    """
    if binary:
        raise ValueError("binary input is not supported for weighted asymmetric graphs")
    n, m, offsets, edges = parse_weighted_graph(path, False, data, weight_type)
    out_data = _vertex_data(offsets, m)
    in_data, in_adjacency = _transpose(n, out_data, edges)
    return AsymmetricGraph(out_data, in_data, n, m, edges, in_adjacency)


def _edge_list_groups(path, width):
    """Yield groups of ``width`` values from an edge-list file past its comments."""
    with open(path, encoding="utf-8") as file:
        values = (value for line in skip_comments(file) for value in line.split())
        while True:
            group = list(islice(values, width))
            if len(group) < width:
                return
            yield group


def read_unweighted_edge_list(path):
    """Read ``<from> <to>`` pairs, stopping at the first malformed value."""
    edges = []
    for source, target in _edge_list_groups(path, 2):
        if not (_UINT_PATTERN.fullmatch(source) and _UINT_PATTERN.fullmatch(target)):
            break
        edges.append(Edge(int(source), int(target)))
    return edges


def read_weighted_edge_list(path, weight_type=float):
    """Read ``<from> <to> <weight>`` triples, stopping at the first malformed value."""
    if isinstance(weight_type, type) and issubclass(weight_type, int):
        weight_pattern = _INT_PATTERN
    elif isinstance(weight_type, type) and issubclass(weight_type, float):
        weight_pattern = _FLOAT_PATTERN
    else:
        raise TypeError(f"unsupported weight type {weight_type!r}")
    edges = []
    for source, target, weight in _edge_list_groups(path, 3):
        if not (
            _UINT_PATTERN.fullmatch(source)
            and _UINT_PATTERN.fullmatch(target)
            and weight_pattern.fullmatch(weight)
        ):
            break
        edges.append(Edge(int(source), int(target), weight_type(weight)))
    return edges


def _format_weight(weight):
    return f"{weight:g}" if isinstance(weight, float) else str(weight)


def write_graph_to_file(path, graph):
    """Write the out-edges of ``graph`` in adjacency graph format.

    The weighted format is used when any edge carries a weight.
    """
    neighbours = [graph.get_vertex(i).out_neighbors() for i in range(graph.n)]
    weighted = any(weight is not None for adjacency in neighbours for _, weight in adjacency)
    offsets = list(accumulate((len(adjacency) for adjacency in neighbours), initial=0))
    lines = [WEIGHTED_HEADER if weighted else UNWEIGHTED_HEADER, str(graph.n), str(graph.m)]
    lines.extend(str(offset) for offset in offsets[:graph.n])
    lines.extend(str(target) for adjacency in neighbours for target, _ in adjacency)
    if weighted:
        lines.extend(
            _format_weight(weight) for adjacency in neighbours for _, weight in adjacency
        )
    with open(path, "w", encoding="utf-8") as file:
        file.write("\n".join(lines) + "\n")