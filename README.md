# parlgraph

Building blocks for graph algorithms: compressed adjacency graphs built from
edge lists, readers and writers for the adjacency-graph formats, and the
open-addressing hash tables, counting sort and histogram routines that graph
algorithms are built on. It is pure Python with no dependencies.

## Installation

```
pip install parlgraph
```

To run the test suite:

```
pip install "parlgraph[test]"
pytest
```

## Building graphs from edge lists

```python
from parlgraph.graph import Edge, edge_list_to_symmetric_graph, edge_list_to_asymmetric_graph

edges = [Edge(1, 5), Edge(0, 5), Edge(6, 3), Edge(2, 0), Edge(1, 0)]
graph = edge_list_to_symmetric_graph(edges)
print(graph.n, graph.m)                        # 7 10
print(graph.get_vertex(0).out_neighbors())     # [(1, None), (2, None), (5, None)]

directed = edge_list_to_asymmetric_graph([Edge(0, 1), Edge(0, 1)])
print(directed.get_vertex(1).in_degree())      # 1
```

`Edge` is a named tuple `(source, target, weight)`; plain tuples are accepted
too. Neighbours are returned as `(neighbour, weight)` pairs, with `None` as
the weight of unweighted edges. Duplicate edges and self-loops are removed
(of several weights on one pair of endpoints, the first after sorting is
kept), and adjacency lists come out sorted by neighbour id. The vertex count
is one more than the largest endpoint seen.

`SymmetricGraph` and `AsymmetricGraph` offer `get_vertex(i)` and `edges()`.
Also in `parlgraph.graph`:

- `EdgeArray` and `to_edge_array(graph)` — a flat list of
  `(source, target, weight)` triples, and `edge_array_to_symmetric_graph` to
  turn one back into a graph.
- `make_unweighted_symmetric_graph(num_vertices, edges)` — a graph from a set
  of `UndirectedEdge` objects, keeping isolated vertices up to `num_vertices`.
- `sort_and_dedupe`, `num_vertices_from_edges` and
  `sorted_edges_to_vertex_data` — the steps the builders are made of.

## Reading and writing files

`parlgraph.graph_io` reads and writes the `AdjacencyGraph` and
`WeightedAdjacencyGraph` text formats, reads a little-endian binary layout
(described in the module docstring), and reads plain edge lists in which
leading empty lines and lines starting with `#` are skipped:

```python
from parlgraph.graph import edge_list_to_symmetric_graph
from parlgraph.graph_io import (
    read_unweighted_edge_list,
    read_unweighted_symmetric_graph,
    write_graph_to_file,
)

edges = read_unweighted_edge_list("edges.txt")
graph = edge_list_to_symmetric_graph(edges)
write_graph_to_file("graph.adj", graph)
again = read_unweighted_symmetric_graph("graph.adj")
```

The readers take a `path`, or the file contents through `data=`, and
`binary=True` for the binary layout. Weighted readers take a `weight_type`
of `float` (the default) or `int`. Asymmetric readers compute in-edges from
the out-edges of text input; weighted asymmetric graphs can only be read
from text. Malformed adjacency-graph input raises `GraphFormatError`; the
edge-list readers stop at the first value that does not parse.
`write_graph_to_file` uses the weighted format whenever an edge carries a
weight.

## Helpers

- `parlgraph.undirected_edge.UndirectedEdge` — an edge where `(u, v)` equals
  `(v, u)`, usable in sets and as a dictionary key.
- `parlgraph.sequential_ht` — `hash32`, `hash64`, `log2_up` and
  `SequentialHT`, a single-threaded linear-probing table.
- `parlgraph.sparse_table.SparseTable`, `parlgraph.sparse_table.SparseAdditiveMap`
  and `parlgraph.resizable_table.ResizableTable` — linear-probing tables of
  `(key, value)` pairs keyed with a reserved empty key; their inserting
  methods take a lock, so several threads may insert at once.
- `parlgraph.counting_sort` — `seq_count_sort` and the block-wise
  `count_sort`.
- `parlgraph.histogram` — `histogram`, `histogram_medium` and
  `histogram_reduce` over a reusable `HistTable`.
- `parlgraph.speculative_for` — `speculative_for`, `eff_for` and
  `Reservation` for deterministic reservations over a range of iterations.
- `parlgraph.counters` — `AtomicMaxCounter` and `AtomicSumCounter`.
- `parlgraph.dyn_arr.DynArray` — a growable array with explicit capacity.
- `parlgraph.io` — `read_string_from_file`, `mmap_string_from_file` and
  `read_o_direct`.
- `parlgraph.assertions` — `abort`, `abort_invalid_enum` and `check`, which
  raise `AbortError` with the caller's file and line.

```python
from parlgraph.histogram import HistTable, histogram
from parlgraph.sparse_table import SparseTable

table = HistTable((-1, 0))
counts = histogram([3, 1, 3, 2, 3], lambda kv: kv, table)
print(sorted(counts))                          # [(1, 1), (2, 1), (3, 3)]

lookup = SparseTable(10, (-1, 0))
lookup.insert((5, 50))
print(lookup.find(5), lookup.contains(7))      # 50 False
```

The histogram output follows the internal buckets, not the keys, so sort it
if the order matters. Keys equal to the table's empty key are not counted.

## What it does not do

parlgraph has no command-line program and no option parser: it is a library
to be imported. It contains no graph algorithms such as clustering or
traversals, does not read the byte-compressed graph format, and runs its
work on the calling thread rather than in parallel.