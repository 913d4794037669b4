"""Graph containers, hash tables, counting sort, histograms and adjacency-graph I/O."""

__version__ = "0.1.0"