"""Adjacency inference and map coloring for locality boundary datasets."""

from .adjacency import (
    APPROXIMATE,
    EXACT,
    augment_adjacency,
    build_adjacency_graph,
    build_exact_adjacency,
    graph_from_declared_neighbors,
)
from .color_encoding import color_from_index, color_hex_from_index
from .geometry_stats import BoundingBox, Centroid, GeometryStats, build_stats_cache, geometry_stats
from .graph_coloring import dsatur_coloring, greedy_coloring
from .runtime_coloring import build_runtime_coloring, resolve_color_index, resolve_fill_color
