"""
Build adjacency graphs of localities from their boundary geometry.

Two strategies share the same output shape, a dict mapping region id to the
set of neighboring region ids:

- EXACT (batch): an edge exists iff the bounding boxes overlap, edges included.
  This is a deliberate over-approximation of polygon adjacency and is kept
  as-is so previously generated datasets stay compatible.
- APPROXIMATE (runtime): starts from a seed graph (the neighbor lists persisted
  by the batch run) and adds an edge when centroids are within an adaptive
  radius or the boxes are within a small gap. Never removes seed edges.

Both strategies compare every pair of regions, which is fine for a few
thousand localities offline and a few hundred interactively.
"""

import math
from typing import Dict, List, Optional, Set, Tuple

from .geometry_stats import BoundingBox, Centroid, GeometryStats, build_stats_cache

AdjacencyGraph = Dict[str, Set[str]]

EXACT = "exact"
APPROXIMATE = "approximate"
ADJACENCY_MODES = (EXACT, APPROXIMATE)

# Configuration (coordinate-degree units)
NEAR_RADIUS_SCALE = 1.15
NEAR_RADIUS_OFFSET = 0.05
NEAR_RADIUS_MIN = 0.10
NEAR_RADIUS_MAX = 0.22
BOX_GAP_TOLERANCE = 0.04


def _feature_id(feature: Dict) -> str:
    return feature['properties']['id']


def _add_edge(graph: AdjacencyGraph, a: str, b: str):
    graph[a].add(b)
    graph[b].add(a)


def bboxes_overlap(a: BoundingBox, b: BoundingBox) -> bool:
    """Inclusive axis-aligned overlap. Degenerate (empty) boxes never overlap."""
    return (
        a.min_lon <= b.max_lon and a.max_lon >= b.min_lon
        and a.min_lat <= b.max_lat and a.max_lat >= b.min_lat
    )


def bbox_gap(a: BoundingBox, b: BoundingBox) -> Tuple[float, float]:
    """
    Gap between two boxes along each axis.

    Returns:
        (gap_lon, gap_lat), each 0 when the boxes overlap on that axis
    """
    gap_lon = max(0.0, a.min_lon - b.max_lon, b.min_lon - a.max_lon)
    gap_lat = max(0.0, a.min_lat - b.max_lat, b.min_lat - a.max_lat)
    return gap_lon, gap_lat


def near_radius(stats: GeometryStats) -> float:
    radius = stats.diagonal * NEAR_RADIUS_SCALE + NEAR_RADIUS_OFFSET
    return min(max(radius, NEAR_RADIUS_MIN), NEAR_RADIUS_MAX)


def planar_distance_sq(a: Centroid, b: Centroid) -> float:
    """
    Squared centroid distance with an equirectangular correction.

    Longitude difference is scaled by cos(mean latitude). The result stays in
    degree units; it is a local proxy, not a physical distance.
    """
    lat_mean = (a.lat + b.lat) / 2
    lon_scale = math.cos(math.radians(lat_mean))
    dx = (a.lon - b.lon) * lon_scale
    dy = a.lat - b.lat
    return dx * dx + dy * dy


def count_edges(graph: AdjacencyGraph) -> int:
    return sum(len(neighbors) for neighbors in graph.values()) // 2


def graph_from_declared_neighbors(features: List[Dict]) -> AdjacencyGraph:
    """
    Symmetric graph from the "neighbors" property carried by each feature.

    Ids that are not in the feature list and self references are dropped.
    """
    graph = {_feature_id(feature): set() for feature in features}
    for feature in features:
        region_id = _feature_id(feature)
        for neighbor_id in feature['properties'].get('neighbors') or []:
            if neighbor_id == region_id or neighbor_id not in graph:
                continue
            _add_edge(graph, region_id, neighbor_id)
    return graph


def build_exact_adjacency(features: List[Dict],
                          stats_by_id: Optional[Dict[str, GeometryStats]] = None) -> AdjacencyGraph:
    """
    Batch adjacency: edge iff bounding boxes overlap (inclusive).

    Args:
        features: GeoJSON features with properties.id and a geometry
        stats_by_id: Optional precomputed stats; computed here when omitted

    Returns:
        Dictionary mapping region id to set of neighbor ids
    """
    if stats_by_id is None:
        stats_by_id = build_stats_cache(features)

    ids = [_feature_id(feature) for feature in features]
    graph = {region_id: set() for region_id in ids}

    for i, id_a in enumerate(ids):
        bbox_a = stats_by_id[id_a].bbox
        for id_b in ids[i + 1:]:
            if id_a == id_b:
                continue
            if bboxes_overlap(bbox_a, stats_by_id[id_b].bbox):
                _add_edge(graph, id_a, id_b)

    return graph


def augment_adjacency(features: List[Dict],
                      seed: Optional[AdjacencyGraph] = None,
                      stats_by_id: Optional[Dict[str, GeometryStats]] = None) -> AdjacencyGraph:
    """
    Runtime adjacency: widen a seed graph with proximity-based candidate edges.

    A pair gains an edge when either:
    1. The planar centroid distance is within max(radius_a, radius_b), where
       each radius is clamp(diagonal * 1.15 + 0.05, 0.10, 0.22)
    2. The bounding-box gap is within 0.04 degrees on both axes

    Regions with a degenerate bounding box skip both tests and keep only
    their seed edges.

    Args:
        features: GeoJSON features with properties.id and a geometry
        seed: Graph to start from; defaults to the features' declared neighbors.
              It is copied, never modified.
        stats_by_id: Optional precomputed stats for this pass

    Returns:
        A new graph that contains every seed edge between known regions
    """
    if seed is None:
        seed = graph_from_declared_neighbors(features)
    if stats_by_id is None:
        stats_by_id = build_stats_cache(features)

    ids = [_feature_id(feature) for feature in features]
    graph = {region_id: set() for region_id in ids}

    for region_id, neighbors in seed.items():
        if region_id not in graph:
            continue
        for neighbor_id in neighbors:
            if neighbor_id != region_id and neighbor_id in graph:
                _add_edge(graph, region_id, neighbor_id)

    valid = {region_id: stats_by_id[region_id].bbox.is_valid for region_id in ids}
    radius_by_id = {region_id: near_radius(stats_by_id[region_id]) for region_id in ids}

    for i, id_a in enumerate(ids):
        if not valid[id_a]:
            continue
        stats_a = stats_by_id[id_a]

        for id_b in ids[i + 1:]:
            if id_a == id_b or not valid[id_b]:
                continue
            stats_b = stats_by_id[id_b]

            radius = max(radius_by_id[id_a], radius_by_id[id_b])
            dist_sq = planar_distance_sq(stats_a.centroid, stats_b.centroid)
            # overlapping boxes have zero gap on both axes
            gap_lon, gap_lat = bbox_gap(stats_a.bbox, stats_b.bbox)
            box_near = gap_lon <= BOX_GAP_TOLERANCE and gap_lat <= BOX_GAP_TOLERANCE

            if dist_sq <= radius * radius or box_near:
                _add_edge(graph, id_a, id_b)

    return graph


def build_adjacency_graph(features: List[Dict], mode: str = EXACT,
                          seed: Optional[AdjacencyGraph] = None,
                          stats_by_id: Optional[Dict[str, GeometryStats]] = None) -> AdjacencyGraph:
    """
    Build an adjacency graph with the requested strategy.

    Args:
        features: GeoJSON features
        mode: EXACT ("exact") or APPROXIMATE ("approximate")
        seed: Seed graph, only used by APPROXIMATE
        stats_by_id: Optional precomputed stats

    Returns:
        Dictionary mapping region id to set of neighbor ids
    """
    if mode == EXACT:
        return build_exact_adjacency(features, stats_by_id=stats_by_id)
    elif mode == APPROXIMATE:
        return augment_adjacency(features, seed=seed, stats_by_id=stats_by_id)
    raise ValueError(f"Unknown adjacency mode: {mode!r} (expected one of {ADJACENCY_MODES})")
