"""
Verification and summary output for a coloring pass.

Checks that no adjacent localities share a color and tabulates how many
localities use each color, in the same console style as the pipeline.
"""

from typing import Dict, List, NamedTuple, Optional, Set

import pandas as pd
from geopy.distance import great_circle

from .adjacency import count_edges
from .color_encoding import color_from_index, color_hex_from_index
from .geometry_stats import GeometryStats
from .graph_coloring import Coloring, color_count


class ColorConflict(NamedTuple):
    region_a: str
    region_b: str
    color_index: int
    distance_km: Optional[float]


def centroid_distance_km(a: GeometryStats, b: GeometryStats) -> Optional[float]:
    """Great-circle distance between two centroids, or None if either box is degenerate."""
    if not (a.bbox.is_valid and b.bbox.is_valid):
        return None
    return great_circle((a.centroid.lat, a.centroid.lon), (b.centroid.lat, b.centroid.lon)).km


def find_color_conflicts(graph: Dict[str, Set[str]], coloring: Coloring,
                         stats_by_id: Optional[Dict[str, GeometryStats]] = None) -> List[ColorConflict]:
    """
    Find adjacent pairs that share a color.

    Args:
        graph: Adjacency graph the coloring was computed from
        coloring: Dictionary mapping region id to color index
        stats_by_id: Optional stats, used to report centroid distances

    Returns:
        One ColorConflict per offending edge, closest pairs first
    """
    conflicts = []
    seen_pairs = set()

    for name1, neighbors in graph.items():
        if name1 not in coloring:
            continue
        for name2 in neighbors:
            if name2 not in coloring:
                continue
            pair_key = tuple(sorted([name1, name2]))
            if pair_key in seen_pairs:
                continue
            seen_pairs.add(pair_key)

            if coloring[name1] != coloring[name2]:
                continue

            distance = None
            if stats_by_id and name1 in stats_by_id and name2 in stats_by_id:
                distance = centroid_distance_km(stats_by_id[name1], stats_by_id[name2])
            conflicts.append(ColorConflict(pair_key[0], pair_key[1], coloring[name1], distance))

    # Unknown distances sort last
    conflicts.sort(key=lambda c: (c.distance_km is None, c.distance_km or 0.0, c.region_a, c.region_b))
    return conflicts


def summarize_colors(coloring: Coloring) -> pd.DataFrame:
    """One row per color index with the number of regions using it."""
    columns = ['color_index', 'regions', 'color_hex', 'fill']
    if not coloring:
        return pd.DataFrame(columns=columns)

    counts = pd.Series(list(coloring.values()), name='color_index').value_counts().sort_index()
    summary = pd.DataFrame({'color_index': counts.index.astype(int), 'regions': counts.values})
    summary['color_hex'] = summary['color_index'].map(color_hex_from_index)
    summary['fill'] = summary['color_index'].map(color_from_index)
    return summary[columns].reset_index(drop=True)


def print_coloring_report(label: str, graph: Dict[str, Set[str]], coloring: Coloring,
                          stats_by_id: Optional[Dict[str, GeometryStats]] = None) -> List[ColorConflict]:
    """Print edge/color counts, the color usage table and any conflicts."""
    print(f"{label}:")
    print(f"  Found {count_edges(graph)} adjacent pairs among {len(graph)} localities")
    print(f"  Used {color_count(coloring)} colors")

    summary = summarize_colors(coloring)
    if not summary.empty:
        for line in summary.to_string(index=False).splitlines():
            print(f"    {line}")

    conflicts = find_color_conflicts(graph, coloring, stats_by_id)
    if conflicts:
        print(f"  ⚠️  WARNING: Found {len(conflicts)} adjacent pairs sharing a color:")
        for conflict in conflicts[:5]:
            where = f" ({conflict.distance_km:.1f} km apart)" if conflict.distance_km is not None else ""
            print(f"    {conflict.region_a} and {conflict.region_b} both use {conflict.color_index}{where}")
    else:
        print("  ✅ No adjacent localities share a color!")
    return conflicts
