"""
Per-region geometry statistics used by the adjacency tests.

Reduces a Polygon/MultiPolygon coordinate tree to:
1. A bounding box (min/max longitude and latitude)
2. A centroid (plain mean of every vertex, holes included, not area-weighted)
3. The bounding-box diagonal length in coordinate degrees

Malformed or empty geometry never raises. It yields a degenerate box with
inf/-inf sentinel bounds, which callers detect with BoundingBox.is_valid.
"""

import math
from numbers import Real
from typing import Dict, Iterable, List, NamedTuple, Tuple

import numpy as np


class BoundingBox(NamedTuple):
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @property
    def is_valid(self) -> bool:
        """True when the box encloses at least one finite vertex."""
        return (
            all(math.isfinite(v) for v in self)
            and self.min_lon <= self.max_lon
            and self.min_lat <= self.max_lat
        )


class Centroid(NamedTuple):
    lon: float
    lat: float


class GeometryStats(NamedTuple):
    bbox: BoundingBox
    centroid: Centroid
    diagonal: float


EMPTY_BBOX = BoundingBox(math.inf, math.inf, -math.inf, -math.inf)


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def collect_geometry_points(coords, out: List[Tuple[float, float]] = None) -> List[Tuple[float, float]]:
    """
    Flatten an arbitrarily nested coordinate structure into (lon, lat) pairs.

    A terminal element is any list/tuple whose first two items are numbers;
    extra items (altitude) are ignored. Non-sequence items are skipped, and so
    are vertices whose numbers do not fit in a float.

    Args:
        coords: GeoJSON "coordinates" member (any nesting depth)
        out: Optional list to append to

    Returns:
        List of (lon, lat) tuples
    """
    if out is None:
        out = []
    if not isinstance(coords, (list, tuple)):
        return out

    if len(coords) >= 2 and _is_number(coords[0]) and _is_number(coords[1]):
        try:
            point = (float(coords[0]), float(coords[1]))
        except OverflowError:
            # integer too large for a float: drop the vertex
            return out
        out.append(point)
        return out

    for item in coords:
        collect_geometry_points(item, out)
    return out


def stats_from_points(points: Iterable[Tuple[float, float]]) -> GeometryStats:
    """Reduce a sequence of (lon, lat) pairs to bounding box, centroid and diagonal."""
    pts = np.asarray(list(points), dtype=float).reshape(-1, 2)
    if len(pts) == 0:
        return GeometryStats(EMPTY_BBOX, Centroid(0.0, 0.0), 0.0)

    min_lon, min_lat = pts.min(axis=0)
    max_lon, max_lat = pts.max(axis=0)
    mean_lon, mean_lat = pts.mean(axis=0)

    bbox = BoundingBox(float(min_lon), float(min_lat), float(max_lon), float(max_lat))
    diagonal = math.hypot(max(0.0, bbox.max_lon - bbox.min_lon), max(0.0, bbox.max_lat - bbox.min_lat))
    return GeometryStats(bbox, Centroid(float(mean_lon), float(mean_lat)), diagonal)


def geometry_stats(geometry) -> GeometryStats:
    """
    Compute stats for a GeoJSON geometry dict.

    Geometries without a "coordinates" member (GeometryCollection, null)
    are treated as empty.
    """
    if not isinstance(geometry, dict) or 'coordinates' not in geometry:
        return stats_from_points([])
    return stats_from_points(collect_geometry_points(geometry['coordinates']))


def feature_stats(feature: Dict) -> GeometryStats:
    return geometry_stats(feature.get('geometry'))


def build_stats_cache(features: List[Dict]) -> Dict[str, GeometryStats]:
    """
    Compute stats once per feature for a single adjacency/coloring pass.

    The cache is returned to the caller and never stored at module level, so
    separate calls over different region sets cannot see each other's entries.
    """
    return {feature['properties']['id']: feature_stats(feature) for feature in features}
