from typing import Dict, List, Optional

import pytest


def _box_ring(min_lon: float, min_lat: float, max_lon: float, max_lat: float) -> List[List[float]]:
    """Closed rectangular ring, counter-clockwise."""
    return [
        [min_lon, min_lat],
        [max_lon, min_lat],
        [max_lon, max_lat],
        [min_lon, max_lat],
        [min_lon, min_lat],
    ]


def _box_feature(region_id: str, min_lon: float, min_lat: float, max_lon: float, max_lat: float,
                 neighbors: Optional[List[str]] = None, color_index: int = 0, **extra) -> Dict:
    """Polygon feature whose vertex mean is the box center.

    The closing vertex is left out so the mean of the ring stays centered.
    """
    ring = _box_ring(min_lon, min_lat, max_lon, max_lat)[:-1]
    properties = {"id": region_id, "neighbors": list(neighbors or []), "color_index": color_index}
    properties.update(extra)
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": [ring]},
        "properties": properties,
    }


def _empty_feature(region_id: str, neighbors: Optional[List[str]] = None) -> Dict:
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": []},
        "properties": {"id": region_id, "neighbors": list(neighbors or []), "color_index": 0},
    }


# --- Factories ---


@pytest.fixture
def box_ring():
    """Factory for closed rectangular rings."""
    return _box_ring


@pytest.fixture
def box_feature():
    """Factory for box-shaped Polygon features: box_feature(id, min_lon, min_lat, max_lon, max_lat, ...)."""
    return _box_feature


@pytest.fixture
def empty_feature():
    """Factory for features with no coordinates."""
    return _empty_feature


# --- Sample Layouts ---


@pytest.fixture
def triangle_features():
    """Three pairwise-overlapping boxes."""
    return [
        _box_feature("a", 0, 0, 2, 2),
        _box_feature("b", 1, 1, 3, 3),
        _box_feature("c", 1.5, 0, 3.5, 2),
    ]


@pytest.fixture
def star_features():
    """A large center box overlapped by five mutually disjoint leaves."""
    return [
        _box_feature("center", 0, 0, 10, 10),
        _box_feature("leaf_sw", -1, -1, 0.5, 0.5),
        _box_feature("leaf_se", 9.5, -1, 11, 0.5),
        _box_feature("leaf_nw", -1, 9.5, 0.5, 11),
        _box_feature("leaf_ne", 9.5, 9.5, 11, 11),
        _box_feature("leaf_s", 4.5, -1, 5.5, 0.5),
    ]


@pytest.fixture
def near_pair_features():
    """Two small localities 0.1° apart: near by centroid, disjoint boxes."""
    return [
        _box_feature("east", 34.90, 32.00, 34.95, 32.05),
        _box_feature("west", 34.80, 32.00, 34.85, 32.05),
    ]
