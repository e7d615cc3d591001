"""
Runtime recoloring of a loaded locality dataset.

The client recomputes adjacency and coloring over the full, unfiltered
dataset so the graph is the most complete one available, whatever subset is
on screen. The runtime color wins over the persisted color_index; the
persisted value is only used for regions the runtime pass did not see.
"""

import copy
from typing import Dict, Iterable, List, Optional

from .adjacency import augment_adjacency
from .color_encoding import color_from_index
from .geometry_stats import build_stats_cache
from .graph_coloring import Coloring, dsatur_coloring


def build_runtime_coloring(features: List[Dict]) -> Coloring:
    """
    Widen the declared-neighbor graph and color it with DSATUR.

    Args:
        features: GeoJSON features carrying properties.id, properties.neighbors
                  and a geometry

    Returns:
        Dictionary mapping region id to runtime color index
    """
    # stats live only for this pass
    stats_by_id = build_stats_cache(features)
    graph = augment_adjacency(features, stats_by_id=stats_by_id)
    return dsatur_coloring(graph)


def pick_master_collection(*collections: Optional[Dict]) -> Optional[Dict]:
    """First loaded FeatureCollection, in order of preference."""
    for collection in collections:
        if collection is not None:
            return collection
    return None


def runtime_coloring_for_collections(*collections: Optional[Dict]) -> Coloring:
    """
    Runtime coloring over the preferred loaded collection.

    Pass the all-inclusive dataset first, then the filtered one, then the
    active one. Returns an empty mapping when nothing is loaded yet.
    """
    master = pick_master_collection(*collections)
    if master is None:
        return {}
    return build_runtime_coloring(master.get('features', []))


def resolve_color_index(feature: Dict, runtime_colors: Dict[str, int]) -> int:
    """Runtime color when known, else the persisted color_index, else 0."""
    properties = feature['properties']
    runtime_color = runtime_colors.get(properties['id'])
    if isinstance(runtime_color, int):
        return runtime_color

    persisted = properties.get('color_index')
    if isinstance(persisted, int) and not isinstance(persisted, bool) and persisted >= 0:
        return persisted
    return 0


def resolve_fill_color(feature: Dict, runtime_colors: Dict[str, int]) -> str:
    return color_from_index(resolve_color_index(feature, runtime_colors))


def with_derived_fields(feature: Dict, neighbors: Iterable[str], color_index: int) -> Dict:
    """
    Copy of a feature with the engine-owned fields written.

    The input feature is left untouched so a renderer reading it concurrently
    never sees a half-updated record.
    """
    updated = copy.deepcopy(feature)
    updated['properties']['neighbors'] = sorted(neighbors)
    updated['properties']['color_index'] = int(color_index)
    return updated
