#!/usr/bin/env python3
"""
Preprocess raw locality boundaries into game-ready GeoJSON and levels.

This script:
1. Reads raw locality features (Polygon/MultiPolygon) from GeoJSON
2. Normalizes id, Hebrew name, population and territory flag per locality
3. Builds the batch adjacency graph (bounding-box overlap)
4. Assigns a greedy color_index in feature order
5. Builds cumulative easy/medium/hard level lists and validates the result
6. Writes localities_all.geojson, localities_no_wb_gaza.geojson and levels.json

Usage:
    python -m locality_coloring.prepare_data --input data/raw_localities.geojson --output data

Expected raw feature properties:
    - id (or osm_id)
    - name_he or name:he (fallback: name)
    - population (optional)
    - in_wb_gaza (optional; otherwise inferred from a region/admin_area tag)
"""

import argparse
import json
import math
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .adjacency import build_exact_adjacency
from .geometry_stats import build_stats_cache
from .graph_coloring import Coloring, greedy_coloring
from .report import print_coloring_report
from .runtime_coloring import with_derived_fields

# Configuration
DEFAULT_INPUT_FILE = Path("data") / "raw_localities.geojson"
DEFAULT_OUTPUT_DIR = Path("data")
ALL_LOCALITIES_FILE = "localities_all.geojson"
NO_WB_GAZA_FILE = "localities_no_wb_gaza.geojson"
LEVELS_FILE = "levels.json"

EASY_POPULATION = 180000
MEDIUM_POPULATION = 50000
SHORT_NAME_LENGTH = 4

MANUAL_EASY = {"ירושלים", "תל אביב-יפו", "חיפה", "באר שבע"}
MANUAL_MEDIUM = {"אשדוד", "נתניה", "ראשון לציון", "פתח תקווה", "חולון"}

WB_GAZA_KEYWORDS = ("west bank", "wb", "gaza", "judea", "samaria")

DIFFICULTIES = ("easy", "medium", "hard")
REQUIRED_PROPERTIES = ("id", "name_he", "difficulty_bucket", "in_wb_gaza", "color_index", "neighbors")


class DatasetValidationError(ValueError):
    """Prepared dataset is inconsistent (missing level ids or properties)."""


def infer_name(properties: Dict) -> Optional[str]:
    return properties.get('name_he') or properties.get('name:he') or properties.get('name') or None


def infer_id(properties: Dict, index: int) -> str:
    return str(properties.get('id') or properties.get('osm_id') or f"loc_{index}")


def infer_in_wb_gaza(properties: Dict) -> bool:
    """Explicit in_wb_gaza flag, else a keyword match on the region tag."""
    if isinstance(properties.get('in_wb_gaza'), bool):
        return properties['in_wb_gaza']

    text = str(properties.get('region') or properties.get('admin_area') or "").lower()
    return any(keyword in text for keyword in WB_GAZA_KEYWORDS)


def parse_population(value) -> Optional[float]:
    """
    Finite population number, or None when unparseable.

    An explicit null counts as 0 and booleans as 0/1, so such localities
    fall to the population thresholds like any other. Blank strings are 0.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str) and not value.strip():
        return 0
    try:
        population = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(population):
        return None
    return int(population) if population.is_integer() else population


def assign_difficulty(name_he, population: Optional[float]) -> str:
    # non-string names (a numeric "name" tag) only go by population
    is_text = isinstance(name_he, str)
    if is_text and name_he in MANUAL_EASY:
        return "easy"
    if is_text and name_he in MANUAL_MEDIUM:
        return "medium"

    if population is not None:
        if population >= EASY_POPULATION:
            return "easy"
        if population >= MEDIUM_POPULATION:
            return "medium"
        return "hard"

    if is_text and name_he and len(name_he) <= SHORT_NAME_LENGTH:
        return "medium"
    return "hard"


def normalize_features(raw_features: List[Dict]) -> List[Dict]:
    """
    Build game-ready features from raw ones.

    Raw features without any usable name are dropped. The index used for
    fallback ids is the position in the raw list.
    """
    features = []
    for index, raw in enumerate(raw_features):
        properties = raw.get('properties') or {}
        name_he = infer_name(properties)
        if not name_he:
            continue

        # a missing population stays unknown; an explicit null is 0
        population = parse_population(properties['population']) if 'population' in properties else None
        features.append({
            "type": "Feature",
            "geometry": raw.get('geometry'),
            "properties": {
                "id": infer_id(properties, index),
                "name_he": name_he,
                "population": population,
                "difficulty_bucket": assign_difficulty(name_he, population),
                "in_wb_gaza": infer_in_wb_gaza(properties),
                "color_index": 0,
                "neighbors": [],
            },
        })
    return features


def build_neighbors(features: List[Dict], stats_by_id=None) -> Dict[str, set]:
    """Batch adjacency graph (bounding-box overlap) over all features."""
    if stats_by_id is None:
        stats_by_id = build_stats_cache(features)
    return build_exact_adjacency(features, stats_by_id=stats_by_id)


def colorize_greedy(features: List[Dict], graph: Dict[str, set]) -> Coloring:
    """Greedy coloring in feature order."""
    return greedy_coloring([feature['properties']['id'] for feature in features], graph)


def apply_batch_results(features: List[Dict], graph: Dict[str, set], coloring: Coloring) -> List[Dict]:
    """Copies of the features with neighbors and color_index filled in."""
    results = []
    for feature in features:
        region_id = feature['properties']['id']
        results.append(with_derived_fields(feature, graph.get(region_id, ()), coloring.get(region_id, 0)))
    return results


def build_levels(features: List[Dict]) -> Dict[str, List[str]]:
    """Cumulative level pools: easy ⊂ medium ⊂ hard."""
    buckets = [feature['properties']['difficulty_bucket'] for feature in features]
    ids = [feature['properties']['id'] for feature in features]
    return {
        "easy": [i for i, b in zip(ids, buckets) if b == "easy"],
        "medium": [i for i, b in zip(ids, buckets) if b in ("easy", "medium")],
        "hard": list(ids),
    }


def validate(features: List[Dict], levels: Dict[str, List[str]]):
    """
    Check level ids and required properties.

    Raises:
        DatasetValidationError: on the first inconsistency found
    """
    ids = {feature['properties']['id'] for feature in features}

    for level in DIFFICULTIES:
        for region_id in levels.get(level, []):
            if region_id not in ids:
                raise DatasetValidationError(f"Missing level ID in features: {region_id}")

    for feature in features:
        properties = feature['properties']
        for key in REQUIRED_PROPERTIES:
            if properties.get(key) is None:
                raise DatasetValidationError(
                    f"Missing property {key} on feature {properties.get('id') or 'unknown'}"
                )


def feature_collection(features: List[Dict]) -> Dict:
    return {"type": "FeatureCollection", "features": features}


def prepare_dataset(raw: Dict) -> Tuple[Dict, Dict, Dict[str, List[str]]]:
    """
    Run the batch pipeline over a raw FeatureCollection.

    Returns:
        (all localities collection, collection without WB/Gaza, levels)
    """
    print("Normalizing localities...")
    features = normalize_features(raw.get('features', []))
    print(f"  ✅ Kept {len(features)} named localities")

    print("Building adjacency graph (bounding-box overlap)...")
    stats_by_id = build_stats_cache(features)
    graph = build_neighbors(features, stats_by_id)

    print("Assigning greedy colors...")
    coloring = colorize_greedy(features, graph)
    print_coloring_report("Batch coloring", graph, coloring, stats_by_id)

    features = apply_batch_results(features, graph, coloring)
    levels = build_levels(features)

    all_localities = feature_collection(features)
    no_wb_gaza = feature_collection([f for f in features if not f['properties']['in_wb_gaza']])

    validate(all_localities['features'], levels)
    return all_localities, no_wb_gaza, levels


def write_json(file_path: Path, data):
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")


def write_dataset(output_dir: Path, all_localities: Dict, no_wb_gaza: Dict, levels: Dict[str, List[str]]):
    output_dir.mkdir(parents=True, exist_ok=True)
    write_json(output_dir / ALL_LOCALITIES_FILE, all_localities)
    write_json(output_dir / NO_WB_GAZA_FILE, no_wb_gaza)
    write_json(output_dir / LEVELS_FILE, levels)
    print(f"  ✅ Saved {ALL_LOCALITIES_FILE}, {NO_WB_GAZA_FILE} and {LEVELS_FILE} to {output_dir}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Prepare locality GeoJSON with neighbors, colors and levels.")
    parser.add_argument("--input", type=Path, default=DEFAULT_INPUT_FILE, help="Raw locality GeoJSON")
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT_DIR, help="Output directory")
    return parser.parse_args(argv)


def main(argv=None):
    """Main function."""
    args = parse_args(argv)

    print("="*60)
    print("PREPARING LOCALITY DATASET")
    print("="*60)
    print()

    if not args.input.exists():
        print(f"❌ Error: Input not found: {args.input}")
        print("   Provide a raw locality GeoJSON via --input.")
        sys.exit(1)

    with open(args.input, 'r', encoding='utf-8') as f:
        raw = json.load(f)

    try:
        all_localities, no_wb_gaza, levels = prepare_dataset(raw)
    except DatasetValidationError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    write_dataset(args.output, all_localities, no_wb_gaza, levels)

    print()
    print(f"✅ Prepared {len(all_localities['features'])} localities.")


if __name__ == '__main__':
    main()
