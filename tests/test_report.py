import pytest

from locality_coloring.geometry_stats import build_stats_cache
from locality_coloring.report import (
    ColorConflict,
    centroid_distance_km,
    find_color_conflicts,
    print_coloring_report,
    summarize_colors,
)


class TestFindColorConflicts:
    def test_proper_coloring_has_none(self):
        graph = {"a": {"b"}, "b": {"a"}}
        assert find_color_conflicts(graph, {"a": 0, "b": 1}) == []

    def test_each_edge_reported_once(self):
        graph = {"a": {"b", "c"}, "b": {"a"}, "c": {"a"}}
        conflicts = find_color_conflicts(graph, {"a": 0, "b": 0, "c": 1})
        assert conflicts == [ColorConflict("a", "b", 0, None)]

    def test_uncolored_regions_are_skipped(self):
        graph = {"a": {"b"}, "b": {"a"}}
        assert find_color_conflicts(graph, {"a": 0}) == []

    def test_closest_conflicts_first(self, box_feature, empty_feature):
        features = [
            box_feature("a", 0, 0, 0.2, 0.2),
            box_feature("b", 0.1, 0, 0.3, 0.2),
            box_feature("c", 3, 0, 3.2, 0.2),
            empty_feature("d"),
        ]
        graph = {"a": {"b", "c", "d"}, "b": {"a"}, "c": {"a"}, "d": {"a"}}
        conflicts = find_color_conflicts(graph, {"a": 0, "b": 0, "c": 0, "d": 0}, build_stats_cache(features))
        assert [(c.region_a, c.region_b) for c in conflicts] == [("a", "b"), ("a", "c"), ("a", "d")]
        assert conflicts[0].distance_km < conflicts[1].distance_km
        assert conflicts[2].distance_km is None


class TestCentroidDistance:
    def test_one_degree_of_longitude_at_equator(self, box_feature):
        stats = build_stats_cache([box_feature("a", -0.1, -0.1, 0.1, 0.1), box_feature("b", 0.9, -0.1, 1.1, 0.1)])
        assert centroid_distance_km(stats["a"], stats["b"]) == pytest.approx(111.2, rel=1e-2)

    def test_degenerate_region(self, box_feature, empty_feature):
        stats = build_stats_cache([box_feature("a", 0, 0, 1, 1), empty_feature("e")])
        assert centroid_distance_km(stats["a"], stats["e"]) is None


class TestSummarizeColors:
    def test_counts_per_color(self):
        summary = summarize_colors({"a": 0, "b": 1, "c": 0, "d": 2})
        assert list(summary.columns) == ["color_index", "regions", "color_hex", "fill"]
        assert summary["color_index"].tolist() == [0, 1, 2]
        assert summary["regions"].tolist() == [2, 1, 1]
        assert summary.loc[0, "fill"] == "hsl(0 62% 46%)"
        assert summary.loc[0, "color_hex"] == "#BE2D2D"

    def test_empty(self):
        summary = summarize_colors({})
        assert summary.empty
        assert list(summary.columns) == ["color_index", "regions", "color_hex", "fill"]


class TestPrintColoringReport:
    def test_clean_report(self, capsys):
        conflicts = print_coloring_report("Runtime coloring", {"a": {"b"}, "b": {"a"}}, {"a": 0, "b": 1})
        out = capsys.readouterr().out
        assert conflicts == []
        assert "Runtime coloring:" in out
        assert "Found 1 adjacent pairs among 2 localities" in out
        assert "Used 2 colors" in out
        assert "✅" in out

    def test_conflict_warning(self, capsys):
        conflicts = print_coloring_report("Bad", {"a": {"b"}, "b": {"a"}}, {"a": 0, "b": 0})
        out = capsys.readouterr().out
        assert len(conflicts) == 1
        assert "WARNING: Found 1 adjacent pairs sharing a color" in out
        assert "a and b both use 0" in out
