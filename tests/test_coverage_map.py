"""Tests for the visited-cell coverage map."""

import pytest

from coverage_map import CoverageMap


class TestCoverageMap:
    def test_first_visit_counts_once(self) -> None:
        cmap = CoverageMap(width=4, height=4)
        assert cmap.mark_visited(1.2, 2.7, drone_id=0)
        assert not cmap.mark_visited(1.9, 2.1, drone_id=1)
        assert cmap.visited_count == 1
        assert cmap.is_visited(1, 2)

    def test_out_of_bounds_is_ignored(self) -> None:
        cmap = CoverageMap(width=4, height=4)
        assert not cmap.mark_visited(4.0, 0.0, drone_id=0)
        assert not cmap.mark_visited(-0.5, 1.0, drone_id=0)
        assert cmap.visited_count == 0

    def test_fraction_and_stats(self) -> None:
        cmap = CoverageMap(width=5, height=2)
        cmap.mark_visited(0, 0, drone_id=0)
        cmap.mark_visited(1, 0, drone_id=0)
        cmap.mark_visited(4, 1, drone_id=3)

        assert cmap.get_visited_fraction() == pytest.approx(0.3)
        stats = cmap.get_coverage_stats()
        assert stats['visited_cells'] == 3
        assert stats['unvisited_cells'] == 7
        assert stats['visited_by_drone'] == {0: 2, 3: 1}
        assert stats['grid_size'] == (5, 2)

    def test_empty_grid_fraction_is_zero(self) -> None:
        assert CoverageMap(width=0, height=0).get_visited_fraction() == 0.0

    def test_reset(self) -> None:
        cmap = CoverageMap(width=3, height=3)
        cmap.mark_visited(1, 1, drone_id=2)
        cmap.reset()
        assert cmap.visited_count == 0
        assert not cmap.is_visited(1, 1)
