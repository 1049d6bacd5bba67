"""
Tests for topological border following.
"""

from unittest import mock

import pytest
import numpy as np
import cv2
from scipy import ndimage

from raster_topology.contours import tracer
from raster_topology.contours.models import ROOT_INDEX, ContourType
from raster_topology.contours.rasterize import boundary_mask, draw_contours
from raster_topology.contours.tracer import extract_contours, extract_contours_with_stats
from raster_topology.labeling.labeler import count_components
from raster_topology.pixel_grid import PixelGrid

from tests.fixtures.grid_fixtures import (
    REFERENCE_BLOBS,
    REFERENCE_BLOBS_COUNT_8,
    REFERENCE_SHAPES,
    create_block,
    create_nested_rings,
    create_random_grid,
    create_ring,
    create_two_blobs,
)

SEEDS = [0, 1, 2, 3, 4, 5]


def _point_sets(tree):
    """Border point sets, order-independent."""
    return sorted(sorted(set(points)) for points in tree.point_lists())


def _opencv_point_sets(grid):
    """Border point sets found by cv2.findContours, as (row, col)."""
    result = cv2.findContours(grid.astype(np.uint8), cv2.RETR_TREE, cv2.CHAIN_APPROX_NONE)
    contours = result[-2]
    return sorted(
        sorted({(int(p[0][1]), int(p[0][0])) for p in contour}) for contour in contours
    )


class TestSimpleShapes:
    """Border following on small hand-checked grids."""

    def test_single_pixel_in_corner(self):
        """Test an isolated pixel on the image edge."""
        tree, stats = extract_contours_with_stats([[1]])

        borders = tree.borders()
        assert len(borders) == 1
        assert borders[0].contour_type == ContourType.OUTER
        assert borders[0].points == [(0, 0)]
        assert borders[0].parent == ROOT_INDEX
        assert stats.single_point == 1

    def test_isolated_pixel(self):
        """Test an isolated pixel surrounded by background."""
        tree = extract_contours([[0, 0, 0], [0, 1, 0], [0, 0, 0]])

        assert tree.point_lists() == [[(1, 1)]]

    def test_square_is_followed_counter_clockwise(self):
        """Test the visiting order on a 2x2 block."""
        grid = np.zeros((4, 4), dtype=np.uint8)
        grid[1:3, 1:3] = 1

        tree = extract_contours(grid)

        assert tree.point_lists() == [[(1, 1), (2, 1), (2, 2), (1, 2)]]

    def test_solid_block(self):
        """Test that a block has one outer border and no hole."""
        tree, stats = extract_contours_with_stats(create_block())

        assert stats.outer == 1
        assert stats.hole == 0
        outer = tree.borders()[0]
        assert len(outer.points) == 24
        assert outer.points[0] == (1, 1)

    def test_all_foreground(self):
        """Test that a grid without background has only its frame border."""
        tree, stats = extract_contours_with_stats(np.ones((4, 5), dtype=np.uint8))

        assert stats.outer == 1
        assert stats.hole == 0
        assert set(tree.borders()[0].points) == set(
            (r, c) for r in range(4) for c in range(5) if r in (0, 3) or c in (0, 4)
        )

    def test_all_background(self):
        """Test that a grid of zeros has only the root."""
        tree = extract_contours(np.zeros((3, 3)))

        assert len(tree) == 1
        assert tree.borders() == []

    def test_thin_line_revisits_pixels(self):
        """Test that a one-pixel-wide line lists its inner pixels twice."""
        tree = extract_contours([[0, 0, 0, 0, 0], [0, 1, 1, 1, 0], [0, 0, 0, 0, 0]])

        points = tree.borders()[0].points
        assert points == [(1, 1), (1, 2), (1, 3), (1, 2)]


class TestNesting:
    """Parent/child relations in the border tree."""

    def test_ring(self):
        """Test outer border with one hole."""
        tree, stats = extract_contours_with_stats(create_ring())

        outer, hole = tree.borders()
        assert outer.contour_type == ContourType.OUTER
        assert hole.contour_type == ContourType.HOLE
        assert outer.parent == ROOT_INDEX
        assert hole.parent == outer.index
        assert len(outer.points) == 24
        assert len(hole.points) == 12
        assert stats.outer == 1
        assert stats.hole == 1

    def test_nested_rings(self):
        """Test blob inside the hole of a ring."""
        tree = extract_contours(create_nested_rings())

        borders = tree.borders()
        assert [b.contour_type for b in borders] == [
            ContourType.OUTER, ContourType.HOLE, ContourType.OUTER,
        ]
        assert [tree.depth(b) for b in borders] == [1, 2, 3]
        assert len(borders[2].points) == 8

    def test_two_blobs_are_siblings(self):
        """Test that separate blobs both hang from the root."""
        tree = extract_contours(create_two_blobs())

        assert len(tree.root.children) == 2
        assert all(len(b.points) == 8 for b in tree.borders())

    def test_single_pixel_hole(self):
        """Test a one-pixel hole in a 3x3 block."""
        grid = np.zeros((5, 5), dtype=np.uint8)
        grid[1:4, 1:4] = 1
        grid[2, 2] = 0

        tree = extract_contours(grid)

        outer, hole = tree.borders()
        assert hole.parent == outer.index
        assert sorted(hole.points) == [(1, 2), (2, 1), (2, 3), (3, 2)]

    def test_reference_blobs_outer_count(self):
        """Test one outer border per 8-connected component."""
        tree = extract_contours(REFERENCE_BLOBS)

        assert len(tree.outer_borders()) == REFERENCE_BLOBS_COUNT_8
        tree.check_consistency()

    @pytest.mark.parametrize("seed", SEEDS)
    def test_border_counts_match_components(self, seed):
        """Test outer = 8-components and hole = enclosed 4-background components."""
        grid = create_random_grid(seed)
        tree, stats = extract_contours_with_stats(grid)

        _, background_count = ndimage.label(grid == 0)
        assert stats.outer == count_components(grid, 8)
        assert stats.hole == background_count - 1
        assert stats.degenerate == 0
        tree.check_consistency()

    @pytest.mark.parametrize("seed", SEEDS)
    def test_types_alternate_with_depth(self, seed):
        """Test outer borders at odd depth and holes at even depth."""
        tree = extract_contours(create_random_grid(seed, density=0.6))

        for border in tree.borders():
            expected = ContourType.OUTER if tree.depth(border) % 2 == 1 else ContourType.HOLE
            assert border.contour_type == expected


class TestBorderPoints:
    """Border pixels against independent references."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_borders_cover_boundary_pixels(self, seed):
        """Test that traced points are exactly the 4-boundary pixels."""
        grid = create_random_grid(seed)
        tree = extract_contours(grid)

        assert draw_contours(tree, grid.shape) == boundary_mask(grid)

    def test_points_are_foreground(self):
        """Test that every border point lies on a foreground pixel."""
        tree = extract_contours(REFERENCE_SHAPES)

        for points in tree.point_lists():
            for row, col in points:
                assert REFERENCE_SHAPES[row, col] == 1

    def test_consecutive_points_are_adjacent(self):
        """Test that each step moves to one of the 8 neighbours."""
        tree = extract_contours(create_random_grid(9))

        for points in tree.point_lists():
            for (r1, c1), (r2, c2) in zip(points, points[1:]):
                assert max(abs(r1 - r2), abs(c1 - c2)) == 1

    def test_reference_shapes_match_opencv(self):
        """Test against cv2.findContours on the mixed shapes image."""
        tree = extract_contours(REFERENCE_SHAPES)

        assert _point_sets(tree) == _opencv_point_sets(REFERENCE_SHAPES)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_random_grids_match_opencv(self, seed):
        """Test against cv2.findContours on random framed grids."""
        grid = create_random_grid(seed)
        tree = extract_contours(grid)

        assert _point_sets(tree) == _opencv_point_sets(grid)


class TestInputHandling:
    """Input normalisation and failure handling."""

    def test_caller_grid_unchanged(self):
        """Test that border markers never leak into the input."""
        grid = create_nested_rings()
        before = grid.copy()
        pixel_grid = PixelGrid.from_array(grid)

        extract_contours(grid)
        extract_contours(pixel_grid)

        assert np.array_equal(grid, before)
        assert np.array_equal(pixel_grid.data, before)

    def test_non_binary_values_are_foreground(self):
        """Test that any non-zero value is foreground."""
        grid = create_ring() * 7

        assert _point_sets(extract_contours(grid)) == _point_sets(extract_contours(create_ring()))

    @pytest.mark.parametrize("grid", [[], [[1, 1], [1]], np.zeros((4, 0))])
    def test_empty_or_malformed_input(self, grid):
        """Test that unusable input gives a root-only tree."""
        tree, stats = extract_contours_with_stats(grid)

        assert len(tree) == 1
        assert stats.traced == 0

    def test_degenerate_border_is_discarded(self):
        """Test that a border whose search finds no neighbour is dropped."""
        grid = [
            [0, 0, 0, 0, 0],
            [0, 1, 0, 1, 0],
            [0, 0, 0, 0, 0],
        ]
        real_follow = tracer._follow_border
        calls = []

        def fail_first(markers, start, entry, nbd):
            calls.append(start)
            if len(calls) == 1:
                return None
            return real_follow(markers, start, entry, nbd)

        with mock.patch.object(tracer, "_follow_border", side_effect=fail_first):
            tree, stats = extract_contours_with_stats(grid)

        assert calls == [(1, 1), (1, 3)]
        assert stats.degenerate == 1
        assert stats.outer == 1
        assert tree.root.children == [1]
        assert tree[1].points == [(1, 3)]
        tree.check_consistency()
