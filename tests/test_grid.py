"""Tests for the grid model and AABB geometry helpers.

Validates:
  - GridConfig rejects impossible grids and derives col_width
  - px <-> grid-unit conversion both ways
  - round_half_up rounds halves up (not to even)
  - Invalid bounds are clamped and logged, never raised
  - Overlap / collision arithmetic, touching edges do not collide
  - The STRtree-backed collision index and overlap audit
"""

from __future__ import annotations

import unittest

from dashgrid.layout.geometry import (
    CollisionIndex, center_distance, collides, layout_overlaps, overlap,
)
from dashgrid.layout.grid import (
    cols_to_px, normalize_bounds, normalize_layout, px_to_cols, px_to_rows,
    round_half_up, rows_to_px,
)
from dashgrid.layout.models import ComponentBounds, GridConfig, GridConfigError
from tests.dashboard_fixture import make_grid


def B(id, x, y, w, h, **kw):
    return ComponentBounds(id=id, x=x, y=y, w=w, h=h, **kw)


class TestGridConfig(unittest.TestCase):

    def test_col_width(self):
        self.assertEqual(make_grid().col_width, 100)

    def test_rejects_zero_columns(self):
        with self.assertRaises(GridConfigError):
            GridConfig(columns=0, container_width=1200, row_height=30)

    def test_bounds_helpers(self):
        b = B("a", 2, 3, 4, 2, min_w=2)
        self.assertEqual((b.right, b.bottom, b.center, b.area), (6, 5, (4, 4), 8))
        moved = b.moved_to(0, 0).resized(6, 1)
        self.assertEqual((moved.x, moved.y, moved.w, moved.h), (0, 0, 6, 1))
        self.assertEqual(moved.min_w, 2)
        self.assertEqual((b.x, b.w), (2, 4))

    def test_rejects_non_positive_pixels(self):
        with self.assertRaises(GridConfigError):
            GridConfig(columns=12, container_width=-1, row_height=30)
        with self.assertRaises(GridConfigError):
            GridConfig(columns=12, container_width=1200, row_height=0)


class TestConversion(unittest.TestCase):

    def setUp(self):
        self.grid = make_grid()

    def test_columns(self):
        self.assertAlmostEqual(px_to_cols(250, self.grid), 2.5)
        self.assertAlmostEqual(cols_to_px(3, self.grid), 300)

    def test_rows(self):
        self.assertAlmostEqual(px_to_rows(45, self.grid), 1.5)
        self.assertAlmostEqual(rows_to_px(2, self.grid), 60)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(2.4999), 2)
        self.assertEqual(round_half_up(3), 3)
        self.assertEqual(round_half_up(-0.5), 0)
        self.assertEqual(round_half_up(-1.5), -1)


class TestNormalizeBounds(unittest.TestCase):
    """Invalid bounds are clamped at the boundary and logged."""

    def test_valid_bounds_returned_as_is(self):
        b = B("a", 2, 3, 4, 2)
        self.assertIs(normalize_bounds(b, 12), b)

    def test_zero_width_clamped_to_one(self):
        with self.assertLogs("dashgrid.layout.grid", level="WARNING"):
            b = normalize_bounds(B("a", 0, 0, 0, 2), 12)
        self.assertEqual(b.w, 1)

    def test_negative_height_clamped_to_one(self):
        with self.assertLogs("dashgrid.layout.grid", level="WARNING"):
            b = normalize_bounds(B("a", 0, 0, 2, -3), 12)
        self.assertEqual(b.h, 1)

    def test_too_wide_clamped_to_columns(self):
        with self.assertLogs("dashgrid.layout.grid", level="WARNING"):
            b = normalize_bounds(B("a", 3, 0, 20, 2), 12)
        self.assertEqual((b.x, b.w), (0, 12))

    def test_overhanging_x_pulled_back(self):
        with self.assertLogs("dashgrid.layout.grid", level="WARNING"):
            b = normalize_bounds(B("a", 10, 0, 4, 2), 12)
        self.assertEqual(b.x, 8)

    def test_negative_coordinates(self):
        with self.assertLogs("dashgrid.layout.grid", level="WARNING"):
            b = normalize_bounds(B("a", -2, -3, 4, 2), 12)
        self.assertEqual((b.x, b.y), (0, 0))

    def test_min_and_max_limits(self):
        with self.assertLogs("dashgrid.layout.grid", level="WARNING"):
            b = normalize_bounds(B("a", 0, 0, 1, 5, min_w=3, max_h=2), 12)
        self.assertEqual((b.w, b.h), (3, 2))
        self.assertEqual(b.min_w, 3)

    def test_columns_beat_min_width(self):
        with self.assertLogs("dashgrid.layout.grid", level="WARNING"):
            b = normalize_bounds(B("a", 0, 0, 4, 2, min_w=20), 12)
        self.assertEqual(b.w, 12)

    def test_fractional_coordinates_rounded(self):
        b = normalize_bounds(B("a", 2.5, 1.4, 4, 2), 12)
        self.assertEqual((b.x, b.y), (3, 1))

    def test_normalize_layout_identity(self):
        layout = [B("a", 0, 0, 4, 2), B("b", 4, 0, 4, 2)]
        self.assertIs(normalize_layout(layout, 12), layout)

    def test_normalize_layout_fixes_items(self):
        layout = [B("a", 0, 0, 4, 2), B("b", 11, 0, 4, 2)]
        with self.assertLogs("dashgrid.layout.grid", level="WARNING"):
            result = normalize_layout(layout, 12)
        self.assertIs(result[0], layout[0])
        self.assertEqual(result[1].x, 8)


class TestGeometry(unittest.TestCase):

    def test_overlap(self):
        self.assertEqual(overlap(B("a", 0, 0, 4, 2), B("b", 2, 1, 4, 2)), (2, 1, 2))

    def test_disjoint_overlap_is_zero(self):
        self.assertEqual(overlap(B("a", 0, 0, 2, 2), B("b", 5, 5, 2, 2)), (0, 0, 0))

    def test_touching_edges_do_not_collide(self):
        self.assertFalse(collides(B("a", 0, 0, 4, 2), B("b", 4, 0, 4, 2)))
        self.assertFalse(collides(B("a", 0, 0, 4, 2), B("b", 0, 2, 4, 2)))

    def test_gutter_makes_touching_collide(self):
        self.assertTrue(collides(B("a", 0, 0, 4, 2), B("b", 4, 0, 4, 2), gutter=1))
        self.assertFalse(collides(B("a", 0, 0, 4, 2), B("b", 5, 0, 4, 2), gutter=1))

    def test_center_distance(self):
        self.assertAlmostEqual(center_distance(B("a", 0, 0, 2, 2), B("b", 3, 4, 2, 2)), 5.0)

    def test_collision_index(self):
        index = CollisionIndex([B("a", 0, 0, 4, 2), B("b", 4, 0, 4, 2)])
        hits = index.hits(B("p", 2, 0, 4, 1))
        self.assertEqual([h.id for h in hits], ["a", "b"])
        self.assertTrue(index.is_free(B("p", 8, 0, 4, 2)))
        self.assertTrue(index.is_free(B("p", 0, 2, 12, 1)))

    def test_empty_collision_index(self):
        index = CollisionIndex([])
        self.assertEqual(len(index), 0)
        self.assertTrue(index.is_free(B("p", 0, 0, 12, 12)))

    def test_layout_overlaps(self):
        layout = [
            B("a", 0, 0, 4, 2),
            B("b", 2, 1, 4, 2),
            B("c", 8, 0, 4, 2),
            B("d", 4, 0, 4, 2),
        ]
        self.assertEqual(layout_overlaps(layout), [("a", "b"), ("b", "d")])

    def test_layout_overlaps_small_layouts(self):
        self.assertEqual(layout_overlaps([]), [])
        self.assertEqual(layout_overlaps([B("a", 0, 0, 1, 1)]), [])


if __name__ == "__main__":
    unittest.main()
