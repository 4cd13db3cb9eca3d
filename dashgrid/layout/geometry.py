"""Low-level AABB helpers for the layout engine.

All rectangles are axis-aligned and measured in grid units.  Touching
edges never count as a collision: two widgets side by side share a
column line but no area.
"""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import box as shapely_box
from shapely.strtree import STRtree

from .models import ComponentBounds


def overlap(a: ComponentBounds, b: ComponentBounds) -> tuple[float, float, float]:
    """Return (horizontal, vertical, area) overlap of two rectangles.

    Each value is clipped at zero.
    """
    horizontal = max(0.0, min(a.right, b.right) - max(a.x, b.x))
    vertical = max(0.0, min(a.bottom, b.bottom) - max(a.y, b.y))
    return (horizontal, vertical, horizontal * vertical)


def collides(a: ComponentBounds, b: ComponentBounds, gutter: float = 0) -> bool:
    """True if the rectangles share positive area.

    With a *gutter*, both rectangles are grown by that many units on
    their right and bottom sides, so a True result means the two are
    closer than *gutter* apart.
    """
    return (
        a.x < b.right + gutter
        and b.x < a.right + gutter
        and a.y < b.bottom + gutter
        and b.y < a.bottom + gutter
    )


def center_delta(
    origin: ComponentBounds, other: ComponentBounds,
) -> tuple[float, float]:
    """Vector from *origin*'s centroid to *other*'s centroid."""
    ox, oy = origin.center
    cx, cy = other.center
    return (cx - ox, cy - oy)


def center_distance(a: ComponentBounds, b: ComponentBounds) -> float:
    dx, dy = center_delta(a, b)
    return math.hypot(dx, dy)


def bounds_box(b: ComponentBounds, gutter: float = 0):
    """Shapely box for a component, grown by *gutter* right and down."""
    return shapely_box(b.x, b.y, b.right + gutter, b.bottom + gutter)


# ── Collision index ────────────────────────────────────────────────


class CollisionIndex:
    """Spatial index over a fixed set of rectangles.

    The STRtree narrows each query to nearby candidates; the exact
    positive-area test is then done arithmetically because Shapely's
    ``intersects`` is also true for rectangles that merely touch.
    """

    def __init__(self, items: Sequence[ComponentBounds], gutter: float = 0) -> None:
        self.items = list(items)
        self.gutter = gutter
        boxes = [bounds_box(b, gutter) for b in self.items]
        self._tree = STRtree(boxes) if boxes else None

    def __len__(self) -> int:
        return len(self.items)

    def hits(self, candidate: ComponentBounds) -> list[ComponentBounds]:
        """All indexed items colliding with *candidate*, in index order."""
        if self._tree is None:
            return []
        idx = self._tree.query(bounds_box(candidate, self.gutter), predicate="intersects")
        return [
            self.items[i] for i in sorted(int(i) for i in idx)
            if collides(candidate, self.items[i], self.gutter)
        ]

    def is_free(self, candidate: ComponentBounds) -> bool:
        return not self.hits(candidate)


def layout_overlaps(layout: Sequence[ComponentBounds]) -> list[tuple[str, str]]:
    """Return every pair of ids whose rectangles share positive area.

    Pairs are ordered by layout position, first index first.
    """
    items = list(layout)
    if len(items) < 2:
        return []
    tree = STRtree([bounds_box(b) for b in items])
    left, right = tree.query([bounds_box(b) for b in items], predicate="intersects")
    pairs: list[tuple[int, int]] = sorted({
        (int(i), int(j)) for i, j in zip(left, right)
        if i < j and collides(items[int(i)], items[int(j)])
    })
    return [(items[i].id, items[j].id) for i, j in pairs]
