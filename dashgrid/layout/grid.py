"""Grid model — px ↔ grid-unit conversion and bounds normalization.

Grid units are abstract columns and rows.  One column is
``container_width / columns`` pixels wide and one row is ``row_height``
pixels tall.  Every coordinate the engine hands back is a whole grid
unit, rounded half-up, because placement on the grid is discrete.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from .models import ComponentBounds, GridConfig


log = logging.getLogger(__name__)


# ── Coordinate conversion ──────────────────────────────────────────


def px_to_cols(px: float, grid: GridConfig) -> float:
    return px / grid.col_width


def cols_to_px(cols: float, grid: GridConfig) -> float:
    return cols * grid.col_width


def px_to_rows(px: float, grid: GridConfig) -> float:
    return px / grid.row_height


def rows_to_px(rows: float, grid: GridConfig) -> float:
    return rows * grid.row_height


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves up (``2.5 -> 3``, ``-0.5 -> 0``).

    Unlike the built-in ``round``, which rounds halves to even.
    """
    return int(math.floor(value + 0.5))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


# ── Bounds normalization ───────────────────────────────────────────


def _is_whole(value: float) -> bool:
    return float(value).is_integer()


def normalize_bounds(bounds: ComponentBounds, columns: int) -> ComponentBounds:
    """Clamp a component into a valid rectangle on a *columns*-wide grid.

    Invalid sizes (``w <= 0``, ``h <= 0``, ``w > columns``) and
    out-of-range coordinates are corrected at the nearest valid value
    and logged as a recoverable inconsistency.  A dashboard must always
    render something, so nothing here raises.

    Returns *bounds* itself when no correction was needed.
    """
    fixes: list[str] = []

    w = bounds.w if _is_whole(bounds.w) else round_half_up(bounds.w)
    h = bounds.h if _is_whole(bounds.h) else round_half_up(bounds.h)
    if w <= 0:
        fixes.append(f"w={bounds.w} -> 1")
        w = 1
    if h <= 0:
        fixes.append(f"h={bounds.h} -> 1")
        h = 1

    # Size limits: max first so that a conflicting min still wins.
    if bounds.max_w is not None and w > bounds.max_w:
        fixes.append(f"w={w} -> max_w {bounds.max_w}")
        w = bounds.max_w
    if bounds.min_w is not None and w < bounds.min_w:
        fixes.append(f"w={w} -> min_w {bounds.min_w}")
        w = bounds.min_w
    if bounds.max_h is not None and h > bounds.max_h:
        fixes.append(f"h={h} -> max_h {bounds.max_h}")
        h = bounds.max_h
    if bounds.min_h is not None and h < bounds.min_h:
        fixes.append(f"h={h} -> min_h {bounds.min_h}")
        h = bounds.min_h

    # The grid width is the one limit nothing may exceed.
    if w > columns:
        fixes.append(f"w={w} -> columns {columns}")
        w = columns

    x = bounds.x if _is_whole(bounds.x) else round_half_up(bounds.x)
    y = bounds.y if _is_whole(bounds.y) else round_half_up(bounds.y)
    if x < 0 or x + w > columns:
        cx = clamp(x, 0, columns - w)
        fixes.append(f"x={x} -> {cx}")
        x = cx
    if y < 0:
        fixes.append(f"y={y} -> 0")
        y = 0

    if fixes:
        log.warning("Clamped invalid bounds for %s: %s", bounds.id, "; ".join(fixes))

    if (x, y, w, h) == (bounds.x, bounds.y, bounds.w, bounds.h):
        return bounds
    return ComponentBounds(
        id=bounds.id, x=int(x), y=int(y), w=int(w), h=int(h),
        min_w=bounds.min_w, max_w=bounds.max_w,
        min_h=bounds.min_h, max_h=bounds.max_h,
    )


def normalize_layout(
    layout: Sequence[ComponentBounds], columns: int,
) -> Sequence[ComponentBounds]:
    """Normalize every item; returns *layout* itself when all were valid."""
    result = [normalize_bounds(b, columns) for b in layout]
    if all(a is b for a, b in zip(result, layout)):
        return layout
    return result
