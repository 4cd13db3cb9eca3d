"""Snap zones and magnetic snapping.

Snap zones are alignment guides at the pixel coordinates of existing
component edges.  Vertical zones carry an x coordinate (left/right
edges), horizontal zones a y coordinate (top/bottom edges).  While a
component is dragged, its edges are pulled onto any zone within the
snap threshold.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .grid import clamp, cols_to_px, px_to_cols, px_to_rows, round_half_up, rows_to_px
from .models import (
    ComponentBounds, GridConfig, SnapResult, SnapZone,
    HORIZONTAL, VERTICAL, SNAP_THRESHOLD_PX,
)


log = logging.getLogger(__name__)

# Pixel coordinates are keyed at this precision so that float noise in
# col_width (e.g. 1000 / 12) cannot split one guide into two.  The key
# is only used for merging; zones keep the unrounded coordinate.
_KEY_DIGITS = 6

# Slack on the threshold comparison for px values derived from a
# fractional col_width.
_EPSILON = 1e-9


# ── Zone derivation ────────────────────────────────────────────────


def calculate_snap_zones(
    layout: Iterable[ComponentBounds],
    grid: GridConfig,
    exclude_id: str | None = None,
) -> list[SnapZone]:
    """Derive alignment guides from every component except *exclude_id*.

    Each component contributes a vertical zone at its left and right
    edge and a horizontal zone at its top and bottom edge.  Zones on
    the same axis at the same coordinate merge, listing every
    contributing id in layout order.

    Returns vertical zones first, each axis sorted by position.
    """
    merged: dict[tuple[str, float], tuple[float, list[str]]] = {}

    def _add(direction: str, px: float, cid: str) -> None:
        _, ids = merged.setdefault((direction, round(px, _KEY_DIGITS)), (px, []))
        if cid not in ids:
            ids.append(cid)

    for b in layout:
        if exclude_id is not None and b.id == exclude_id:
            continue
        _add(VERTICAL, cols_to_px(b.x, grid), b.id)
        _add(VERTICAL, cols_to_px(b.right, grid), b.id)
        _add(HORIZONTAL, rows_to_px(b.y, grid), b.id)
        _add(HORIZONTAL, rows_to_px(b.bottom, grid), b.id)

    order = {VERTICAL: 0, HORIZONTAL: 1}
    return [
        SnapZone(position=pos, direction=direction, source_ids=tuple(ids))
        for (direction, _), (pos, ids) in sorted(
            merged.items(), key=lambda kv: (order[kv[0][0]], kv[0][1]))
    ]


# ── Snapping ───────────────────────────────────────────────────────


def _nearest_zone(
    edge_px: float, zones: Sequence[SnapZone], threshold: float,
) -> SnapZone | None:
    """Closest zone within *threshold* (inclusive); ties go to the lower coordinate."""
    best: SnapZone | None = None
    best_key: tuple[float, float] | None = None
    for z in zones:
        dist = abs(edge_px - z.position)
        if dist > threshold + _EPSILON:
            continue
        key = (dist, z.position)
        if best_key is None or key < best_key:
            best, best_key = z, key
    return best


def _snap_axis(
    lead_px: float, span_px: float,
    zones: Sequence[SnapZone], threshold: float,
) -> tuple[float, SnapZone | None]:
    """Snap one axis.  The leading edge is tried first and wins."""
    z = _nearest_zone(lead_px, zones, threshold)
    if z is not None:
        return z.position, z
    z = _nearest_zone(lead_px + span_px, zones, threshold)
    if z is not None:
        return z.position - span_px, z
    return lead_px, None


def apply_magnetic_snap(
    bounds: ComponentBounds,
    zones: Sequence[SnapZone],
    grid: GridConfig,
    threshold: float = SNAP_THRESHOLD_PX,
) -> SnapResult:
    """Pull a dragged component's edges onto nearby snap zones.

    Each axis is handled independently.  The result is clamped to
    ``x in [0, columns - w]`` and ``y >= 0`` and then rounded half-up to
    whole grid units.  Size is never changed.
    """
    vertical = [z for z in zones if z.direction == VERTICAL]
    horizontal = [z for z in zones if z.direction == HORIZONTAL]

    x_px, zx = _snap_axis(
        cols_to_px(bounds.x, grid), cols_to_px(bounds.w, grid), vertical, threshold)
    y_px, zy = _snap_axis(
        rows_to_px(bounds.y, grid), rows_to_px(bounds.h, grid), horizontal, threshold)

    x = clamp(px_to_cols(x_px, grid), 0, max(0, grid.columns - bounds.w))
    y = max(0.0, px_to_rows(y_px, grid))
    snapped = bounds.moved_to(round_half_up(x), round_half_up(y))

    engaged = tuple(z for z in (zx, zy) if z is not None)
    if engaged:
        log.debug("Snapped %s (%.2f, %.2f) -> (%d, %d) via %d zone(s)",
                  bounds.id, bounds.x, bounds.y, snapped.x, snapped.y, len(engaged))
    return SnapResult(bounds=snapped, engaged=engaged)


def zones_near(
    bounds: ComponentBounds,
    zones: Sequence[SnapZone],
    grid: GridConfig,
    threshold: float = SNAP_THRESHOLD_PX,
) -> list[SnapZone]:
    """Zones that any edge of *bounds* lies within *threshold* px of.

    Used to decide which guides to draw while dragging.
    """
    xs = (cols_to_px(bounds.x, grid), cols_to_px(bounds.right, grid))
    ys = (rows_to_px(bounds.y, grid), rows_to_px(bounds.bottom, grid))
    result = []
    for z in zones:
        edges = xs if z.direction == VERTICAL else ys
        if any(abs(e - z.position) <= threshold + _EPSILON for e in edges):
            result.append(z)
    return result
