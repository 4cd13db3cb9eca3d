"""Optimal position finder — first-fit row-major scan."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from .geometry import CollisionIndex
from .grid import normalize_bounds, round_half_up
from .models import (
    ComponentBounds, PlacementFailed, Position, Size,
    MAX_SEARCH_ROWS,
)


log = logging.getLogger(__name__)

_CANDIDATE_ID = "_candidate"


def search_ceiling(
    others: Sequence[ComponentBounds], columns: int, h: int, gutter: int = 0,
) -> int:
    """Last row the scan will try for an item of height *h*.

    Covers the row directly below the lowest component (always free)
    and the rows the total placed area would fill when packed solid,
    capped at ``MAX_SEARCH_ROWS``.
    """
    max_bottom = max((b.bottom for b in others), default=0)
    total_area = sum(b.area for b in others)
    rows = max(math.ceil(max_bottom) + gutter, math.ceil(total_area / columns))
    return min(rows + h, MAX_SEARCH_ROWS)


def find_optimal_position(
    size: Size,
    layout: Sequence[ComponentBounds],
    columns: int,
    preferred: Position | None = None,
    *,
    gutter: int = 0,
    exclude_id: str | None = None,
) -> Position | PlacementFailed:
    """Find the first non-overlapping slot for a *size* item.

    If *preferred* (rounded half-up to whole grid units) is inside the
    grid and free, that slot is returned.
    Otherwise rows are scanned top to bottom and columns left to right,
    and the first free candidate wins (smallest y, then smallest x), so
    identical inputs always give the same answer.

    Parameters
    ----------
    size : Size
        Requested width and height in grid units.  Invalid sizes are
        clamped (``w`` to ``[1, columns]``, ``h`` to at least 1).
    layout : sequence of ComponentBounds
        Components already on the grid.
    columns : int
        Grid width in columns.
    preferred : Position, optional
        Slot to try before scanning.
    gutter : int
        Empty grid units to keep between the item and its neighbours.
    exclude_id : str, optional
        Component to ignore (the item itself, when re-placing it).

    Returns
    -------
    Position or PlacementFailed
        ``PlacementFailed`` (falsy) when no slot exists below the
        search ceiling.
    """
    candidate = normalize_bounds(
        ComponentBounds(id=_CANDIDATE_ID, x=0, y=0, w=size.w, h=size.h), columns)
    w, h = candidate.w, candidate.h

    others = [b for b in layout if exclude_id is None or b.id != exclude_id]
    index = CollisionIndex(others, gutter)

    if preferred is not None:
        px, py = round_half_up(preferred.x), round_half_up(preferred.y)
        if 0 <= px <= columns - w and py >= 0 and index.is_free(candidate.moved_to(px, py)):
            return Position(px, py)

    ceiling = search_ceiling(others, columns, h, gutter)
    for y in range(ceiling + 1):
        for x in range(columns - w + 1):
            if index.is_free(candidate.moved_to(x, y)):
                return Position(x, y)

    reason = (f"no free {w}x{h} slot in rows 0..{ceiling} "
              f"of a {columns}-column grid with {len(others)} components")
    log.warning("Placement failed: %s", reason)
    return PlacementFailed(size=Size(w, h), reason=reason)
