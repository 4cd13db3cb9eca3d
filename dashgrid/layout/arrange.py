"""Auto-arranger — repack a whole layout onto the grid.

Items are ordered (array order, reading order or size order) and then
laid out by one of three algorithms.  Widths and heights are kept.

``pack``
    Re-place items one by one with the first-fit position finder, each
    seeing only the items placed before it.  For the position-dependent
    orders the result is re-fed until the placement order equals the
    order of the result itself.  At that point arranging the result
    again replays exactly the same placements, which is what makes
    ``auto_arrange(auto_arrange(L)) == auto_arrange(L)``.

``flow``
    Fill rows left to right, wrapping when the next item would cross
    the right edge.  A row is as tall as its tallest item.

``distribute``
    Break rows like ``flow``, then spread each row's free columns evenly
    between its items so the row spans the full width.

Rows never reorder their items and each row starts below the previous
one, so the order of a row layout is its own reading order and a second
run reproduces it.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .grid import normalize_bounds
from .models import (
    AutoArrangeOptions, ComponentBounds, Position,
    DISTRIBUTE, FLOW, PRESERVE_ORDER, READING_ORDER, SIZE_ORDER, MAX_ARRANGE_PASSES,
)
from .placement import find_optimal_position


log = logging.getLogger(__name__)


def placement_order(items: Sequence[ComponentBounds], sort_order: str) -> list[int]:
    """Indices of *items* in the order they should be placed."""
    idx = range(len(items))
    if sort_order == PRESERVE_ORDER:
        return list(idx)
    if sort_order == READING_ORDER:
        return sorted(idx, key=lambda i: (items[i].y, items[i].x, i))
    if sort_order == SIZE_ORDER:
        return sorted(idx, key=lambda i: (-items[i].area, items[i].y, items[i].x, i))
    raise ValueError(f"Unknown sort order '{sort_order}'")


def _place_in_order(
    items: Sequence[ComponentBounds],
    order: Sequence[int],
    columns: int,
    gutter: int,
) -> list[ComponentBounds]:
    placed: list[ComponentBounds] = []
    result: list[ComponentBounds | None] = [None] * len(items)
    for i in order:
        item = items[i]
        pos = find_optimal_position(item.size, placed, columns, gutter=gutter)
        if not pos:
            # Stack below everything; the grid may always grow downward.
            y = max((int(p.bottom) for p in placed), default=0) + gutter
            log.warning("Auto-arrange: %s did not fit, stacked at row %d", item.id, y)
            pos = Position(0, y)
        moved = item if (item.x, item.y) == (pos.x, pos.y) else item.moved_to(pos.x, pos.y)
        placed.append(moved)
        result[i] = moved
    return result  # type: ignore[return-value]


def _split_rows(
    items: Sequence[ComponentBounds],
    order: Sequence[int],
    columns: int,
    gutter: int,
) -> list[list[int]]:
    """Greedy row breaking: an item wraps when it would cross the right edge."""
    rows: list[list[int]] = []
    used = 0
    for i in order:
        w = int(items[i].w)
        if rows and used + gutter + w <= columns:
            rows[-1].append(i)
            used += gutter + w
        else:
            rows.append([i])
            used = w
    return rows


def _layout_rows(
    items: Sequence[ComponentBounds],
    order: Sequence[int],
    columns: int,
    gutter: int,
    spread: bool,
) -> list[ComponentBounds]:
    """Lay *items* out in rows; with *spread*, justify each row to full width."""
    result: list[ComponentBounds | None] = [None] * len(items)
    y = 0
    for row in _split_rows(items, order, columns, gutter):
        widths = [int(items[i].w) for i in row]
        gaps = len(row) - 1
        free = columns - sum(widths)
        x = 0
        for k, i in enumerate(row):
            # Steps of floor(k * free / gaps) are never narrower than the gutter.
            offset = (k * free) // gaps if spread and gaps else k * gutter
            item = items[i]
            if (item.x, item.y) == (x + offset, y):
                result[i] = item
            else:
                result[i] = item.moved_to(x + offset, y)
            x += widths[k]
        y += max(int(items[i].h) for i in row) + gutter
    return result  # type: ignore[return-value]


def _pack(
    items: Sequence[ComponentBounds],
    columns: int,
    options: AutoArrangeOptions,
) -> list[ComponentBounds]:
    order = placement_order(items, options.sort_order)
    result = list(items)
    for n_pass in range(1, MAX_ARRANGE_PASSES + 1):
        result = _place_in_order(items, order, columns, options.gutter)
        if options.sort_order == PRESERVE_ORDER:
            break
        next_order = placement_order(result, options.sort_order)
        if next_order == order:
            break
        log.debug("Auto-arrange: order changed after pass %d, re-placing", n_pass)
        order = next_order
    else:
        log.warning("Auto-arrange: order still changing after %d passes",
                    MAX_ARRANGE_PASSES)
    return result


def auto_arrange(
    layout: Sequence[ComponentBounds],
    columns: int,
    options: AutoArrangeOptions | None = None,
) -> Sequence[ComponentBounds]:
    """Repack *layout* onto a *columns*-wide grid.

    Returns a new list in the input order, or *layout* itself when no
    component moved.
    """
    options = options or AutoArrangeOptions()
    if not layout:
        return layout

    items = [normalize_bounds(b, columns) for b in layout]
    if options.algorithm in (FLOW, DISTRIBUTE):
        order = placement_order(items, options.sort_order)
        result = _layout_rows(items, order, columns, options.gutter,
                              spread=options.algorithm == DISTRIBUTE)
    else:
        result = _pack(items, columns, options)

    if all(a is b for a, b in zip(result, layout)):
        return layout

    moved = sum(
        1 for a, b in zip(result, layout) if (a.x, a.y) != (b.x, b.y))
    log.info("Auto-arranged %d components (%s, %s, gutter=%d): %d moved",
             len(result), options.algorithm, options.sort_order,
             options.gutter, moved)
    return result
