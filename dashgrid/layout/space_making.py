"""Space-making resolver — push neighbours away from a dragged component.

Called on every drag-move with the dragged item's live bounds.  Each
call starts again from the committed layout it is given, so repeated or
out-of-order calls always produce the same proposal for the same input.

The default strategy is a single pass: only items the dragged component
overlaps are moved, and a moved item may end up overlapping a third
one.  The ``cascade`` strategy lets moved items push in turn, for a
bounded number of passes.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .geometry import center_delta, collides
from .grid import clamp
from .models import (
    AffectedComponent, ComponentBounds, Displacement, SpaceMakingConfig,
    SpaceMakingResult, DEFAULT_SPACE_MAKING_CONFIG, CASCADE,
)


log = logging.getLogger(__name__)


def push_vector(pusher: ComponentBounds, item: ComponentBounds) -> tuple[int, int]:
    """Unit push direction for *item*, away from *pusher*.

    The axis with the larger centroid separation wins; ties go vertical.
    A zero separation on the chosen axis pushes right or down.
    """
    dx, dy = center_delta(pusher, item)
    if abs(dx) > abs(dy):
        return (1 if dx > 0 else -1, 0)
    return (0, -1 if dy < 0 else 1)


def _push(
    pusher: ComponentBounds,
    item: ComponentBounds,
    total: tuple[float, float],
    columns: int,
    cfg: SpaceMakingConfig,
) -> ComponentBounds | None:
    """Displace *item* one step away from *pusher*; None if it cannot move.

    *total* is the displacement the item has already accumulated this
    call; the running total stays within ``max_push_distance`` per axis.
    """
    step = min(cfg.push_radius, cfg.max_push_distance)
    ux, uy = push_vector(pusher, item)
    cap = cfg.max_push_distance
    if ux:
        amount = clamp(total[0] + ux * step, -cap, cap) - total[0]
        new_x = clamp(item.x + amount, 0, max(0, columns - item.w))
        if new_x == item.x:
            return None
        return item.moved_to(new_x, item.y)
    amount = clamp(total[1] + uy * step, -cap, cap) - total[1]
    new_y = max(0, item.y + amount)
    if new_y == item.y:
        return None
    return item.moved_to(item.x, new_y)


def push_away(
    dragged: ComponentBounds,
    layout: Sequence[ComponentBounds],
    columns: int,
    config: SpaceMakingConfig = DEFAULT_SPACE_MAKING_CONFIG,
) -> SpaceMakingResult:
    """Propose a layout with neighbours pushed out of *dragged*'s way.

    Every item (other than the dragged one, matched by id) whose
    rectangle shares positive area with *dragged* is pushed by
    ``push_radius`` units along the axis of larger centroid separation,
    away from the dragged item, and clamped to ``[0, columns - w]``
    horizontally and ``y >= 0`` vertically.  Pushes past an edge are
    applied partially.

    Returns the input *layout* object unchanged when nothing moved.
    """
    if not config.enabled or min(config.push_radius, config.max_push_distance) <= 0:
        return SpaceMakingResult(layout=layout, affected=[])

    current = list(layout)
    totals: dict[int, tuple[float, float]] = {}

    pushers = [dragged]
    passes = 1 + (config.cascade_depth if config.strategy == CASCADE else 0)
    for n_pass in range(passes):
        moved_now: list[int] = []
        for pusher in pushers:
            for i, item in enumerate(current):
                if item.id == dragged.id or item.id == pusher.id:
                    continue
                if not collides(pusher, item):
                    continue
                pushed = _push(pusher, item, totals.get(i, (0, 0)), columns, config)
                if pushed is None:
                    continue
                tx, ty = totals.get(i, (0, 0))
                totals[i] = (tx + pushed.x - item.x, ty + pushed.y - item.y)
                current[i] = pushed
                if i not in moved_now:
                    moved_now.append(i)
        if not moved_now:
            break
        pushers = [current[i] for i in moved_now]
        if n_pass:
            log.debug("Space-making cascade pass %d moved %d component(s)",
                      n_pass, len(moved_now))

    affected: list[AffectedComponent] = []
    for i, (orig, new) in enumerate(zip(layout, current)):
        dx, dy = new.x - orig.x, new.y - orig.y
        if dx == 0 and dy == 0:
            current[i] = orig
            continue
        affected.append(AffectedComponent(
            id=orig.id,
            displacement=Displacement(dx, dy),
            cause_id=dragged.id,
            delay_ms=len(affected) * config.stagger_ms,
        ))

    if not affected:
        return SpaceMakingResult(layout=layout, affected=[])

    log.debug("Space-making for %s displaced %d component(s): %s",
              dragged.id, len(affected), [a.id for a in affected])
    return SpaceMakingResult(layout=current, affected=affected)
