"""LayoutEngine — one per editing session.

Wires the grid model, snapping, placement, auto-arrange and
space-making together, and owns the session's animation state.  The
caller keeps the authoritative layout: every method takes the layout it
should work on and returns a candidate for the caller to commit or
discard.  Nothing here mutates a layout it was given.

With ``enabled=False`` every operation returns its layout input
unchanged and leaves the animation state alone.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, Sequence

from .animation import AnimationTracker
from .arrange import auto_arrange
from .models import (
    AnimationState, AutoArrangeOptions, ComponentBounds, DragUpdate, GridConfig,
    PlacementFailed, Position, Size, SnapResult, SnapZone, SpaceMakingConfig,
    TransitionDescriptor,
    DEFAULT_SPACE_MAKING_CONFIG, SNAP_THRESHOLD_PX,
    get_animation_preset, get_arrange_preset,
)
from .placement import find_optimal_position
from .scheduling import Scheduler
from .snapping import apply_magnetic_snap, calculate_snap_zones, zones_near
from .space_making import push_away


log = logging.getLogger(__name__)


class LayoutEngine:
    """Session-scoped dashboard layout engine.

    Parameters
    ----------
    grid : GridConfig
        Column count and pixel metrics of the editing surface.
    enabled : bool
        Global switch; when False every operation is the identity.
    space_making : SpaceMakingConfig, optional
        Push-away behaviour during drags.
    snap_threshold_px : float
        Edge-to-guide distance that still snaps (inclusive).
    scheduler : Scheduler, optional
        Runs the delayed highlight clear; defaults to a
        ``ThreadingScheduler``.
    """

    def __init__(
        self,
        grid: GridConfig,
        *,
        enabled: bool = True,
        space_making: SpaceMakingConfig | None = None,
        snap_threshold_px: float = SNAP_THRESHOLD_PX,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.grid = grid
        self.enabled = enabled
        self.space_making_config = space_making or DEFAULT_SPACE_MAKING_CONFIG
        self.snap_threshold_px = snap_threshold_px
        self.tracker = AnimationTracker(scheduler)
        self._snap_zones: list[SnapZone] = []

    def __enter__(self) -> LayoutEngine:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ── State ──────────────────────────────────────────────────────

    @property
    def state(self) -> AnimationState:
        return self.tracker.snapshot()

    @property
    def snap_zones(self) -> list[SnapZone]:
        return list(self._snap_zones)

    def set_grid(self, grid: GridConfig) -> None:
        """Switch to a new grid (e.g. the viewport was resized).

        Snap zones are pixel based, so they are dropped until the next
        ``update_snap_zones``.
        """
        self.grid = grid
        self._snap_zones = []
        self.tracker.set_snap_zones([])

    # ── Snapping ───────────────────────────────────────────────────

    def update_snap_zones(
        self, layout: Sequence[ComponentBounds], exclude_id: str | None = None,
    ) -> list[SnapZone]:
        """Recompute guides from a committed layout.

        Call when the committed layout changes, not on every pointer-move.
        """
        if not self.enabled:
            return self.snap_zones
        self._snap_zones = calculate_snap_zones(layout, self.grid, exclude_id)
        self.tracker.set_snap_zones(self._snap_zones)
        return self.snap_zones

    def snap(self, item: ComponentBounds) -> SnapResult:
        if not self.enabled:
            return SnapResult(bounds=item)
        return apply_magnetic_snap(
            item, self._snap_zones, self.grid, self.snap_threshold_px)

    def apply_snapping(self, item: ComponentBounds) -> ComponentBounds:
        """Snapped, clamped and rounded live bounds for a dragged item."""
        return self.snap(item).bounds

    def snap_indicators(self, item: ComponentBounds) -> list[SnapZone]:
        """Guides to draw for *item*'s current drag position."""
        if not self.enabled:
            return []
        return zones_near(item, self._snap_zones, self.grid, self.snap_threshold_px)

    # ── Placement ──────────────────────────────────────────────────

    def find_best_position(
        self,
        size: Size,
        layout: Sequence[ComponentBounds],
        preferred: Position | None = None,
    ) -> Position | PlacementFailed:
        """Slot for a new component of *size*; top-left first by default."""
        if not self.enabled:
            return preferred or Position(0, 0)
        return find_optimal_position(
            size, layout, self.grid.columns, preferred or Position(0, 0))

    def auto_arrange(
        self,
        layout: Sequence[ComponentBounds],
        preset: str | AutoArrangeOptions = "dashboard",
    ) -> Sequence[ComponentBounds]:
        """Repack *layout* and highlight every component while it moves.

        *preset* is a name from ``AUTO_ARRANGE_PRESETS`` or explicit
        options.  Starting a new arrangement cancels the pending
        highlight clear of the previous one.
        """
        if not self.enabled:
            return layout
        options = preset if isinstance(preset, AutoArrangeOptions) else get_arrange_preset(preset)
        result = auto_arrange(layout, self.grid.columns, options)
        self.tracker.start_arranging(
            (b.id for b in layout), options.animation_duration_ms)
        return result

    # ── Dragging ───────────────────────────────────────────────────

    def begin_drag(self) -> None:
        if self.enabled:
            self.tracker.begin_drag()

    def drag(
        self,
        dragged: ComponentBounds,
        layout: Sequence[ComponentBounds],
        *,
        snap: bool = True,
    ) -> DragUpdate:
        """Handle one drag-move snapshot.

        Snaps the dragged bounds, then proposes a layout with colliding
        neighbours pushed away.  Each call recomputes from *layout*.
        """
        if not self.enabled:
            return DragUpdate(dragged=dragged, layout=layout)
        snapped = self.snap(dragged) if snap else SnapResult(bounds=dragged)
        result = push_away(
            snapped.bounds, layout, self.grid.columns, self.space_making_config)
        self.tracker.set_space_making(result.affected)
        return DragUpdate(
            dragged=snapped.bounds,
            layout=result.layout,
            engaged_zones=snapped.engaged,
            affected=result.affected,
        )

    def apply_realtime_space_making(
        self, dragged: ComponentBounds, layout: Sequence[ComponentBounds],
    ) -> Sequence[ComponentBounds]:
        """Candidate layout for *dragged*'s live bounds; records affected ids."""
        if not self.enabled:
            return layout
        result = push_away(
            dragged, layout, self.grid.columns, self.space_making_config)
        self.tracker.set_space_making(result.affected)
        return result.layout

    def push_away(
        self,
        dragged: ComponentBounds,
        layout: Sequence[ComponentBounds],
        push_radius: int | None = None,
    ) -> Sequence[ComponentBounds]:
        """Push with an explicit radius under the configured strategy; state is not touched."""
        if not self.enabled:
            return layout
        cfg = self.space_making_config
        if push_radius is not None:
            cfg = dataclasses.replace(cfg, push_radius=push_radius)
        return push_away(dragged, layout, self.grid.columns, cfg).layout

    def clear_space_making(self) -> None:
        self.tracker.clear_space_making()

    def end_drag(self) -> None:
        """Pointer released; the caller commits its chosen layout."""
        if self.enabled:
            self.tracker.end_drag()

    def cancel_drag(self) -> None:
        """Drag aborted; the caller restores its pre-drag layout."""
        self.tracker.cancel_drag()

    def update_space_making_config(self, **changes) -> SpaceMakingConfig:
        self.space_making_config = dataclasses.replace(self.space_making_config, **changes)
        log.debug("Space-making config updated: %s", changes)
        return self.space_making_config

    # ── Animation ──────────────────────────────────────────────────

    def animate_component(self, component_id: str, duration_ms: int = 400) -> None:
        if self.enabled:
            self.tracker.animate(component_id, duration_ms)

    def get_transition(
        self, component_id: str, preset: str = "smooth",
    ) -> TransitionDescriptor | None:
        """How to animate *component_id*, or None if it is not moving.

        Components displaced by space-making carry their staggered delay.
        """
        if not self.enabled:
            return None
        state = self.tracker.snapshot()
        delay = None
        for a in state.affected_components:
            if a.id == component_id:
                delay = a.delay_ms
                break
        if delay is None and component_id not in state.animating_ids:
            return None
        cfg = get_animation_preset(preset)
        return TransitionDescriptor(
            id=component_id,
            duration_ms=cfg.duration_ms,
            easing=cfg.easing,
            properties=cfg.animated_properties,
            delay_ms=delay or 0,
        )

    def transitions(
        self, ids: Iterable[str], preset: str = "smooth",
    ) -> dict[str, TransitionDescriptor]:
        result = {}
        for cid in ids:
            t = self.get_transition(cid, preset)
            if t is not None:
                result[cid] = t
        return result

    # ── Lifecycle ──────────────────────────────────────────────────

    def close(self) -> None:
        """End of the editing session; cancels any pending clear."""
        self.tracker.close()
