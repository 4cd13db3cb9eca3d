"""Shared engine constants for the dashboard layout engine.

These values describe how the editing surface behaves regardless of the
dashboard being edited: how close an edge must come to a guide before
it is pulled in, how long a highlight outlives its animation, and how
far the placement search may run before it gives up.  The snapping,
placement and animation modules all derive their defaults from this
single source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineRules:
    """Engine-wide interaction rules.

    Pixel values are screen pixels, row values are grid rows.
    """

    snap_threshold_px: float = 10.0
    """Maximum edge-to-guide distance that still snaps (inclusive)."""

    clear_padding_ms: int = 100
    """Extra time an id stays marked as animating after its
    transition duration has elapsed."""

    max_search_rows: int = 10_000
    """Hard cap on the number of rows the position finder scans."""

    max_arrange_passes: int = 8
    """Cap on re-placement passes used to reach a stable arrangement
    for position-dependent sort orders."""


# Module-level singleton, imported by the layout modules.
ENGINE_RULES = EngineRules()
