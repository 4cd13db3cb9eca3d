"""Layout — positions, snaps, arranges and pushes dashboard widgets.

Submodules:
  models         Dataclasses, errors and presets.
  grid           px <-> grid-unit conversion, round-half-up, bounds clamping.
  geometry       AABB overlap helpers and the STRtree collision index.
  snapping       Snap-zone derivation and magnetic snapping.
  placement      First-fit position finder.
  arrange        Auto-arranger (first-fit packing, flow and distributed rows).
  space_making   Push-away resolver for live drags.
  scheduling     Cancellable delayed calls (threaded and manual clocks).
  animation      Per-session animation state tracker.
  engine         LayoutEngine, the session-owned entry point.
  serialization  JSON conversion (layout_to_dicts, parse_layout, ...).
"""

from .models import (
    GridConfig, ComponentBounds, Position, Size,
    SnapZone, SnapResult, Displacement, AffectedComponent, SpaceMakingResult,
    DragUpdate, PlacementFailed, TransitionDescriptor,
    AnimationConfig, SpaceMakingConfig, AutoArrangeOptions, AnimationState, Phase,
    LayoutError, GridConfigError, LayoutParseError,
    ANIMATION_PRESETS, AUTO_ARRANGE_PRESETS, SNAP_THRESHOLD_PX,
)
from .grid import round_half_up, normalize_bounds, normalize_layout
from .geometry import overlap, collides, layout_overlaps
from .snapping import calculate_snap_zones, apply_magnetic_snap, zones_near
from .placement import find_optimal_position
from .arrange import auto_arrange
from .space_making import push_away
from .scheduling import ManualScheduler, ThreadingScheduler
from .animation import AnimationTracker
from .engine import LayoutEngine
from .serialization import layout_to_dicts, parse_layout

__all__ = [
    # Models
    "GridConfig", "ComponentBounds", "Position", "Size",
    "SnapZone", "SnapResult", "Displacement", "AffectedComponent",
    "SpaceMakingResult", "DragUpdate", "PlacementFailed", "TransitionDescriptor",
    "AnimationConfig", "SpaceMakingConfig", "AutoArrangeOptions",
    "AnimationState", "Phase",
    "LayoutError", "GridConfigError", "LayoutParseError",
    "ANIMATION_PRESETS", "AUTO_ARRANGE_PRESETS", "SNAP_THRESHOLD_PX",
    # Grid model
    "round_half_up", "normalize_bounds", "normalize_layout",
    "overlap", "collides", "layout_overlaps",
    # Algorithms
    "calculate_snap_zones", "apply_magnetic_snap", "zones_near",
    "find_optimal_position", "auto_arrange", "push_away",
    # Session
    "ManualScheduler", "ThreadingScheduler", "AnimationTracker", "LayoutEngine",
    # Serialization
    "layout_to_dicts", "parse_layout",
]
