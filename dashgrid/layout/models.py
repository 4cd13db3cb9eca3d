"""Layout dataclasses, errors and configuration presets."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from dashgrid.config import ENGINE_RULES


# ── Errors ─────────────────────────────────────────────────────────


class LayoutError(Exception):
    """Base class for layout engine errors."""


class GridConfigError(LayoutError):
    """Raised when a grid configuration cannot describe a grid."""


class LayoutParseError(LayoutError):
    """Raised when a serialized layout item is malformed."""

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"Layout item #{index}: {reason}")


# ── Grid geometry ──────────────────────────────────────────────────


@dataclass(frozen=True)
class GridConfig:
    """Column count and pixel metrics of the editing surface."""

    columns: int
    container_width: float      # px
    row_height: float           # px

    def __post_init__(self) -> None:
        if self.columns <= 0:
            raise GridConfigError(f"columns must be positive, got {self.columns}")
        if self.container_width <= 0:
            raise GridConfigError(
                f"container_width must be positive, got {self.container_width}")
        if self.row_height <= 0:
            raise GridConfigError(f"row_height must be positive, got {self.row_height}")

    @property
    def col_width(self) -> float:
        """Pixel width of one column."""
        return self.container_width / self.columns


@dataclass(frozen=True)
class Position:
    x: int
    y: int


@dataclass(frozen=True)
class Size:
    w: int
    h: int


@dataclass(frozen=True)
class ComponentBounds:
    """A widget's rectangle in grid units, with optional size limits."""

    id: str
    x: float
    y: float
    w: int
    h: int
    min_w: int | None = None
    max_w: int | None = None
    min_h: int | None = None
    max_h: int | None = None

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.w / 2, self.y + self.h / 2)

    @property
    def area(self) -> float:
        return self.w * self.h

    @property
    def size(self) -> Size:
        return Size(self.w, self.h)

    def moved_to(self, x: float, y: float) -> ComponentBounds:
        return replace(self, x=x, y=y)

    def resized(self, w: int, h: int) -> ComponentBounds:
        return replace(self, w=w, h=h)


# ── Snapping ───────────────────────────────────────────────────────

HORIZONTAL = "horizontal"   # aligns top/bottom edges (a y coordinate)
VERTICAL = "vertical"       # aligns left/right edges (an x coordinate)


@dataclass(frozen=True)
class SnapZone:
    """An alignment guide derived from existing component edges."""

    position: float                 # px along the zone's axis
    direction: str                  # HORIZONTAL or VERTICAL
    source_ids: tuple[str, ...]


@dataclass(frozen=True)
class SnapResult:
    """Snapped bounds plus the zones that actually pulled an edge."""

    bounds: ComponentBounds
    engaged: tuple[SnapZone, ...] = ()

    @property
    def snapped(self) -> bool:
        return bool(self.engaged)


# ── Placement ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class PlacementFailed:
    """Sentinel returned when no slot was found under the search ceiling.

    Falsy, so callers can write ``if not pos: ...``.
    """

    size: Size
    reason: str

    def __bool__(self) -> bool:
        return False


# ── Space-making ───────────────────────────────────────────────────


@dataclass(frozen=True)
class Displacement:
    dx: float
    dy: float


@dataclass(frozen=True)
class AffectedComponent:
    """A neighbour displaced to make room for a dragged component."""

    id: str
    displacement: Displacement
    cause_id: str
    delay_ms: int = 0


@dataclass(frozen=True)
class SpaceMakingResult:
    layout: list[ComponentBounds]
    affected: list[AffectedComponent] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return len(self.affected) > 0


@dataclass(frozen=True)
class DragUpdate:
    """Everything a drag-move produces for the caller to preview."""

    dragged: ComponentBounds                # snapped live bounds
    layout: list[ComponentBounds]           # candidate layout, dragged item untouched
    engaged_zones: tuple[SnapZone, ...] = ()
    affected: list[AffectedComponent] = field(default_factory=list)


SINGLE_PASS = "single-pass"
CASCADE = "cascade"


@dataclass(frozen=True)
class SpaceMakingConfig:
    """Push-away behaviour while a component is dragged."""

    enabled: bool = True
    push_radius: int = 2            # grid units per push
    max_push_distance: int = 4      # cap on a single item's displacement per axis
    strategy: str = SINGLE_PASS     # SINGLE_PASS or CASCADE
    cascade_depth: int = 2          # extra passes for CASCADE
    stagger_ms: int = 100           # delay between successive affected highlights

    def __post_init__(self) -> None:
        if self.strategy not in (SINGLE_PASS, CASCADE):
            raise LayoutError(f"Unknown space-making strategy '{self.strategy}'")


DEFAULT_SPACE_MAKING_CONFIG = SpaceMakingConfig()


# ── Auto-arrange ───────────────────────────────────────────────────

PRESERVE_ORDER = "preserve-order"
READING_ORDER = "reading-order"
SIZE_ORDER = "size-order"           # largest area first, then reading order

SORT_ORDERS = (PRESERVE_ORDER, READING_ORDER, SIZE_ORDER)

PACK = "pack"                       # first-fit into the lowest free slot
FLOW = "flow"                       # left-aligned rows, wrapped at the grid edge
DISTRIBUTE = "distribute"           # rows like FLOW, free columns spread between items

ALGORITHMS = (PACK, FLOW, DISTRIBUTE)


@dataclass(frozen=True)
class AutoArrangeOptions:
    gutter: int = 0                 # empty grid units kept between items
    sort_order: str = READING_ORDER
    animation_duration_ms: int = 400
    algorithm: str = PACK

    def __post_init__(self) -> None:
        if self.sort_order not in SORT_ORDERS:
            raise LayoutError(f"Unknown sort order '{self.sort_order}'")
        if self.algorithm not in ALGORITHMS:
            raise LayoutError(f"Unknown arrange algorithm '{self.algorithm}'")
        if self.gutter < 0:
            raise LayoutError(f"gutter must be >= 0, got {self.gutter}")


AUTO_ARRANGE_PRESETS: dict[str, AutoArrangeOptions] = {
    "dashboard": AutoArrangeOptions(
        gutter=0, sort_order=READING_ORDER, animation_duration_ms=400),
    "presentation": AutoArrangeOptions(
        gutter=1, sort_order=READING_ORDER, animation_duration_ms=600,
        algorithm=DISTRIBUTE),
    "dense": AutoArrangeOptions(
        gutter=0, sort_order=SIZE_ORDER, animation_duration_ms=300),
    "flow": AutoArrangeOptions(
        gutter=0, sort_order=READING_ORDER, animation_duration_ms=500,
        algorithm=FLOW),
}


# ── Animation ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class AnimationConfig:
    duration_ms: int
    easing: str
    animated_properties: tuple[str, ...] = ("transform", "width", "height")
    stagger_ms: int = 0


ANIMATION_PRESETS: dict[str, AnimationConfig] = {
    # spring-like overshoot
    "smooth": AnimationConfig(400, "cubic-bezier(0.34, 1.56, 0.64, 1)", stagger_ms=50),
    # material standard curve
    "fast": AnimationConfig(200, "cubic-bezier(0.4, 0, 0.2, 1)", stagger_ms=25),
    # ease-out-quad
    "slow": AnimationConfig(600, "cubic-bezier(0.25, 0.46, 0.45, 0.94)", stagger_ms=100),
}


@dataclass(frozen=True)
class TransitionDescriptor:
    """How the rendering layer should animate one component's move."""

    id: str
    duration_ms: int
    easing: str
    properties: tuple[str, ...]
    delay_ms: int = 0


class Phase(str, Enum):
    IDLE = "idle"
    ARRANGING = "arranging"
    DRAGGING = "dragging"


@dataclass
class AnimationState:
    """Transient highlight bookkeeping for one editing session."""

    phase: Phase = Phase.IDLE
    is_animating: bool = False
    animating_ids: set[str] = field(default_factory=set)
    snap_zones: list[SnapZone] = field(default_factory=list)
    affected_components: list[AffectedComponent] = field(default_factory=list)
    space_making_active: bool = False


# ── Configuration ──────────────────────────────────────────────────

SNAP_THRESHOLD_PX = ENGINE_RULES.snap_threshold_px
CLEAR_PADDING_MS = ENGINE_RULES.clear_padding_ms
MAX_SEARCH_ROWS = ENGINE_RULES.max_search_rows
MAX_ARRANGE_PASSES = ENGINE_RULES.max_arrange_passes


def get_arrange_preset(name: str) -> AutoArrangeOptions:
    try:
        return AUTO_ARRANGE_PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown auto-arrange preset '{name}'; "
            f"known: {sorted(AUTO_ARRANGE_PRESETS)}") from None


def get_animation_preset(name: str) -> AnimationConfig:
    try:
        return ANIMATION_PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown animation preset '{name}'; "
            f"known: {sorted(ANIMATION_PRESETS)}") from None
