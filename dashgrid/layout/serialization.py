"""Layout serialization — JSON-safe dicts.

Layout items use the react-grid-layout shape the dashboard editor
stores (``i``, ``x``, ``y``, ``w``, ``h`` and optional ``minW``,
``maxW``, ``minH``, ``maxH``).
"""

from __future__ import annotations

from typing import Iterable

from .models import (
    AffectedComponent, ComponentBounds, DragUpdate, LayoutParseError,
    SnapZone, TransitionDescriptor,
)

_LIMIT_KEYS = (("min_w", "minW"), ("max_w", "maxW"), ("min_h", "minH"), ("max_h", "maxH"))


def bounds_to_dict(b: ComponentBounds) -> dict:
    d = {"i": b.id, "x": b.x, "y": b.y, "w": b.w, "h": b.h}
    for attr, key in _LIMIT_KEYS:
        value = getattr(b, attr)
        if value is not None:
            d[key] = value
    return d


def layout_to_dicts(layout: Iterable[ComponentBounds]) -> list[dict]:
    """Serialize a layout for the save API."""
    return [bounds_to_dict(b) for b in layout]


def _number(item: dict, key: str, index: int) -> float:
    if key not in item:
        raise LayoutParseError(index, f"missing '{key}'")
    value = item[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LayoutParseError(index, f"'{key}' must be a number, got {value!r}")
    return value


def parse_layout(data: list) -> list[ComponentBounds]:
    """Parse a list of react-grid-layout items into ComponentBounds.

    Raises
    ------
    LayoutParseError
        If an item is not a dict, lacks a key, or has a non-numeric
        coordinate.
    """
    result: list[ComponentBounds] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise LayoutParseError(index, f"expected an object, got {type(item).__name__}")
        if "i" not in item:
            raise LayoutParseError(index, "missing 'i'")
        limits = {
            attr: int(item[key]) for attr, key in _LIMIT_KEYS
            if item.get(key) is not None
        }
        result.append(ComponentBounds(
            id=str(item["i"]),
            x=_number(item, "x", index),
            y=_number(item, "y", index),
            w=_number(item, "w", index),
            h=_number(item, "h", index),
            **limits,
        ))
    return result


def snap_zone_to_dict(z: SnapZone) -> dict:
    return {
        "position": z.position,
        "direction": z.direction,
        "sourceIds": list(z.source_ids),
    }


def affected_to_dict(a: AffectedComponent) -> dict:
    return {
        "id": a.id,
        "displacement": {"dx": a.displacement.dx, "dy": a.displacement.dy},
        "causeId": a.cause_id,
        "delayMs": a.delay_ms,
    }


def transition_to_dict(t: TransitionDescriptor) -> dict:
    """Descriptor plus the CSS strings the rendering layer applies."""
    css = f"all {t.duration_ms}ms {t.easing}"
    if t.delay_ms:
        css += f" {t.delay_ms}ms"
    return {
        "id": t.id,
        "durationMs": t.duration_ms,
        "easing": t.easing,
        "properties": list(t.properties),
        "delayMs": t.delay_ms,
        "transition": css,
        "willChange": ", ".join(t.properties),
    }


def drag_update_to_dict(u: DragUpdate) -> dict:
    return {
        "dragged": bounds_to_dict(u.dragged),
        "layout": layout_to_dicts(u.layout),
        "snapZones": [snap_zone_to_dict(z) for z in u.engaged_zones],
        "affected": [affected_to_dict(a) for a in u.affected],
    }
