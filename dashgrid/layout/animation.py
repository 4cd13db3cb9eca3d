"""Animation state tracker — transient highlight bookkeeping.

Phases::

    IDLE --start_arranging--> ARRANGING --(clear task fires)--> IDLE
    IDLE --begin_drag-------> DRAGGING  --end_drag / cancel_drag--> IDLE

Animating ids are cleared by a single-slot scheduled task.  Scheduling
a new clear always cancels the pending one first, so no stale clear can
fire later.  A new arrangement replaces the ids and restarts the clock
at ``duration + padding`` from now; ``animate`` adds an id and only ever
extends the pending deadline, so the ids already highlighted never lose
their highlight early.
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Iterable

from .models import (
    AffectedComponent, AnimationState, Phase, SnapZone,
    CLEAR_PADDING_MS,
)
from .scheduling import ScheduledTask, Scheduler, ThreadingScheduler


log = logging.getLogger(__name__)


class AnimationTracker:
    """Owns one session's ``AnimationState`` and its pending clear task."""

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        clear_padding_ms: int = CLEAR_PADDING_MS,
    ) -> None:
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self._clear_padding_ms = clear_padding_ms
        # Timer callbacks arrive on another thread with ThreadingScheduler.
        self._lock = threading.RLock()
        self._state = AnimationState()
        self._pending: ScheduledTask | None = None
        self._token: object | None = None
        self._deadline: float | None = None

    # ── Queries ────────────────────────────────────────────────────

    def snapshot(self) -> AnimationState:
        """A deep copy of the current state."""
        with self._lock:
            return copy.deepcopy(self._state)

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def is_animating(self) -> bool:
        return self._state.is_animating

    @property
    def animating_ids(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._state.animating_ids)

    @property
    def has_pending_clear(self) -> bool:
        with self._lock:
            return self._pending is not None

    def is_component_animating(self, component_id: str) -> bool:
        with self._lock:
            return component_id in self._state.animating_ids

    # ── Timed highlighting ─────────────────────────────────────────

    def start_arranging(self, ids: Iterable[str], duration_ms: int) -> None:
        """Mark *ids* animating until ``duration_ms`` plus padding has passed.

        Replaces the ids of any earlier arrangement, and with them its
        pending clear: the new deadline counts from now.
        """
        with self._lock:
            self._state.animating_ids = set(ids)
            self._state.is_animating = bool(self._state.animating_ids)
            if self._state.phase != Phase.DRAGGING:
                self._state.phase = Phase.ARRANGING
            self._schedule_clear(duration_ms + self._clear_padding_ms, extend=False)
            log.debug("Arranging %d component(s) for %d ms",
                      len(self._state.animating_ids), duration_ms)

    def animate(self, component_id: str, duration_ms: int) -> None:
        """Mark one component animating for *duration_ms*."""
        with self._lock:
            self._state.animating_ids.add(component_id)
            self._state.is_animating = True
            self._schedule_clear(duration_ms)

    def _schedule_clear(self, delay_ms: float, extend: bool = True) -> None:
        """Re-arm the clear slot.  With *extend*, never move the deadline earlier."""
        now = self._scheduler.now()
        deadline = now + delay_ms / 1000.0
        if self._pending is not None:
            if extend and self._deadline is not None:
                deadline = max(deadline, self._deadline)
            self._pending.cancel()
        token = object()
        self._token = token
        self._deadline = deadline
        self._pending = self._scheduler.call_later(
            deadline - now, lambda: self._on_clear_due(token))

    def _on_clear_due(self, token: object) -> None:
        with self._lock:
            if token is not self._token:
                return  # superseded or cancelled
            self._reset_pending()
            self._state.animating_ids = set()
            self._state.is_animating = False
            if self._state.phase == Phase.ARRANGING:
                self._state.phase = Phase.IDLE
            log.debug("Animation highlight cleared")

    def _reset_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
        self._pending = None
        self._token = None
        self._deadline = None

    # ── Snap zones ─────────────────────────────────────────────────

    def set_snap_zones(self, zones: Iterable[SnapZone]) -> None:
        with self._lock:
            self._state.snap_zones = list(zones)

    # ── Dragging ───────────────────────────────────────────────────

    def begin_drag(self) -> None:
        with self._lock:
            self._state.phase = Phase.DRAGGING

    def set_space_making(self, affected: Iterable[AffectedComponent]) -> None:
        with self._lock:
            self._state.affected_components = list(affected)
            self._state.space_making_active = bool(self._state.affected_components)

    def clear_space_making(self) -> None:
        with self._lock:
            self._state.affected_components = []
            self._state.space_making_active = False

    def end_drag(self) -> None:
        """Drop: space-making preview ends, timed highlights carry on."""
        with self._lock:
            self.clear_space_making()
            if self._state.phase == Phase.DRAGGING:
                self._state.phase = Phase.ARRANGING if self._pending else Phase.IDLE

    def cancel_drag(self) -> None:
        """Abort: clear every transient highlight now, without a timer."""
        self.clear()
        log.debug("Drag cancelled, animation state cleared")

    def clear(self) -> None:
        """Synchronously drop all transient state and the pending task."""
        with self._lock:
            self._reset_pending()
            self._state.animating_ids = set()
            self._state.is_animating = False
            self._state.affected_components = []
            self._state.space_making_active = False
            self._state.phase = Phase.IDLE

    def close(self) -> None:
        """End of session: nothing may fire after this."""
        self.clear()
