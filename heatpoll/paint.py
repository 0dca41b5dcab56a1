"""Paint session: the drag-to-paint gesture state machine.

A session is either IDLE or PAINTING. Pressing on an active cell captures a
single effective action for the whole gesture (erase when the pressed cell
already holds the brush value, otherwise paint the brush) and replays it on
every cell entered until the gesture is released. Release handlers are meant
to be wired at document scope so that a release outside the grid still ends
the gesture.

Usage:
    selection = RatingSelection(event.slots)
    session = PaintSession(selection, brush=Rating.GREAT, active_slots=event.slots)
    session.pointer_down("2024-03-01:9")
    session.pointer_enter("2024-03-01:10")
    session.pointer_up()
"""

import logging
import time
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, NamedTuple

from heatpoll.grid import column_slots
from heatpoll.selection import CLEAR, PaintAction, Selection

logger = logging.getLogger("heatpoll.paint")

DEFAULT_TOUCH_COOLDOWN_SEC = 0.5


class PaintState(str, Enum):
    IDLE = "idle"
    PAINTING = "painting"


class InputSource(str, Enum):
    POINTER = "pointer"
    TOUCH = "touch"


class PaintEdit(NamedTuple):
    slot: str
    action: PaintAction


class PaintSession:
    def __init__(
        self,
        selection: Selection,
        brush: Any = None,
        active_slots: Iterable[str] | None = None,
        touch_cooldown: float = DEFAULT_TOUCH_COOLDOWN_SEC,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.selection = selection
        self.brush = brush
        self.active_slots = frozenset(active_slots) if active_slots is not None else None
        self.touch_cooldown = touch_cooldown
        self._clock = clock
        self._state = PaintState.IDLE
        self._action: PaintAction | None = None
        self._source: InputSource | None = None
        self._last_slot: str | None = None
        self._touch_released_at: float | None = None

    @property
    def state(self) -> PaintState:
        return self._state

    @property
    def painting(self) -> bool:
        return self._state is PaintState.PAINTING

    @property
    def effective_action(self) -> PaintAction | None:
        """Action captured at gesture start; ``None`` while idle."""
        return self._action

    def is_active(self, slot: str) -> bool:
        return self.active_slots is None or slot in self.active_slots

    def pointer_down(self, slot: str) -> list[PaintEdit]:
        if self._in_touch_cooldown():
            logger.debug("paint.pointer_down suppressed after touch slot=%s", slot)
            return []
        return self._begin(slot, InputSource.POINTER)

    def pointer_enter(self, slot: str) -> list[PaintEdit]:
        return self._continue(slot)

    def pointer_leave(self, slot: str | None = None) -> None:
        if slot is None or slot == self._last_slot:
            self._last_slot = None

    def pointer_up(self) -> bool:
        return self._end()

    def touch_start(self, slot: str) -> list[PaintEdit]:
        return self._begin(slot, InputSource.TOUCH)

    def touch_move(self, slot: str | None) -> list[PaintEdit]:
        """Handle a move to the cell under the finger; ``None`` when off-grid."""
        if slot is None:
            return []
        return self._continue(slot)

    def touch_end(self) -> bool:
        return self._end()

    def touch_cancel(self) -> bool:
        return self._end()

    def toggle_column(self, date: str) -> list[PaintEdit]:
        """Clear the column if it already uniformly holds the brush, else paint it.

        Only active cells of the column take part.
        """
        cells = column_slots(date, self.active_slots)
        uniform = all(self.selection.value_of(s) == self.brush for s in cells)
        action = CLEAR if uniform else PaintAction(self.brush)
        edits = []
        for slot in cells:
            if self.selection.value_of(slot) == action.value:
                continue
            self.selection.apply(slot, action)
            edits.append(PaintEdit(slot, action))
        logger.debug("paint.toggle_column date=%s clears=%s edits=%d", date, action.clears, len(edits))
        return edits

    def _begin(self, slot: str, source: InputSource) -> list[PaintEdit]:
        if self._state is PaintState.PAINTING:
            logger.debug("paint.begin ignored, gesture already active slot=%s", slot)
            return []
        if not self.is_active(slot):
            return []
        current = self.selection.value_of(slot)
        self._action = CLEAR if current == self.brush else PaintAction(self.brush)
        self._state = PaintState.PAINTING
        self._source = source
        logger.debug("paint.begin source=%s slot=%s clears=%s", source.value, slot, self._action.clears)
        return [self._apply(slot)]

    def _continue(self, slot: str) -> list[PaintEdit]:
        if self._state is not PaintState.PAINTING:
            return []
        if slot == self._last_slot or not self.is_active(slot):
            return []
        return [self._apply(slot)]

    def _apply(self, slot: str) -> PaintEdit:
        assert self._action is not None
        self.selection.apply(slot, self._action)
        self._last_slot = slot
        return PaintEdit(slot, self._action)

    def _end(self) -> bool:
        if self._state is PaintState.IDLE:
            return False
        if self._source is InputSource.TOUCH:
            self._touch_released_at = self._clock()
        logger.debug("paint.end source=%s", self._source.value if self._source else None)
        self._state = PaintState.IDLE
        self._action = None
        self._source = None
        self._last_slot = None
        return True

    def _in_touch_cooldown(self) -> bool:
        if self._touch_released_at is None:
            return False
        return self._clock() - self._touch_released_at < self.touch_cooldown
