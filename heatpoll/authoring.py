"""Editing-view state for the two authoring flows.

``EventDraft`` is the organizer's create-event form: name, description, a
date window and the painted candidate slots. ``BallotDraft`` is a voter's
form: a name and the painted ratings for one event. Neither raises for an
incomplete form; ``can_submit`` is the gate, and ``payload`` builds the
canonical request once the gate is open.
"""

import time
from collections.abc import Callable
from datetime import date, timedelta

from heatpoll.config import PollSettings
from heatpoll.grid import dates_between, date_range
from heatpoll.models.poll import CreateEventRequest, Rating, SubmitVoteRequest
from heatpoll.paint import DEFAULT_TOUCH_COOLDOWN_SEC, PaintSession
from heatpoll.selection import RatingSelection, SlotSelection

DEFAULT_SPAN_DAYS = 14


class EventDraft:
    def __init__(
        self,
        today: date | None = None,
        span_days: int = DEFAULT_SPAN_DAYS,
        touch_cooldown: float = DEFAULT_TOUCH_COOLDOWN_SEC,
    ) -> None:
        today = today or date.today()
        self.name = ""
        self.description = ""
        self.start = today.isoformat()
        self.end = (today + timedelta(days=span_days - 1)).isoformat()
        self.selection = SlotSelection()
        self.session = PaintSession(self.selection, brush=SlotSelection.BRUSH, touch_cooldown=touch_cooldown)

    @classmethod
    def from_settings(cls, poll: PollSettings, today: date | None = None) -> "EventDraft":
        return cls(today=today, span_days=poll.default_span_days, touch_cooldown=poll.touch_cooldown_sec)

    @property
    def dates(self) -> list[str]:
        return dates_between(self.start, self.end)

    def select_all(self) -> None:
        self.selection.select_all(self.dates)

    def clear_all(self) -> None:
        self.selection.clear_all()

    def blocked_reasons(self) -> list[str]:
        reasons = []
        if not self.name.strip():
            reasons.append("name is required")
        if len(self.selection) == 0:
            reasons.append("select at least one time slot")
        return reasons

    @property
    def can_submit(self) -> bool:
        return not self.blocked_reasons()

    def payload(self) -> CreateEventRequest:
        reasons = self.blocked_reasons()
        if reasons:
            raise ValueError("; ".join(reasons))
        return CreateEventRequest(
            name=self.name.strip(),
            description=self.description.strip(),
            slots=self.selection.sorted_slots(),
        )


class BallotDraft:
    def __init__(
        self,
        event_id: str,
        event_slots: list[str],
        brush: Rating | None = Rating.GREAT,
        touch_cooldown: float = DEFAULT_TOUCH_COOLDOWN_SEC,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.event_id = event_id
        self.voter_name = ""
        self.dates = date_range(event_slots)
        self.selection = RatingSelection(event_slots)
        self.session = PaintSession(
            self.selection,
            brush=brush,
            active_slots=event_slots,
            touch_cooldown=touch_cooldown,
            clock=clock or time.monotonic,
        )

    @classmethod
    def from_settings(cls, poll: PollSettings, event_id: str, event_slots: list[str]) -> "BallotDraft":
        return cls(event_id, event_slots, touch_cooldown=poll.touch_cooldown_sec)

    @property
    def brush(self) -> Rating | None:
        return self.session.brush

    def set_brush(self, brush: Rating | str | None) -> None:
        """Pick the paint value; ``None`` or ``"none"`` paints unavailability."""
        self.session.brush = None if brush in (None, "none") else Rating(brush)

    def blocked_reasons(self) -> list[str]:
        return [] if self.voter_name.strip() else ["name is required"]

    @property
    def can_submit(self) -> bool:
        return not self.blocked_reasons()

    def payload(self) -> SubmitVoteRequest:
        reasons = self.blocked_reasons()
        if reasons:
            raise ValueError("; ".join(reasons))
        return SubmitVoteRequest(
            event_id=self.event_id,
            voter_name=self.voter_name.strip(),
            ratings=self.selection.ratings(),
        )
