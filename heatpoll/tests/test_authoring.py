from datetime import date

import pytest

from heatpoll.authoring import BallotDraft, EventDraft
from heatpoll.grid import HOURS
from heatpoll.models.poll import Rating


class TestEventDraft:
    def test_default_window(self):
        draft = EventDraft(today=date(2024, 3, 1))
        assert draft.start == "2024-03-01"
        assert draft.end == "2024-03-14"
        assert len(draft.dates) == 14

    def test_blocked_until_name_and_slots(self):
        draft = EventDraft(today=date(2024, 3, 1))
        assert not draft.can_submit
        assert draft.blocked_reasons() == ["name is required", "select at least one time slot"]
        draft.name = "   "
        draft.session.pointer_down("2024-03-01:9")
        draft.session.pointer_up()
        assert draft.blocked_reasons() == ["name is required"]
        with pytest.raises(ValueError):
            draft.payload()
        draft.name = "Team Dinner"
        assert draft.can_submit

    def test_payload_is_trimmed_and_sorted(self):
        draft = EventDraft(today=date(2024, 3, 1))
        draft.name = "  Team Dinner "
        draft.description = " pizza "
        draft.session.pointer_down("2024-03-02:10")
        draft.session.pointer_enter("2024-03-01:10")
        draft.session.pointer_enter("2024-03-01:9")
        draft.session.pointer_up()
        payload = draft.payload()
        assert payload.name == "Team Dinner"
        assert payload.description == "pizza"
        assert payload.slots == ["2024-03-01:9", "2024-03-01:10", "2024-03-02:10"]

    def test_select_all_and_clear(self):
        draft = EventDraft(today=date(2024, 3, 1), span_days=2)
        draft.select_all()
        assert len(draft.selection) == 2 * len(HOURS)
        draft.clear_all()
        assert len(draft.selection) == 0


class TestBallotDraft:
    SLOTS = ["2024-03-01:9", "2024-03-01:10"]

    def test_blocked_without_name(self):
        ballot = BallotDraft("evt1", self.SLOTS)
        assert not ballot.can_submit
        ballot.voter_name = "A"
        assert ballot.can_submit

    def test_empty_ballot_is_allowed(self):
        ballot = BallotDraft("evt1", self.SLOTS)
        ballot.voter_name = "A"
        assert ballot.payload().ratings == []

    def test_payload_from_painting(self):
        ballot = BallotDraft("evt1", self.SLOTS)
        ballot.voter_name = " B "
        ballot.set_brush("good")
        ballot.session.pointer_down("2024-03-01:9")
        ballot.session.pointer_up()
        ballot.set_brush(Rating.FINE)
        ballot.session.pointer_down("2024-03-01:10")
        ballot.session.pointer_up()
        payload = ballot.payload()
        assert payload.event_id == "evt1"
        assert payload.voter_name == "B"
        assert [(r.slot, r.rating) for r in payload.ratings] == [
            ("2024-03-01:9", Rating.GOOD),
            ("2024-03-01:10", Rating.FINE),
        ]

    def test_none_brush(self):
        ballot = BallotDraft("evt1", self.SLOTS)
        ballot.set_brush("none")
        assert ballot.brush is None
        ballot.session.toggle_column("2024-03-01")
        assert len(ballot.selection) == 0
        assert ballot.dates == ["2024-03-01"]


def test_drafts_from_settings():
    from heatpoll.config import PollSettings

    poll = PollSettings(default_span_days=3, touch_cooldown_ms=200)
    draft = EventDraft.from_settings(poll, today=date(2024, 3, 1))
    assert draft.dates == ["2024-03-01", "2024-03-02", "2024-03-03"]
    assert draft.session.touch_cooldown == 0.2

    ballot = BallotDraft.from_settings(poll, "evt1", ["2024-03-01:9"])
    assert ballot.session.touch_cooldown == 0.2
    assert ballot.brush is Rating.GREAT
