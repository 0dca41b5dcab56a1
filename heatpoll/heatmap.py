"""Results view state: hidden voters, highlighted voter, and per-cell output.

Every change to the vote set or to the hidden-voter set recomputes the whole
aggregation; the highlighted voter only changes how cells are colored.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from heatpoll.aggregate import active_votes, aggregate
from heatpoll.colors import Color, cant_indicator, consensus_color, voter_color
from heatpoll.grid import HOURS, date_range, format_hour, parse_slot_key, slot_key, sort_slots
from heatpoll.models.poll import HeatmapCell, Rating, SlotConsensus, Vote, VoterEntry

logger = logging.getLogger("heatpoll.heatmap")


def slot_label(slot: str) -> str:
    """Human label such as ``"Fri, Mar 1 at 9 AM"``."""
    parsed = parse_slot_key(slot)
    day = date.fromisoformat(parsed.date)
    return f"{day:%a}, {day:%b} {day.day} at {format_hour(parsed.hour)}"


class Heatmap:
    def __init__(
        self,
        event_slots: Iterable[str],
        votes: Sequence[Vote] = (),
        hidden: Iterable[str] = (),
    ) -> None:
        self.slots = sort_slots(event_slots)
        self.dates = date_range(self.slots)
        self._votes: list[Vote] = list(votes)
        self._hidden: set[str] = set(hidden)
        self.highlighted: str | None = None
        self._highlighted_ratings: dict[str, Rating] = {}
        self.results: dict[str, SlotConsensus] = {}
        self._recompute()

    @property
    def votes(self) -> list[Vote]:
        return list(self._votes)

    @property
    def hidden(self) -> frozenset[str]:
        return frozenset(self._hidden)

    @property
    def active_voter_count(self) -> int:
        return len(active_votes(self._votes, self._hidden))

    def set_votes(self, votes: Sequence[Vote]) -> None:
        self._votes = list(votes)
        self.highlight(self.highlighted)
        self._recompute()

    def toggle_voter(self, name: str) -> bool:
        """Flip a voter's visibility; returns whether the voter is now visible."""
        if name in self._hidden:
            self._hidden.discard(name)
        else:
            self._hidden.add(name)
        self._recompute()
        return name not in self._hidden

    def set_hidden(self, names: Iterable[str]) -> None:
        self._hidden = set(names)
        self._recompute()

    def highlight(self, name: str | None) -> None:
        """Color cells by one voter's own ratings (first record under that name)."""
        self.highlighted = name
        vote = next((v for v in self._votes if v.voter_name == name), None) if name is not None else None
        self._highlighted_ratings = vote.rating_map() if vote else {}

    def voters(self) -> list[VoterEntry]:
        return [VoterEntry(name=v.voter_name, visible=v.voter_name not in self._hidden) for v in self._votes]

    def cell_color(self, slot: str) -> Color:
        if self.highlighted is not None:
            return voter_color(self._highlighted_ratings.get(slot))
        return consensus_color(self.results.get(slot), self.active_voter_count)

    def cell_detail(self, slot: str) -> dict:
        result = self.results.get(slot) or SlotConsensus()
        return {
            "label": slot_label(slot),
            "voters": [r.model_dump(mode="json") for r in result.voter_ratings],
        }

    def cells(self) -> list[HeatmapCell]:
        highlighted = self.highlighted is not None
        cells = []
        for slot in self.slots:
            parsed = parse_slot_key(slot)
            result = self.results[slot]
            cells.append(
                HeatmapCell(
                    slot=slot,
                    date=parsed.date,
                    hour=parsed.hour,
                    color=self.cell_color(slot).hex,
                    cant_indicator=cant_indicator(result, highlighted),
                    consensus=result,
                )
            )
        return cells

    def rows(self) -> list[list[HeatmapCell | None]]:
        """Cells laid out hour-major for a grid, ``None`` for non-candidate cells."""
        by_slot = {c.slot: c for c in self.cells()}
        return [[by_slot.get(slot_key(d, h)) for d in self.dates] for h in HOURS]

    def _recompute(self) -> None:
        self.results = aggregate(self.slots, self._votes, self._hidden)
        logger.debug("heatmap.recompute slots=%d votes=%d hidden=%d", len(self.slots), len(self._votes), len(self._hidden))
