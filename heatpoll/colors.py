"""Color mapping for grid cells.

Two modes: a highlighted voter's own rating, or the aggregated consensus.
Consensus colors blend between a muddy green (average goodness 1) and a
bright green (average goodness 3); any slot someone cannot make is neutral.
"""

import math
from typing import Final, NamedTuple

from heatpoll.models.poll import Rating, SlotConsensus


class Color(NamedTuple):
    red: int
    green: int
    blue: int

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        value = value.lstrip("#")
        return cls(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))

    @property
    def hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    def css(self) -> str:
        return f"rgb({self.red}, {self.green}, {self.blue})"


RATING_COLORS: Final[dict[Rating, Color]] = {
    Rating.GREAT: Color.from_hex("#22c55e"),
    Rating.GOOD: Color.from_hex("#65a30d"),
    Rating.FINE: Color.from_hex("#8b8b3b"),
}
NEUTRAL: Final[Color] = Color.from_hex("#d1d5db")
LOW_CONSENSUS: Final[Color] = Color(139, 139, 59)
HIGH_CONSENSUS: Final[Color] = Color(34, 197, 94)
SELECTED: Final[Color] = Color.from_hex("#3b82f6")
UNSELECTED: Final[Color] = Color.from_hex("#e5e7eb")


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def interpolate(low: Color, high: Color, t: float) -> Color:
    t = max(0.0, min(1.0, t))
    return Color(*(_round_half_up(a + (b - a) * t) for a, b in zip(low, high)))


def voter_color(rating: Rating | None) -> Color:
    if rating is None:
        return NEUTRAL
    return RATING_COLORS[Rating(rating)]


def consensus_color(result: SlotConsensus | None, active_voter_count: int) -> Color:
    if result is None or active_voter_count == 0 or not result.all_can_make:
        return NEUTRAL
    return interpolate(LOW_CONSENSUS, HIGH_CONSENSUS, (result.avg_goodness - 1) / 2)


def cant_indicator(result: SlotConsensus | None, highlighted: bool = False) -> int:
    """Number of unavailable markers to draw on a cell; 0 in highlight mode."""
    if highlighted or result is None:
        return 0
    return result.cant_count


def selection_color(selected: bool) -> Color:
    return SELECTED if selected else UNSELECTED
