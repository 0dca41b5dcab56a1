"""Selection model: the per-session state a paint session writes into.

``SlotSelection`` backs the organizer's candidate-slot authoring flow,
``RatingSelection`` the voter's rating flow. Iteration order is irrelevant
internally; serialization always sorts ascending by ``(date, hour)``.
"""

import abc
from collections.abc import Iterable, Iterator
from typing import Any, NamedTuple

from heatpoll.grid import full_grid, sort_slots
from heatpoll.models.poll import Rating, RatingEntry


class PaintAction(NamedTuple):
    """Value to write into a cell; ``None`` clears it."""

    value: Any = None

    @property
    def clears(self) -> bool:
        return self.value is None


CLEAR = PaintAction(None)


class Selection(abc.ABC):
    @abc.abstractmethod
    def value_of(self, slot: str) -> Any:
        """Current value of a cell, or ``None`` when the cell is empty."""

    @abc.abstractmethod
    def apply(self, slot: str, action: PaintAction) -> None:
        """Write one paint action into a cell."""

    @abc.abstractmethod
    def clear_all(self) -> None:
        pass

    @abc.abstractmethod
    def __len__(self) -> int:
        pass


class SlotSelection(Selection):
    """Set of chosen slot keys; a selected cell holds the value ``True``."""

    BRUSH = True

    def __init__(self, slots: Iterable[str] = ()) -> None:
        self._slots: set[str] = set(slots)

    def value_of(self, slot: str) -> bool | None:
        return True if slot in self._slots else None

    def apply(self, slot: str, action: PaintAction) -> None:
        if action.clears:
            self._slots.discard(slot)
        else:
            self._slots.add(slot)

    def select_all(self, dates: Iterable[str]) -> None:
        self._slots = set(full_grid(dates))

    def clear_all(self) -> None:
        self._slots = set()

    def sorted_slots(self) -> list[str]:
        return sort_slots(self._slots)

    def __contains__(self, slot: object) -> bool:
        return slot in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)


class RatingSelection(Selection):
    """Mapping of candidate slot to rating; unrated slots are unavailable."""

    def __init__(self, candidate_slots: Iterable[str]) -> None:
        self.candidates: frozenset[str] = frozenset(candidate_slots)
        self._ratings: dict[str, Rating] = {}

    def value_of(self, slot: str) -> Rating | None:
        return self._ratings.get(slot)

    def apply(self, slot: str, action: PaintAction) -> None:
        if slot not in self.candidates:
            raise ValueError(f"slot {slot} is not a candidate slot of this event")
        if action.clears:
            self._ratings.pop(slot, None)
        else:
            self._ratings[slot] = Rating(action.value)

    def clear_all(self) -> None:
        self._ratings = {}

    def ratings(self) -> list[RatingEntry]:
        return [RatingEntry(slot=s, rating=self._ratings[s]) for s in sort_slots(self._ratings)]

    def __contains__(self, slot: object) -> bool:
        return slot in self._ratings

    def __len__(self) -> int:
        return len(self._ratings)
