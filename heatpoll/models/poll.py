from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from heatpoll.grid import parse_slot_key, sort_slots

UNAVAILABLE = "cant"


class Rating(str, Enum):
    GREAT = "great"
    GOOD = "good"
    FINE = "fine"

    @property
    def weight(self) -> int:
        return _WEIGHTS[self]


_WEIGHTS = {Rating.GREAT: 3, Rating.GOOD: 2, Rating.FINE: 1}


class RatingEntry(BaseModel):
    slot: str
    rating: Rating

    @field_validator("slot")
    @classmethod
    def validate_slot(cls, v: str) -> str:
        parse_slot_key(v)
        return v


class Event(BaseModel):
    id: str
    name: str
    description: str = ""
    slots: list[str]
    mod_key: str
    created_at: str


class PublicEvent(BaseModel):
    id: str
    name: str
    description: str = ""
    slots: list[str]
    dates: list[str]
    hours: list[int]


class Vote(BaseModel):
    id: str = ""
    event_id: str = ""
    voter_name: str
    ratings: list[RatingEntry] = []
    created_at: str = ""

    def rating_map(self) -> dict[str, Rating]:
        return {r.slot: r.rating for r in self.ratings}


class CreateEventRequest(BaseModel):
    name: str
    description: str = ""
    slots: list[str]

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > 200:
            raise ValueError("name must be 1-200 characters")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return v.strip()

    @field_validator("slots")
    @classmethod
    def validate_slots(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("slots must not be empty")
        return sort_slots(v)


class CreatedEvent(BaseModel):
    id: str
    mod_key: str
    name: str
    description: str
    slots: list[str]


class SubmitVoteRequest(BaseModel):
    event_id: str
    voter_name: str
    ratings: list[RatingEntry] = []

    @field_validator("voter_name")
    @classmethod
    def validate_voter_name(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > 100:
            raise ValueError("voter_name must be 1-100 characters")
        return v

    @field_validator("ratings")
    @classmethod
    def validate_ratings(cls, v: list[RatingEntry]) -> list[RatingEntry]:
        seen: set[str] = set()
        for entry in v:
            if entry.slot in seen:
                raise ValueError(f"duplicate rating for slot: {entry.slot}")
            seen.add(entry.slot)
        return v


class VoterRating(BaseModel):
    name: str
    rating: Rating | Literal["cant"]


class SlotConsensus(BaseModel):
    cant_count: int = 0
    can_make_count: int = 0
    avg_goodness: float = 0.0
    all_can_make: bool = False
    voter_ratings: list[VoterRating] = Field(default_factory=list)


class HeatmapCell(BaseModel):
    slot: str
    date: str
    hour: int
    color: str
    cant_indicator: int
    consensus: SlotConsensus


class VoterEntry(BaseModel):
    name: str
    visible: bool


class HeatmapResponse(BaseModel):
    event: PublicEvent
    highlighted: str | None = None
    active_voter_count: int
    voters: list[VoterEntry]
    cells: list[HeatmapCell]
