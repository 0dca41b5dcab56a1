import logging

from heatpoll.db.base import ID_ATTEMPTS, PollStore, generate_token
from heatpoll.models.poll import Event, RatingEntry, Vote

logger = logging.getLogger("heatpoll.store")


class MemoryPollStore(PollStore):
    """Process-local store; contents are lost on restart."""

    name = "memory"

    def __init__(self) -> None:
        self._events: dict[str, Event] = {}
        self._votes: dict[str, list[Vote]] = {}

    async def create_event(
        self,
        name: str,
        description: str,
        slots: list[str],
        id_length: int = 10,
        mod_key_length: int = 16,
    ) -> Event:
        for _ in range(ID_ATTEMPTS):
            event_id = generate_token(id_length)
            if event_id in self._events:
                continue
            event = self._new_event(name, description, slots, event_id, mod_key_length)
            self._events[event_id] = event
            self._votes[event_id] = []
            logger.debug("store.memory create_event id=%s slots=%d", event_id, len(slots))
            return event
        raise RuntimeError("Failed to generate unique event ID")

    async def get_event(self, event_id: str) -> Event | None:
        return self._events.get(event_id)

    async def add_vote(
        self,
        event_id: str,
        voter_name: str,
        ratings: list[RatingEntry],
        replace: bool = False,
    ) -> Vote:
        vote = self._new_vote(event_id, voter_name, ratings)
        votes = self._votes.setdefault(event_id, [])
        if replace:
            votes[:] = [v for v in votes if v.voter_name != voter_name]
        votes.append(vote)
        return vote

    async def list_votes(self, event_id: str) -> list[Vote]:
        return list(self._votes.get(event_id, []))
