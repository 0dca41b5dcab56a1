import abc
import secrets
import string
import uuid
from datetime import UTC, datetime

from heatpoll.models.poll import Event, RatingEntry, Vote

TOKEN_ALPHABET = string.ascii_lowercase + string.digits
ID_ATTEMPTS = 10


def generate_token(length: int = 10) -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def _now() -> str:
    return datetime.now(UTC).isoformat()


class PollStore(abc.ABC):
    """Storage interface consumed by the poll routes.

    ``add_vote`` with ``replace=True`` drops earlier votes cast under the same
    voter name for the event before storing the new one; otherwise votes
    accumulate.
    """

    name = "base"

    @abc.abstractmethod
    async def create_event(
        self,
        name: str,
        description: str,
        slots: list[str],
        id_length: int = 10,
        mod_key_length: int = 16,
    ) -> Event:
        """Allocate a fresh event id and results key and store the event."""

    @abc.abstractmethod
    async def get_event(self, event_id: str) -> Event | None:
        pass

    @abc.abstractmethod
    async def add_vote(
        self,
        event_id: str,
        voter_name: str,
        ratings: list[RatingEntry],
        replace: bool = False,
    ) -> Vote:
        """Store a vote, optionally replacing earlier votes by the same voter name."""

    @abc.abstractmethod
    async def list_votes(self, event_id: str) -> list[Vote]:
        """Votes for an event in submission order."""

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None

    @staticmethod
    def _new_event(name: str, description: str, slots: list[str], event_id: str, mod_key_length: int) -> Event:
        return Event(
            id=event_id,
            name=name,
            description=description,
            slots=slots,
            mod_key=generate_token(mod_key_length),
            created_at=_now(),
        )

    @staticmethod
    def _new_vote(event_id: str, voter_name: str, ratings: list[RatingEntry]) -> Vote:
        return Vote(
            id=uuid.uuid4().hex,
            event_id=event_id,
            voter_name=voter_name,
            ratings=ratings,
            created_at=_now(),
        )
