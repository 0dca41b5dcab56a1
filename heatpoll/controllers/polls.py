import logging
import secrets
from typing import List, Optional

from fastapi import APIRouter, Query

from heatpoll.dependencies import PollConfig, Store
from heatpoll.errors import BadRequestError, ForbiddenError, NotFoundError
from heatpoll.grid import HOURS, date_range
from heatpoll.heatmap import Heatmap
from heatpoll.models.poll import (
    CreatedEvent,
    CreateEventRequest,
    Event,
    HeatmapResponse,
    PublicEvent,
    SubmitVoteRequest,
    Vote,
)

logger = logging.getLogger("heatpoll.polls")
router = APIRouter()


def _public(event: Event) -> PublicEvent:
    return PublicEvent(
        id=event.id,
        name=event.name,
        description=event.description,
        slots=event.slots,
        dates=date_range(event.slots),
        hours=list(HOURS),
    )


async def _load_event(store: Store, event_id: str) -> Event:
    event = await store.get_event(event_id)
    if event is None:
        logger.warning("Event not found: %s", event_id)
        raise NotFoundError(detail="Event not found", event_id=event_id)
    return event


def _check_key(event: Event, key: Optional[str]) -> None:
    if not key or not secrets.compare_digest(event.mod_key.encode(), key.encode()):
        logger.warning("Invalid results key for event %s", event.id)
        raise ForbiddenError(detail="Invalid link")


@router.post("/events", status_code=201)
async def create_event(req: CreateEventRequest, store: Store, poll: PollConfig) -> CreatedEvent:
    logger.info("POST /events name=%s slots=%d", req.name, len(req.slots))
    event = await store.create_event(
        name=req.name,
        description=req.description,
        slots=req.slots,
        id_length=poll.event_id_length,
        mod_key_length=poll.mod_key_length,
    )
    logger.info("Created event id=%s", event.id)
    return CreatedEvent(
        id=event.id,
        mod_key=event.mod_key,
        name=event.name,
        description=event.description,
        slots=event.slots,
    )


@router.get("/events/{event_id}")
async def get_event(event_id: str, store: Store) -> PublicEvent:
    logger.info("GET /events/%s", event_id)
    return _public(await _load_event(store, event_id))


@router.post("/votes", status_code=201)
async def submit_vote(req: SubmitVoteRequest, store: Store, poll: PollConfig) -> Vote:
    logger.info("POST /votes event=%s voter=%s ratings=%d", req.event_id, req.voter_name, len(req.ratings))
    event = await _load_event(store, req.event_id)
    candidates = set(event.slots)
    for entry in req.ratings:
        if entry.slot not in candidates:
            logger.warning("Invalid slot %s for event %s", entry.slot, event.id)
            raise BadRequestError(detail=f"Invalid slot: {entry.slot}", slot=entry.slot)
    vote = await store.add_vote(
        event.id,
        req.voter_name,
        req.ratings,
        replace=poll.vote_resubmit == "replace",
    )
    logger.info("Stored vote for %s on event %s (policy=%s)", req.voter_name, event.id, poll.vote_resubmit)
    return vote


@router.get("/events/{event_id}/votes")
async def list_votes(
    event_id: str,
    store: Store,
    key: Optional[str] = Query(None, description="Results-view access key"),
) -> List[Vote]:
    logger.info("GET /events/%s/votes", event_id)
    event = await _load_event(store, event_id)
    _check_key(event, key)
    return await store.list_votes(event.id)


@router.get("/events/{event_id}/heatmap")
async def heatmap(
    event_id: str,
    store: Store,
    key: Optional[str] = Query(None, description="Results-view access key"),
    hidden: List[str] = Query(default=[], description="Voter names left out of the aggregation"),
    highlight: Optional[str] = Query(None, description="Voter whose own ratings color the grid"),
) -> HeatmapResponse:
    logger.info("GET /events/%s/heatmap hidden=%d highlight=%s", event_id, len(hidden), highlight)
    event = await _load_event(store, event_id)
    _check_key(event, key)
    view = Heatmap(event.slots, await store.list_votes(event.id), hidden=hidden)
    view.highlight(highlight)
    return HeatmapResponse(
        event=_public(event),
        highlighted=highlight,
        active_voter_count=view.active_voter_count,
        voters=view.voters(),
        cells=view.cells(),
    )
