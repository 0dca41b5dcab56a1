"""Aggregation engine: per-slot consensus over the active vote set.

The result is recomputed from scratch for every call; nothing is cached
between calls, so the output depends only on the inputs.
"""

from collections.abc import Iterable, Sequence

from heatpoll.models.poll import UNAVAILABLE, SlotConsensus, Vote, VoterRating


def active_votes(votes: Iterable[Vote], hidden_voter_names: Iterable[str] = ()) -> list[Vote]:
    """Votes whose voter is not hidden. The vote records are not modified."""
    hidden = set(hidden_voter_names)
    return [v for v in votes if v.voter_name not in hidden]


def aggregate(
    candidate_slots: Iterable[str],
    votes: Sequence[Vote],
    hidden_voter_names: Iterable[str] = (),
) -> dict[str, SlotConsensus]:
    """Reduce the active votes to a :class:`SlotConsensus` per candidate slot.

    Every candidate slot gets an entry, including slots nobody rated. A vote
    without a rating for a slot counts as unavailable for that slot.
    """
    active = active_votes(votes, hidden_voter_names)
    lookups = [(v.voter_name, v.rating_map()) for v in active]

    result: dict[str, SlotConsensus] = {}
    for slot in candidate_slots:
        voter_ratings: list[VoterRating] = []
        total_goodness = 0
        can_make_count = 0
        cant_count = 0
        for name, ratings in lookups:
            rating = ratings.get(slot)
            if rating is None:
                cant_count += 1
                voter_ratings.append(VoterRating(name=name, rating=UNAVAILABLE))
            else:
                can_make_count += 1
                total_goodness += rating.weight
                voter_ratings.append(VoterRating(name=name, rating=rating))
        result[slot] = SlotConsensus(
            cant_count=cant_count,
            can_make_count=can_make_count,
            avg_goodness=total_goodness / can_make_count if can_make_count > 0 else 0.0,
            all_can_make=cant_count == 0 and len(active) > 0,
            voter_ratings=voter_ratings,
        )
    return result
