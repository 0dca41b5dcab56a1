import pytest

from heatpoll.aggregate import active_votes, aggregate
from heatpoll.models.poll import Rating, RatingEntry, Vote


def _vote(name, **ratings):
    return Vote(
        voter_name=name,
        ratings=[RatingEntry(slot=slot.replace("_", ":"), rating=r) for slot, r in ratings.items()],
    )


@pytest.fixture
def scenario_votes():
    return [
        Vote(voter_name="A", ratings=[RatingEntry(slot="2024-03-01:9", rating="great")]),
        Vote(
            voter_name="B",
            ratings=[
                RatingEntry(slot="2024-03-01:9", rating="good"),
                RatingEntry(slot="2024-03-01:10", rating="fine"),
            ],
        ),
    ]


def test_end_to_end_scenario(scenario_slots, scenario_votes):
    result = aggregate(scenario_slots, scenario_votes)

    nine = result["2024-03-01:9"]
    assert nine.cant_count == 0
    assert nine.can_make_count == 2
    assert nine.avg_goodness == 2.5
    assert nine.all_can_make is True

    ten = result["2024-03-01:10"]
    assert ten.cant_count == 1
    assert ten.can_make_count == 1
    assert ten.avg_goodness == 1
    assert ten.all_can_make is False
    assert [(r.name, r.rating) for r in ten.voter_ratings] == [("A", "cant"), ("B", Rating.FINE)]


def test_hiding_voter(scenario_slots, scenario_votes):
    result = aggregate(scenario_slots, scenario_votes, hidden_voter_names={"B"})
    nine = result["2024-03-01:9"]
    assert nine.can_make_count == 1
    assert nine.avg_goodness == 3
    assert nine.all_can_make is True
    assert [r.name for r in nine.voter_ratings] == ["A"]


def test_hiding_does_not_mutate_votes(scenario_slots, scenario_votes):
    before = [v.model_dump() for v in scenario_votes]
    aggregate(scenario_slots, scenario_votes, hidden_voter_names={"A", "B"})
    assert [v.model_dump() for v in scenario_votes] == before


def test_every_candidate_slot_present_even_unrated(scenario_votes):
    slots = ["2024-03-01:9", "2024-03-01:10", "2024-03-05:22"]
    result = aggregate(slots, scenario_votes)
    assert set(result) == set(slots)
    assert result["2024-03-05:22"].cant_count == 2
    assert result["2024-03-05:22"].avg_goodness == 0


def test_no_votes():
    result = aggregate(["2024-03-01:9"], [])
    slot = result["2024-03-01:9"]
    assert slot.cant_count == 0
    assert slot.can_make_count == 0
    assert slot.avg_goodness == 0
    assert slot.all_can_make is False


def test_all_hidden_means_no_consensus(scenario_slots, scenario_votes):
    result = aggregate(scenario_slots, scenario_votes, hidden_voter_names=["A", "B"])
    assert all(not r.all_can_make for r in result.values())


def test_avg_goodness_bounds():
    slots = ["2024-03-01:9", "2024-03-01:10", "2024-03-01:11"]
    votes = [
        _vote("A", **{"2024-03-01_9": "fine", "2024-03-01_10": "great"}),
        _vote("B", **{"2024-03-01_9": "fine", "2024-03-01_10": "good"}),
        _vote("C", **{"2024-03-01_10": "great"}),
    ]
    for result in aggregate(slots, votes).values():
        if result.can_make_count > 0:
            assert 1 <= result.avg_goodness <= 3
        else:
            assert result.avg_goodness == 0
        assert result.all_can_make == (result.cant_count == 0 and len(votes) > 0)


def test_duplicate_voter_names_count_separately():
    votes = [_vote("A", **{"2024-03-01_9": "great"}), _vote("A")]
    result = aggregate(["2024-03-01:9"], votes)["2024-03-01:9"]
    assert result.can_make_count == 1
    assert result.cant_count == 1
    assert [r.name for r in result.voter_ratings] == ["A", "A"]


def test_active_votes_filters_by_name(scenario_votes):
    assert [v.voter_name for v in active_votes(scenario_votes, ["A"])] == ["B"]
    assert len(active_votes(scenario_votes)) == 2
