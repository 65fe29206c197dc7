import random

import pytest

from rallypairing.exceptions import DuplicatePlayerException, InvalidQuotaException
from rallypairing.models import ExclusionSet, Participant, pair_key
from rallypairing.pairing import (
    ScheduleGenerator,
    count_matches,
    generate_schedule,
    round_policy,
)


class FirstChoiceRandom:
    """Random source that never shuffles and always picks the first option."""

    def shuffle(self, items):
        pass

    def choice(self, items):
        return items[0]


def _roster(count, base=1400, step=37):
    return [
        Participant(id=f"p{i:02d}", name=f"Player {i}", rating=base + step * i)
        for i in range(count)
    ]


def _scenario_players():
    return [
        Participant(id="A", name="A", rating=1600),
        Participant(id="B", name="B", rating=1500),
        Participant(id="C", name="C", rating=1550),
        Participant(id="D", name="D", rating=1400),
    ]


def _assert_proximity_round(schedule, players, exclusions, quota, round_number):
    """Replay an even round and check every opponent was the closest available."""
    before = [m for m in schedule if m.round_number < round_number]
    pending = [m for m in schedule if m.round_number == round_number]
    played = {m.pair_key for m in before} | set(exclusions.keys)
    counts = count_matches(before, players)
    eligible = sorted(
        (p for p in players if counts[p.id] < quota),
        key=lambda p: p.rating,
        reverse=True,
    )
    matched = set()

    for player in eligible:
        if player.id in matched:
            continue
        options = [
            o
            for o in eligible
            if o.id != player.id
            and o.id not in matched
            and pair_key(player.id, o.id) not in played
        ]
        if not options:
            continue
        match = pending.pop(0)
        assert match.involves(player.id)
        gap = abs(player.rating - match.opponent_of(player.id).rating)
        assert gap == min(abs(player.rating - o.rating) for o in options)
        matched.update(match.player_ids)

    assert not pending


def test_degenerate_inputs_give_empty_schedule():
    p1, p2 = _roster(2)

    assert generate_schedule([], ExclusionSet(), 5) == []
    assert generate_schedule([p1], ExclusionSet(), 5) == []
    assert generate_schedule([p1, p2], ExclusionSet([pair_key(p1.id, p2.id)]), 5) == []


def test_every_pair_excluded_gives_empty_schedule():
    players = _roster(4)
    exclusions = ExclusionSet(
        (a.id, b.id) for i, a in enumerate(players) for b in players[i + 1 :]
    )
    assert generate_schedule(players, exclusions, 3, rng=random.Random(1)) == []


@pytest.mark.parametrize("quota", [0, -2, 1.5, None])
def test_invalid_quota_is_rejected(quota):
    with pytest.raises(InvalidQuotaException):
        generate_schedule(_roster(4), ExclusionSet(), quota)


def test_invalid_quota_is_rejected_before_roster_checks():
    with pytest.raises(InvalidQuotaException):
        generate_schedule([], ExclusionSet(), 0)


def test_duplicate_participant_ids_are_rejected():
    players = _roster(3) + [Participant(id="p01", name="Impostor", rating=1000)]
    with pytest.raises(DuplicatePlayerException):
        generate_schedule(players, ExclusionSet(), 2)


@pytest.mark.parametrize("seed", range(25))
def test_no_duplicate_or_excluded_pairs(seed):
    players = _roster(9)
    exclusions = ExclusionSet(
        [
            (players[0].id, players[1].id),
            (players[2].id, players[5].id),
            (players[3].id, players[8].id),
        ]
    )
    schedule = generate_schedule(players, exclusions, 5, rng=random.Random(seed))

    keys = [match.pair_key for match in schedule]
    assert schedule
    assert len(keys) == len(set(keys))
    assert not set(keys) & set(exclusions.keys)


@pytest.mark.parametrize("seed", range(25))
def test_quota_ceiling_and_one_match_per_round(seed):
    players = _roster(10)
    quota = 4
    schedule = generate_schedule(players, ExclusionSet(), quota, rng=random.Random(seed))

    assert all(count <= quota for count in count_matches(schedule, players).values())
    assert [m.sequence_number for m in schedule] == list(range(1, len(schedule) + 1))

    rounds = [m.round_number for m in schedule]
    assert rounds == sorted(rounds)
    for round_number in set(rounds):
        ids = [
            player_id
            for m in schedule
            if m.round_number == round_number
            for player_id in m.player_ids
        ]
        assert len(ids) == len(set(ids))
    for match in schedule:
        assert match.player_a.id != match.player_b.id
        assert match.table_number is None


@pytest.mark.parametrize("seed", range(10))
def test_first_round_covers_everyone_when_nothing_is_excluded(seed):
    players = _roster(8)
    schedule = generate_schedule(players, ExclusionSet(), 3, rng=random.Random(seed))

    first_round = [m for m in schedule if m.round_number == 1]
    assert len(first_round) == 4
    assert count_matches(first_round, players) == {p.id: 1 for p in players}


@pytest.mark.parametrize("seed", range(25))
def test_even_rounds_pick_closest_available_rating(seed):
    # uneven spread so proximity choices matter
    ratings = [2100, 1320, 1875, 1500, 1505, 990, 1700, 1210, 1460]
    players = [p.with_rating(r) for p, r in zip(_roster(9), ratings)]
    exclusions = ExclusionSet([(players[0].id, players[2].id)])
    quota = 6
    schedule = generate_schedule(players, exclusions, quota, rng=random.Random(seed))

    even_rounds = {m.round_number for m in schedule if m.round_number % 2 == 0}
    assert even_rounds
    for round_number in even_rounds:
        _assert_proximity_round(schedule, players, exclusions, quota, round_number)


@pytest.mark.parametrize("seed", range(20))
def test_four_player_scenario(seed):
    players = _scenario_players()
    schedule = generate_schedule(players, ExclusionSet(), 3, rng=random.Random(seed))

    first_round = [m for m in schedule if m.round_number == 1]
    assert len(first_round) == 2
    assert count_matches(first_round, players) == {"A": 1, "B": 1, "C": 1, "D": 1}

    _assert_proximity_round(schedule, players, ExclusionSet(), 3, 2)

    # three rounds use up all six pairs
    assert len(schedule) == 6
    assert count_matches(schedule, players) == {"A": 3, "B": 3, "C": 3, "D": 3}


def test_four_player_scenario_exact_order_with_fixed_random_source():
    schedule = generate_schedule(
        _scenario_players(), ExclusionSet(), 3, rng=FirstChoiceRandom()
    )

    assert [(m.player_a.id, m.player_b.id, m.round_number) for m in schedule] == [
        ("A", "B", 1),
        ("C", "D", 1),
        ("A", "C", 2),
        ("B", "D", 2),
        ("A", "D", 3),
        ("B", "C", 3),
    ]


@pytest.mark.parametrize(
    "order, expected_opponent",
    [(["P", "W", "U", "V", "Z"], "U"), (["P", "W", "V", "U", "Z"], "V")],
)
def test_equal_rating_gap_goes_to_first_pair_in_pool_order(order, expected_opponent):
    ratings = {"P": 1700, "U": 1600, "V": 1600, "W": 900, "Z": 800}
    players = [Participant(id=i, name=i, rating=ratings[i]) for i in order]

    schedule = generate_schedule(players, ExclusionSet(), 2, rng=FirstChoiceRandom())

    second_round = [m for m in schedule if m.round_number == 2]
    assert second_round[0].player_a.id == "P"
    assert second_round[0].player_b.id == expected_opponent


@pytest.mark.parametrize("seed", range(10))
def test_participant_without_legal_opponent_falls_short(seed):
    players = _roster(4)
    loner = players[3]
    exclusions = ExclusionSet((loner.id, p.id) for p in players[:3])

    schedule = generate_schedule(players, exclusions, 3, rng=random.Random(seed))
    counts = count_matches(schedule, players)

    assert len(schedule) == 3
    assert counts[loner.id] == 0
    assert all(counts[p.id] == 2 for p in players[:3])


def test_quota_one_gives_single_round():
    players = _roster(6)
    schedule = generate_schedule(players, ExclusionSet(), 1, rng=random.Random(3))

    assert len(schedule) == 3
    assert {m.round_number for m in schedule} == {1}


def test_plain_set_of_pair_keys_is_accepted_as_exclusions():
    p1, p2, p3 = _roster(3)
    schedule = generate_schedule(
        [p1, p2, p3], {pair_key(p1.id, p2.id)}, 2, rng=random.Random(0)
    )
    assert pair_key(p1.id, p2.id) not in {m.pair_key for m in schedule}


def test_generator_does_not_reorder_callers_roster():
    players = _roster(6)
    snapshot = list(players)
    ScheduleGenerator(random.Random(5)).generate(players, None, 3)
    assert players == snapshot


def test_round_policy_alternates():
    assert [round_policy(n) for n in range(1, 5)] == [
        "random",
        "proximity",
        "random",
        "proximity",
    ]
