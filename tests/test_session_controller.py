import random

import pytest

from rallypairing.controllers import SessionController, SessionStatus
from rallypairing.exceptions import (
    InvalidPlayerDataException,
    InvalidWinnerException,
    NoPairingAvailableException,
    SessionStateException,
)
from rallypairing.models import ExclusionSet, Participant, SessionConfig


def _players():
    return [
        Participant(id="A", name="Ana", rating=1600),
        Participant(id="B", name="Ben", rating=1500),
        Participant(id="C", name="Cleo", rating=1550),
        Participant(id="D", name="Dara", rating=1400),
    ]


def _play_out(controller):
    """Record the first player of the lowest occupied table until done."""
    complete = False
    while controller.status is SessionStatus.RUNNING:
        table, match = sorted(controller.state.occupied_tables().items())[0]
        complete = controller.record_result(table, match.player_a.id)
    return complete


def test_default_quota_is_everyone_once():
    controller = SessionController(_players())
    assert controller.quota == 3

    controller = SessionController(_players(), config=SessionConfig(quota=1))
    assert controller.quota == 1


@pytest.mark.parametrize("seed", range(5))
def test_full_session_feeds_sink_and_grows_exclusions(seed):
    outcomes = []
    controller = SessionController(
        _players(),
        config=SessionConfig(table_count=2),
        rng=random.Random(seed),
        result_sink=outcomes.append,
    )

    schedule = controller.start()
    assert controller.status is SessionStatus.RUNNING
    assert len(schedule) == 6

    assert _play_out(controller) is True
    assert controller.status is SessionStatus.FINISHED
    assert len(outcomes) == 6
    assert outcomes == controller.outcomes
    assert len(controller.exclusions) == 6
    assert controller.match_counts() == {"A": 3, "B": 3, "C": 3, "D": 3}
    for outcome in outcomes:
        assert outcome.winner.id == outcome.match.player_a.id
        assert outcome.loser_id == outcome.match.player_b.id


def test_regenerating_after_a_full_session_finds_nothing_left():
    controller = SessionController(_players(), config=SessionConfig(seed=11))
    controller.start()
    _play_out(controller)

    follow_up = SessionController(
        _players(), exclusions=controller.exclusions, config=SessionConfig(seed=12)
    )
    with pytest.raises(NoPairingAvailableException):
        follow_up.start()


def test_regenerating_mid_session_skips_played_pairs():
    controller = SessionController(_players(), config=SessionConfig(seed=3))
    controller.start()
    played = controller.state.table(1)
    controller.record_result(1, played.player_b.id)

    follow_up = SessionController(
        _players(), exclusions=controller.exclusions, config=SessionConfig(seed=4)
    )
    schedule = follow_up.start()

    assert played.pair_key not in {m.pair_key for m in schedule}


def test_invalid_winner_changes_nothing():
    outcomes = []
    controller = SessionController(
        _players(), rng=random.Random(1), result_sink=outcomes.append
    )
    controller.start()
    state = controller.state
    match = state.table(1)
    outsider = next(p.id for p in _players() if not match.involves(p.id))

    with pytest.raises(InvalidWinnerException):
        controller.record_result(1, outsider)

    assert controller.state == state
    assert len(controller.exclusions) == 0
    assert outcomes == []


def test_start_twice_is_rejected():
    controller = SessionController(_players(), rng=random.Random(2))
    controller.start()
    with pytest.raises(SessionStateException):
        controller.start()


def test_start_needs_two_participants():
    controller = SessionController(_players()[:1])
    with pytest.raises(InvalidPlayerDataException):
        controller.start()
    assert controller.status is SessionStatus.IDLE


def test_start_with_everything_excluded():
    exclusions = ExclusionSet([("A", "B")])
    controller = SessionController(_players()[:2], exclusions=exclusions)
    with pytest.raises(NoPairingAvailableException):
        controller.start()
    assert controller.status is SessionStatus.IDLE


def test_result_before_start_is_rejected():
    controller = SessionController(_players())
    with pytest.raises(SessionStateException):
        controller.record_result(1, "A")


def test_force_finish_ends_the_session():
    controller = SessionController(_players(), rng=random.Random(5))
    controller.start()
    controller.force_finish()

    assert controller.status is SessionStatus.FINISHED
    assert controller.state.remaining() == []
    with pytest.raises(SessionStateException):
        controller.record_result(1, "A")


def test_caller_exclusions_are_not_modified():
    exclusions = ExclusionSet([("A", "D")])
    controller = SessionController(_players(), exclusions=exclusions, rng=random.Random(7))
    controller.start()
    _play_out(controller)

    assert len(exclusions) == 1
    assert len(controller.exclusions) == 1 + len(controller.outcomes)


def test_failing_result_sink_leaves_match_on_its_table():
    def failing_sink(outcome):
        raise OSError("database unavailable")

    controller = SessionController(
        _players(),
        config=SessionConfig(table_count=1),
        rng=random.Random(4),
        result_sink=failing_sink,
    )
    controller.start()
    state = controller.state
    match = state.table(1)

    with pytest.raises(OSError):
        controller.record_result(1, match.player_a.id)

    assert controller.state == state
    assert controller.state.table(1).sequence_number == 1
    assert len(controller.exclusions) == 0
    assert controller.outcomes == []

    # once saving works again the same result goes through
    controller.result_sink = None
    assert controller.record_result(1, match.player_a.id) is False
    assert controller.state.table(1).sequence_number == 2
    assert controller.exclusions.contains(match.player_a.id, match.player_b.id)
