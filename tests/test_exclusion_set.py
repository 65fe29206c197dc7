import pytest

from rallypairing.exceptions import InvalidPairException
from rallypairing.models import ExclusionSet, extend_exclusions, pair_key


def test_pair_key_is_symmetric():
    assert pair_key("alice", "bob") == pair_key("bob", "alice")
    assert pair_key("alice", "bob") == ("alice", "bob")


def test_pair_key_does_not_collide_on_separator_characters():
    # ids such as UUIDs contain dashes; a joined string key would collide here
    assert pair_key("a-b", "c") != pair_key("a", "b-c")


def test_pair_key_rejects_self_pairing():
    with pytest.raises(InvalidPairException):
        pair_key("alice", "alice")


def test_add_returns_new_set_and_keeps_the_old_one():
    empty = ExclusionSet()
    extended = empty.add("alice", "bob")

    assert len(empty) == 0
    assert not empty.contains("alice", "bob")
    assert extended.contains("bob", "alice")
    assert ("alice", "bob") in extended
    assert extend_exclusions(extended, "carol", "alice").contains("alice", "carol")
    assert len(extended) == 1


def test_adding_known_pair_keeps_size():
    exclusions = ExclusionSet([("alice", "bob")])
    assert len(exclusions.add("bob", "alice")) == 1


def test_contains_is_false_for_same_participant():
    assert not ExclusionSet([("alice", "bob")]).contains("alice", "alice")


def test_from_pairs_skips_incomplete_and_absent_participants():
    records = [
        ("alice", "bob"),
        ("alice", None),
        (None, "carol"),
        ("bob", "dave"),  # dave is not here today
        ("carol", "alice"),
    ]
    exclusions = ExclusionSet.from_pairs(records, participant_ids=["alice", "bob", "carol"])

    assert set(exclusions) == {("alice", "bob"), ("alice", "carol")}


def test_from_pairs_without_roster_keeps_everything_complete():
    exclusions = ExclusionSet.from_pairs([("a", "b"), ("b", "d"), ("x", "")])
    assert len(exclusions) == 2


def test_serialization_keeps_pairs():
    exclusions = ExclusionSet([("b", "a"), ("c", "a")])
    restored = ExclusionSet.from_dict(exclusions.to_dict())

    assert restored == exclusions
    assert exclusions.to_dict() == {"pairs": [["a", "b"], ["a", "c"]]}
