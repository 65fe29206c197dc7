"""Pair keys and the set of pairs that must not be scheduled again."""

# Rally Pairing
# Copyright (C) 2025  Rally Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import Any, Collection, Dict, FrozenSet, Iterable, Iterator, Optional, Tuple

from rallypairing.exceptions import InvalidPairException
from rallypairing.type_hints import PairKey, PlayerId


def pair_key(player1_id: PlayerId, player2_id: PlayerId) -> PairKey:
    """Return the canonical key of an unordered pair of participants.

    The key is the two ids in ascending order, so ``pair_key(a, b) ==
    pair_key(b, a)`` and distinct pairs never collide, whatever characters
    the ids contain.

    Raises
    ------
    InvalidPairException
        If both ids are the same participant.
    """
    a, b = str(player1_id), str(player2_id)
    if a == b:
        raise InvalidPairException(f"A participant cannot be paired with itself: {a}")
    return (a, b) if a < b else (b, a)


class ExclusionSet:
    """
    Immutable set of pairs that have already played in the current window.

    Adding a pair returns a new set, so a value handed to the generator or to
    a caller holding history can never be changed behind its back.

    Attributes
    ----------
    keys : frozenset of tuple of str
        Canonical pair keys, see :func:`pair_key`.
    """

    __slots__ = ("_keys",)

    def __init__(self, keys: Iterable[PairKey] = ()) -> None:
        self._keys: FrozenSet[PairKey] = frozenset(pair_key(a, b) for a, b in keys)

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Tuple[Optional[PlayerId], Optional[PlayerId]]],
        participant_ids: Optional[Collection[PlayerId]] = None,
    ) -> "ExclusionSet":
        """Seed an exclusion set from played-match records.

        Records missing either side are skipped. When ``participant_ids`` is
        given, only pairs where both sides are in it are kept, so history
        involving people absent today does not bloat the set.
        """
        allowed = None if participant_ids is None else {str(p) for p in participant_ids}
        keys = []
        for player1_id, player2_id in pairs:
            if not player1_id or not player2_id:
                continue
            if allowed is not None and (
                str(player1_id) not in allowed or str(player2_id) not in allowed
            ):
                continue
            if str(player1_id) == str(player2_id):
                continue
            keys.append((player1_id, player2_id))
        return cls(keys)

    @property
    def keys(self) -> FrozenSet[PairKey]:
        return self._keys

    def contains(self, player1_id: PlayerId, player2_id: PlayerId) -> bool:
        """Check whether two participants have already played each other."""
        a, b = str(player1_id), str(player2_id)
        if a == b:
            return False
        return pair_key(a, b) in self._keys

    def add(self, player1_id: PlayerId, player2_id: PlayerId) -> "ExclusionSet":
        """Return a new set that also excludes the given pair."""
        key = pair_key(player1_id, player2_id)
        if key in self._keys:
            return self
        new_set = ExclusionSet()
        new_set._keys = self._keys | {key}
        return new_set

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        return self.contains(item[0], item[1])

    def __iter__(self) -> Iterator[PairKey]:
        return iter(sorted(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExclusionSet):
            return NotImplemented
        return self._keys == other._keys

    def __hash__(self) -> int:
        return hash(self._keys)

    def __repr__(self) -> str:
        return f"ExclusionSet({len(self._keys)} pairs)"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exclusion set to dictionary."""
        return {"pairs": [list(key) for key in sorted(self._keys)]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExclusionSet":
        """Deserialize exclusion set from dictionary."""
        return cls((str(a), str(b)) for a, b in data.get("pairs", []))


def extend_exclusions(
    exclusions: ExclusionSet, player1_id: PlayerId, player2_id: PlayerId
) -> ExclusionSet:
    """Return ``exclusions`` extended with one more played pair."""
    return exclusions.add(player1_id, player2_id)
