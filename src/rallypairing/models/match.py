"""Match and match outcome data classes."""

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

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from rallypairing.models.exclusion_set import pair_key
from rallypairing.models.participant import Participant
from rallypairing.type_hints import PairKey, PlayerId


@dataclass(frozen=True)
class Match:
    """A scheduled match between two participants.

    Attributes
    ----------
    player_a : Participant
        First participant, in candidate pool order.
    player_b : Participant
        Second participant.
    sequence_number : int
        1-based position in the generated schedule.
    round_number : int
        Generator round that produced the match.
    table_number : int or None
        Table the match is being played on, set only by the live table
        assigner.
    """

    player_a: Participant
    player_b: Participant
    sequence_number: int
    round_number: int
    table_number: Optional[int] = None

    @property
    def pair_key(self) -> PairKey:
        return pair_key(self.player_a.id, self.player_b.id)

    @property
    def player_ids(self) -> PairKey:
        return (self.player_a.id, self.player_b.id)

    def involves(self, player_id: PlayerId) -> bool:
        """Check whether a participant plays in this match."""
        return str(player_id) in (self.player_a.id, self.player_b.id)

    def opponent_of(self, player_id: PlayerId) -> Participant:
        """Return the other participant of the match.

        Raises:
            ValueError: If ``player_id`` does not play in this match
        """
        player_id = str(player_id)
        if player_id == self.player_a.id:
            return self.player_b
        if player_id == self.player_b.id:
            return self.player_a
        raise ValueError(f"{player_id} does not play in match {self.sequence_number}")

    def with_table(self, table_number: Optional[int]) -> "Match":
        """Return a copy placed on (or removed from) a table."""
        return replace(self, table_number=table_number)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "sequence_number": self.sequence_number,
            "round_number": self.round_number,
            "table_number": self.table_number,
            "player_a": self.player_a.to_dict(),
            "player_b": self.player_b.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        return cls(
            player_a=Participant.from_dict(data["player_a"]),
            player_b=Participant.from_dict(data["player_b"]),
            sequence_number=data["sequence_number"],
            round_number=data["round_number"],
            table_number=data.get("table_number"),
        )

    def __str__(self) -> str:
        return f"#{self.sequence_number}: {self.player_a} vs {self.player_b}"


@dataclass(frozen=True)
class MatchOutcome:
    """A finished match as handed to the result sink.

    The sink persists it and runs the rating update; nothing here knows how
    ratings change.
    """

    match: Match
    winner_id: PlayerId

    @property
    def loser_id(self) -> PlayerId:
        return self.match.opponent_of(self.winner_id).id

    @property
    def winner(self) -> Participant:
        return self.match.opponent_of(self.loser_id)

    @property
    def loser(self) -> Participant:
        return self.match.opponent_of(self.winner_id)
