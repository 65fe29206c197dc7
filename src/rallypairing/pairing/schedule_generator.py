"""Round-based schedule generation with alternating pairing policies.

Odd rounds pair participants at random, even rounds walk the roster from the
highest rating down and give each participant the closest-rated opponent still
available. Every round gives each participant at most one match, so nobody
reaches their n-th match while someone else who could still play is stuck
below n - 1.
"""

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

import random
from itertools import combinations
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from rallypairing.constants import POLICY_PROXIMITY, POLICY_RANDOM
from rallypairing.exceptions import DuplicatePlayerException, InvalidQuotaException
from rallypairing.models.exclusion_set import ExclusionSet
from rallypairing.models.match import Match
from rallypairing.models.participant import Participant
from rallypairing.type_hints import MatchCounts, RoundPolicy, Schedule
from rallypairing.utils import setup_logger
from rallypairing.utils.validation import validate_positive_integer

logger = setup_logger(__name__)


def round_policy(round_number: int) -> RoundPolicy:
    """Odd rounds pair at random, even rounds by rating proximity."""
    return POLICY_RANDOM if round_number % 2 == 1 else POLICY_PROXIMITY


class _CandidatePool:
    """Not-yet-excluded pairs as an index array plus a consumed bitmap.

    Pairs hold roster indices ``(i, j)`` with ``i < j``; their order is the
    pool order used for tie-breaking.
    """

    def __init__(self, roster: Sequence[Participant], exclusions: ExclusionSet):
        self.pairs: List[Tuple[int, int]] = [
            (i, j)
            for i, j in combinations(range(len(roster)), 2)
            if not exclusions.contains(roster[i].id, roster[j].id)
        ]
        self.consumed: List[bool] = [False] * len(self.pairs)
        self.remaining = len(self.pairs)

        # pair indices per participant, ascending, so lookups keep pool order
        self._by_player: Dict[int, List[int]] = {i: [] for i in range(len(roster))}
        for pair_index, (i, j) in enumerate(self.pairs):
            self._by_player[i].append(pair_index)
            self._by_player[j].append(pair_index)

    def open_pairs(self, player_index: int) -> Iterator[Tuple[int, int]]:
        """Yield ``(pair_index, opponent_index)`` for unconsumed pairs of a player."""
        for pair_index in self._by_player[player_index]:
            if self.consumed[pair_index]:
                continue
            i, j = self.pairs[pair_index]
            yield pair_index, (j if i == player_index else i)

    def consume(self, pair_index: int) -> None:
        self.consumed[pair_index] = True
        self.remaining -= 1

    def __len__(self) -> int:
        return len(self.pairs)

    @property
    def exhausted(self) -> bool:
        return self.remaining == 0


class ScheduleGenerator:
    """Builds the ordered match list for one session.

    The random source is injectable so that tests can pin the outcome of the
    random rounds. Any object with ``shuffle`` and ``choice`` methods that
    behave like :class:`random.Random` works.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def generate(
        self,
        participants: Iterable[Participant],
        exclusions: Optional[ExclusionSet],
        quota: int,
    ) -> Schedule:
        """Generate the schedule.

        Args:
            participants: Roster snapshot for this run
            exclusions: Pairs that must not be scheduled (``None`` for none)
            quota: Maximum number of matches per participant

        Returns:
            Matches in play order. Empty when fewer than two participants
            are given or no pair is allowed; participants may end up with
            fewer than ``quota`` matches when no legal opponent remains.

        Raises:
            InvalidQuotaException: If quota is not a positive integer
            DuplicatePlayerException: If a participant id appears twice
        """
        quota_result = validate_positive_integer(quota, "Quota")
        if not quota_result:
            logger.error(f"Rejected schedule request: {quota_result.error_message}")
            raise InvalidQuotaException(quota_result.error_message)
        quota = quota_result.sanitized_value

        roster = list(participants)
        _check_unique_ids(roster)

        if exclusions is None:
            exclusions = ExclusionSet()
        elif not isinstance(exclusions, ExclusionSet):
            exclusions = ExclusionSet(exclusions)

        if len(roster) < 2:
            logger.info("Fewer than two participants, nothing to schedule")
            return []

        # shuffled once per call so pool order (and even-round ties) vary
        # between sessions but stay fixed within this one
        self.rng.shuffle(roster)

        pool = _CandidatePool(roster, exclusions)
        if not pool.pairs:
            logger.info(
                f"All {len(roster) * (len(roster) - 1) // 2} pairs are excluded, "
                "nothing to schedule"
            )
            return []

        counts = [0] * len(roster)
        schedule: Schedule = []

        for round_number in range(1, quota + 1):
            eligible = [i for i in range(len(roster)) if counts[i] < quota]
            if len(eligible) < 2:
                break

            policy = round_policy(round_number)
            if policy == POLICY_RANDOM:
                order = list(eligible)
                self.rng.shuffle(order)
            else:
                order = sorted(eligible, key=lambda i: roster[i].rating, reverse=True)

            made = self._play_round(
                roster, pool, counts, order, policy, round_number, quota, schedule
            )
            logger.debug(
                f"Round {round_number} ({policy}): {len(eligible)} eligible, "
                f"{made} matches, {pool.remaining} pairs left"
            )

            if made == 0:
                break
            if pool.exhausted:
                break

        logger.info(
            f"Generated {len(schedule)} matches for {len(roster)} participants "
            f"(quota {quota}, {len(exclusions)} excluded pairs)"
        )
        return schedule

    def _play_round(
        self,
        roster: Sequence[Participant],
        pool: _CandidatePool,
        counts: List[int],
        order: Sequence[int],
        policy: RoundPolicy,
        round_number: int,
        quota: int,
        schedule: Schedule,
    ) -> int:
        """Pair participants of one round in ``order``; return matches made."""
        matched_this_round: Set[int] = set()
        made = 0

        for player_index in order:
            if player_index in matched_this_round or counts[player_index] >= quota:
                continue

            options = [
                (pair_index, opponent)
                for pair_index, opponent in pool.open_pairs(player_index)
                if opponent not in matched_this_round and counts[opponent] < quota
            ]
            if not options:
                # no retry later in the round
                continue

            if policy == POLICY_RANDOM:
                pair_index, _ = self.rng.choice(options)
            else:
                pair_index = _closest_rated(roster, player_index, options)

            i, j = pool.pairs[pair_index]
            pool.consume(pair_index)
            matched_this_round.update((i, j))
            counts[i] += 1
            counts[j] += 1
            schedule.append(
                Match(
                    player_a=roster[i],
                    player_b=roster[j],
                    sequence_number=len(schedule) + 1,
                    round_number=round_number,
                )
            )
            made += 1

        return made


def _closest_rated(
    roster: Sequence[Participant],
    player_index: int,
    options: Sequence[Tuple[int, int]],
) -> int:
    """Pick the option with the smallest rating gap, first in pool order on ties."""
    rating = roster[player_index].rating
    best_pair_index = options[0][0]
    best_diff = float("inf")
    for pair_index, opponent in options:
        diff = abs(rating - roster[opponent].rating)
        if diff < best_diff:
            best_diff = diff
            best_pair_index = pair_index
    return best_pair_index


def _check_unique_ids(roster: Sequence[Participant]) -> None:
    seen: Set[str] = set()
    for participant in roster:
        if participant.id in seen:
            logger.error(f"Duplicate participant id in roster: {participant.id}")
            raise DuplicatePlayerException(
                f"Participant id appears more than once: {participant.id}"
            )
        seen.add(participant.id)


def generate_schedule(
    participants: Iterable[Participant],
    exclusions: Optional[ExclusionSet],
    quota: int,
    rng: Optional[random.Random] = None,
) -> Schedule:
    """Generate a session schedule; see :meth:`ScheduleGenerator.generate`."""
    return ScheduleGenerator(rng).generate(participants, exclusions, quota)


def count_matches(
    schedule: Iterable[Match], participants: Optional[Iterable[Participant]] = None
) -> MatchCounts:
    """Count scheduled matches per participant id.

    Passing the roster includes participants with zero matches, which is how
    callers spot a quota shortfall.
    """
    counts: MatchCounts = {}
    if participants is not None:
        counts.update((p.id, 0) for p in participants)
    for match in schedule:
        for player_id in match.player_ids:
            counts[player_id] = counts.get(player_id, 0) + 1
    return counts
