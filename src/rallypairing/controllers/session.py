"""Session management for club nights.

This module ties schedule generation, live tables and result recording
together for one session.
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
from typing import Iterable, List, Optional

from rallypairing.controllers.live_tables import (
    AssignerState,
    SessionStatus,
    force_finish,
    init_assigner,
    record_result,
)
from rallypairing.exceptions import (
    InvalidPlayerDataException,
    NoPairingAvailableException,
    SessionStateException,
)
from rallypairing.models.exclusion_set import ExclusionSet
from rallypairing.models.match import MatchOutcome
from rallypairing.models.participant import Participant
from rallypairing.models.session_config import SessionConfig
from rallypairing.pairing.schedule_generator import ScheduleGenerator
from rallypairing.type_hints import MatchCounts, PlayerId, ResultSink, Schedule
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


class SessionController:
    """Runs one session from schedule generation to the last result.

    This class is responsible for:
    - Generating the schedule with the configured quota
    - Tracking which match is on which table
    - Growing the exclusion set as results are saved
    - Handing every result to the result sink (persistence, rating update)
    """

    def __init__(
        self,
        participants: Iterable[Participant],
        exclusions: Optional[ExclusionSet] = None,
        config: Optional[SessionConfig] = None,
        rng: Optional[random.Random] = None,
        result_sink: Optional[ResultSink] = None,
    ):
        """Initialize the session controller.

        Args:
            participants: Roster snapshot with current ratings
            exclusions: Pairs already played in the history window
            config: Session settings; defaults apply when omitted
            rng: Random source for the generator; seeded from config if omitted
            result_sink: Called with a MatchOutcome for every recorded result
        """
        self.participants: List[Participant] = list(participants)
        self.exclusions = exclusions if exclusions is not None else ExclusionSet()
        self.config = config if config is not None else SessionConfig()
        if rng is None:
            rng = random.Random(self.config.seed)
        self.generator = ScheduleGenerator(rng)
        self.result_sink = result_sink

        self.schedule: Schedule = []
        self.outcomes: List[MatchOutcome] = []
        self.state = AssignerState()

    @property
    def status(self) -> SessionStatus:
        return self.state.status

    @property
    def quota(self) -> int:
        return self.config.quota_for(len(self.participants))

    def start(self) -> Schedule:
        """Generate the schedule and put the first matches on tables.

        Returns:
            The generated schedule

        Raises:
            SessionStateException: If the session was already started
            InvalidPlayerDataException: If fewer than two participants are given
            NoPairingAvailableException: If every possible pair is excluded
        """
        if self.state.status is not SessionStatus.IDLE:
            raise SessionStateException(
                f"Session already {self.state.status.value}; start a new one instead"
            )

        if len(self.participants) < 2:
            raise InvalidPlayerDataException(
                "At least two participants are needed to start a session"
            )

        logger.info(
            f"Starting session: {len(self.participants)} participants, "
            f"quota {self.quota}, {self.config.table_count} tables"
        )
        schedule = self.generator.generate(
            self.participants, self.exclusions, self.quota
        )
        if not schedule:
            raise NoPairingAvailableException(
                "No valid pairing is left for these participants"
            )

        self.schedule = schedule
        self.state = init_assigner(schedule, self.config.table_count)
        return schedule

    def record_result(self, table_number: int, winner_id: PlayerId) -> bool:
        """Record the winner of the match on a table.

        The result sink is called first; only once it returns is the table
        refilled from the queue and the pair added to the exclusion set. If
        the sink raises, the match stays on its table and nothing changes.

        Returns:
            True if this was the last match of the session

        Raises:
            SessionStateException: If the session is not running
            TableNotOccupiedException: If the table is free or unknown
            InvalidWinnerException: If the winner did not play on that table
        """
        new_state, complete = record_result(self.state, table_number, winner_id)

        # table and winner are valid past this point
        match = self.state.table(table_number)
        outcome = MatchOutcome(match=match, winner_id=str(winner_id))

        if self.result_sink is not None:
            try:
                self.result_sink(outcome)
            except Exception:
                logger.error(
                    f"Saving result for table {table_number} failed, "
                    f"match {match.sequence_number} stays on the table"
                )
                raise

        self.state = new_state
        self.exclusions = self.exclusions.add(match.player_a.id, match.player_b.id)
        self.outcomes.append(outcome)

        logger.info(
            f"Table {table_number}: {outcome.winner.name} beat {outcome.loser.name}"
        )
        return complete

    def force_finish(self) -> None:
        """End the session now, dropping every unplayed match."""
        self.state = force_finish(self.state)

    def match_counts(self) -> MatchCounts:
        """Number of results recorded per participant id this session."""
        counts = {p.id: 0 for p in self.participants}
        for outcome in self.outcomes:
            for player_id in outcome.match.player_ids:
                counts[player_id] = counts.get(player_id, 0) + 1
        return counts
