"""Rally Pairing: fair, rating-aware match scheduling for club sessions.

Schedules pairwise matches over repeated rounds (random and rating-proximity
rounds alternate), skipping pairs that already played, and feeds the result
onto a fixed number of live tables.
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

from rallypairing.controllers import (
    AssignerState,
    LiveTableAssigner,
    SessionController,
    SessionStatus,
    force_finish,
    init_assigner,
    record_result,
)
from rallypairing.models import (
    ExclusionSet,
    Match,
    MatchOutcome,
    Participant,
    SessionConfig,
    extend_exclusions,
    pair_key,
)
from rallypairing.pairing import ScheduleGenerator, count_matches, generate_schedule

__version__ = "0.1.0"

__all__ = [
    "AssignerState",
    "ExclusionSet",
    "LiveTableAssigner",
    "Match",
    "MatchOutcome",
    "Participant",
    "ScheduleGenerator",
    "SessionConfig",
    "SessionController",
    "SessionStatus",
    "count_matches",
    "extend_exclusions",
    "force_finish",
    "generate_schedule",
    "init_assigner",
    "pair_key",
    "record_result",
]
