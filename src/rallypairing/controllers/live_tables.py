"""Live table assignment.

Feeds a generated schedule into a fixed number of tables: the first matches
go straight onto tables, the rest wait in schedule order and move up one at a
time as results free tables.
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

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set, Tuple

from rallypairing.exceptions import (
    InvalidTableCountException,
    InvalidWinnerException,
    SessionStateException,
    TableNotOccupiedException,
)
from rallypairing.models.match import Match
from rallypairing.type_hints import PlayerId
from rallypairing.utils import setup_logger
from rallypairing.utils.validation import validate_positive_integer

logger = setup_logger(__name__)


class SessionStatus(Enum):
    """Lifecycle of a live table session."""

    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


@dataclass(frozen=True)
class AssignerState:
    """Snapshot of the tables and the waiting queue.

    Attributes
    ----------
    tables : tuple of Match or None
        Entry ``n - 1`` is the match on table ``n``, ``None`` when free.
    waiting : tuple of Match
        Matches not yet on a table, in schedule order.
    status : SessionStatus
        Where the session is in its lifecycle.
    """

    tables: Tuple[Optional[Match], ...] = ()
    waiting: Tuple[Match, ...] = ()
    status: SessionStatus = SessionStatus.IDLE

    @property
    def table_count(self) -> int:
        return len(self.tables)

    @property
    def is_finished(self) -> bool:
        return self.status is SessionStatus.FINISHED

    def table(self, table_number: int) -> Optional[Match]:
        """Return the match on a table, or ``None`` if free or unknown."""
        if 1 <= table_number <= len(self.tables):
            return self.tables[table_number - 1]
        return None

    def occupied_tables(self) -> Dict[int, Match]:
        return {n: m for n, m in enumerate(self.tables, start=1) if m is not None}

    def free_tables(self) -> List[int]:
        return [n for n, m in enumerate(self.tables, start=1) if m is None]

    def playing_ids(self) -> Set[PlayerId]:
        """Ids of participants currently at a table."""
        ids: Set[PlayerId] = set()
        for match in self.tables:
            if match is not None:
                ids.update(match.player_ids)
        return ids

    def remaining(self) -> List[Match]:
        """Matches still to finish: those on tables, then the queue."""
        on_tables = sorted(
            (m for m in self.tables if m is not None), key=lambda m: m.sequence_number
        )
        return on_tables + list(self.waiting)


def init_assigner(schedule: Iterable[Match], table_count: int) -> AssignerState:
    """Place the first ``table_count`` matches on tables and queue the rest.

    An empty schedule yields a finished state straight away.

    Raises:
        InvalidTableCountException: If table_count is not a positive integer
    """
    result = validate_positive_integer(table_count, "Table count")
    if not result:
        logger.error(f"Rejected assigner start: {result.error_message}")
        raise InvalidTableCountException(result.error_message)
    table_count = result.sanitized_value

    matches = list(schedule)
    tables: List[Optional[Match]] = [None] * table_count
    for index, match in enumerate(matches[:table_count]):
        tables[index] = match.with_table(index + 1)
    waiting = tuple(match.with_table(None) for match in matches[table_count:])

    status = SessionStatus.RUNNING if matches else SessionStatus.FINISHED
    logger.info(
        f"Started {len(matches)} matches on {table_count} tables "
        f"({len(waiting)} waiting)"
    )
    return AssignerState(tables=tuple(tables), waiting=waiting, status=status)


def record_result(
    state: AssignerState, table_number: int, winner_id: PlayerId
) -> Tuple[AssignerState, bool]:
    """Close the match on a table and move the next queued match onto it.

    Nothing about the winner is computed here; the id is only checked
    against the two players at the table.

    Args:
        state: Current assigner state
        table_number: 1-based table whose match has finished
        winner_id: Id of the winning participant

    Returns:
        ``(new_state, session_complete)``; ``session_complete`` is True when
        every table and the queue are empty afterwards.

    Raises:
        SessionStateException: If the session is not running
        TableNotOccupiedException: If the table does not exist or is free
        InvalidWinnerException: If the winner did not play at that table
    """
    if state.status is not SessionStatus.RUNNING:
        logger.warning(f"Result for table {table_number} rejected: session {state.status.value}")
        raise SessionStateException(
            f"Cannot record a result while the session is {state.status.value}"
        )

    match = (
        state.table(table_number)
        if isinstance(table_number, int) and not isinstance(table_number, bool)
        else None
    )
    if match is None:
        logger.warning(f"Result rejected: no match on table {table_number}")
        raise TableNotOccupiedException(f"No match is being played on table {table_number}")

    if not match.involves(str(winner_id)):
        logger.warning(
            f"Result rejected: {winner_id} does not play on table {table_number}"
        )
        raise InvalidWinnerException(
            f"{winner_id} is not one of the players on table {table_number}: "
            f"{match.player_a.id} / {match.player_b.id}"
        )

    tables = list(state.tables)
    waiting = state.waiting
    if waiting:
        tables[table_number - 1] = waiting[0].with_table(table_number)
        waiting = waiting[1:]
    else:
        tables[table_number - 1] = None

    complete = not waiting and all(m is None for m in tables)
    new_state = AssignerState(
        tables=tuple(tables),
        waiting=waiting,
        status=SessionStatus.FINISHED if complete else SessionStatus.RUNNING,
    )

    logger.debug(
        f"Table {table_number}: match {match.sequence_number} won by {winner_id}"
    )
    if complete:
        logger.info("All matches finished")
    return new_state, complete


def force_finish(state: AssignerState) -> AssignerState:
    """Clear every table and the queue, ending the session."""
    if state.remaining():
        logger.info(f"Session finished early with {len(state.remaining())} matches unplayed")
    return AssignerState(
        tables=(None,) * state.table_count,
        waiting=(),
        status=SessionStatus.FINISHED,
    )


class LiveTableAssigner:
    """Stateful wrapper around the assigner functions.

    Holds the current :class:`AssignerState` so that a front end can simply
    call :meth:`record_result` as results come in. Calls must be serialised
    by the caller.
    """

    def __init__(self, schedule: Iterable[Match], table_count: int):
        self.state = init_assigner(schedule, table_count)

    @property
    def status(self) -> SessionStatus:
        return self.state.status

    def record_result(self, table_number: int, winner_id: PlayerId) -> bool:
        """Apply a result; return True once the session is complete."""
        self.state, complete = record_result(self.state, table_number, winner_id)
        return complete

    def force_finish(self) -> None:
        self.state = force_finish(self.state)
