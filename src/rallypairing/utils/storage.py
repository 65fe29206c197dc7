"""JSON loading and saving for rosters, match history and schedules."""

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

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Collection, Iterable, List, Optional, Tuple, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from rallypairing.constants import DEFAULT_HISTORY_WINDOW_DAYS
from rallypairing.exceptions import (
    FileLoadException,
    FileSaveException,
    InvalidConfigurationException,
    InvalidPlayerDataException,
)
from rallypairing.models.exclusion_set import ExclusionSet
from rallypairing.models.match import Match
from rallypairing.models.participant import Participant
from rallypairing.models.session_config import SessionConfig
from rallypairing.type_hints import PlayerId
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)

PathLike = Union[str, Path]


def _read_json(path: PathLike) -> Any:
    file_path = Path(path)
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise FileLoadException(f"File not found: {file_path}") from e
    except json.JSONDecodeError as e:
        raise FileLoadException(f"Invalid JSON in {file_path}: {e}") from e
    except OSError as e:
        raise FileLoadException(f"Cannot read {file_path}: {e}") from e


def load_roster(path: PathLike) -> List[Participant]:
    """Load participants from a JSON file.

    The file holds either a list of ``{"id", "name", "rating"}`` objects or
    an object with such a list under ``"participants"``.

    Raises:
        FileLoadException: If the file is missing or not a roster
        InvalidPlayerDataException: If an entry is malformed
    """
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("participants")
    if not isinstance(data, list):
        raise FileLoadException(f"{path} does not contain a participant list")

    participants = []
    for position, entry in enumerate(data, start=1):
        if not isinstance(entry, dict):
            raise InvalidPlayerDataException(
                f"Roster entry {position} is not an object: {entry!r}"
            )
        participants.append(Participant.from_dict(entry))

    logger.info(f"Loaded {len(participants)} participants from {path}")
    return participants


def _as_day(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value)).date()
    except ValueError as e:
        raise InvalidConfigurationException(
            f"Date must be YYYY-MM-DD: {value!r}"
        ) from e


def history_window(
    on_date: Union[date, datetime, str], window_days: int = DEFAULT_HISTORY_WINDOW_DAYS
) -> Tuple[datetime, datetime]:
    """Return ``(start, end)`` datetimes of the history window, end exclusive."""
    day = _as_day(on_date)
    start = datetime(day.year, day.month, day.day)
    return start, start + relativedelta(days=+window_days)


def filter_history(
    records: Iterable[dict],
    on_date: Union[date, datetime, str],
    participant_ids: Optional[Collection[PlayerId]] = None,
    window_days: int = DEFAULT_HISTORY_WINDOW_DAYS,
) -> ExclusionSet:
    """Build the exclusion set from played-match records.

    Records are ``{"player_a", "player_b", "created_at"}`` objects; those
    without a parseable timestamp inside the window are ignored.
    """
    start, end = history_window(on_date, window_days)
    pairs = []
    for record in records:
        created_at = record.get("created_at")
        if not created_at:
            continue
        try:
            played_at = date_parser.isoparse(str(created_at))
        except ValueError:
            logger.warning(f"Skipping history record with bad timestamp: {created_at!r}")
            continue
        # compare in the naive local frame the window is expressed in
        played_at = played_at.replace(tzinfo=None)
        if start <= played_at < end:
            pairs.append((record.get("player_a"), record.get("player_b")))

    return ExclusionSet.from_pairs(pairs, participant_ids)


def load_history(
    path: PathLike,
    on_date: Union[date, datetime, str],
    participant_ids: Optional[Collection[PlayerId]] = None,
    window_days: int = DEFAULT_HISTORY_WINDOW_DAYS,
) -> ExclusionSet:
    """Load the exclusion set for a day from a JSON list of match records.

    Raises:
        FileLoadException: If the file is missing or not a list
    """
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("matches")
    if not isinstance(data, list):
        raise FileLoadException(f"{path} does not contain a match list")

    exclusions = filter_history(
        (r for r in data if isinstance(r, dict)), on_date, participant_ids, window_days
    )
    logger.info(f"Loaded {len(exclusions)} already-played pairs from {path}")
    return exclusions


def load_config(path: PathLike) -> SessionConfig:
    """Load session settings from a JSON file."""
    data = _read_json(path)
    if not isinstance(data, dict):
        raise FileLoadException(f"{path} does not contain a configuration object")
    return SessionConfig.from_dict(data)


def save_schedule(schedule: Iterable[Match], path: PathLike) -> None:
    """Write the numbered schedule as JSON."""
    file_path = Path(path)
    payload = {"matches": [match.to_dict() for match in schedule]}
    try:
        file_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        raise FileSaveException(f"Cannot write {file_path}: {e}") from e
    logger.info(f"Schedule saved to {file_path}")
