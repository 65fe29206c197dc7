"""SessionConfig data class."""

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
from typing import Any, Dict, Optional

from rallypairing.constants import DEFAULT_HISTORY_WINDOW_DAYS, DEFAULT_TABLE_COUNT
from rallypairing.exceptions import InvalidConfigurationException
from rallypairing.utils.validation import validate_positive_integer


@dataclass
class SessionConfig:
    """Session configuration settings.

    Attributes
    ----------
    quota : int or None
        Maximum matches per participant. ``None`` means one match against
        everybody else (participant count minus one).
    table_count : int
        Number of tables played on concurrently.
    seed : int or None
        Seed for the pairing random source; ``None`` draws a fresh one.
    history_window_days : int
        How many days of history count as "already played".
    """

    quota: Optional[int] = None
    table_count: int = DEFAULT_TABLE_COUNT
    seed: Optional[int] = None
    history_window_days: int = DEFAULT_HISTORY_WINDOW_DAYS

    def __post_init__(self) -> None:
        if self.quota is not None:
            self.quota = _positive(self.quota, "quota")
        self.table_count = _positive(self.table_count, "table_count")
        self.history_window_days = _positive(
            self.history_window_days, "history_window_days"
        )
        if self.seed is not None and (
            isinstance(self.seed, bool) or not isinstance(self.seed, int)
        ):
            raise InvalidConfigurationException(
                f"seed must be an integer: {self.seed!r}"
            )

    def quota_for(self, participant_count: int) -> int:
        """Resolve the quota for a roster of the given size."""
        if self.quota is not None:
            return self.quota
        return max(1, participant_count - 1)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "quota": self.quota,
            "table_count": self.table_count,
            "seed": self.seed,
            "history_window_days": self.history_window_days,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionConfig":
        """Deserialize configuration from dictionary."""
        unknown = set(data) - {"quota", "table_count", "seed", "history_window_days"}
        if unknown:
            raise InvalidConfigurationException(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            )
        return cls(
            quota=data.get("quota"),
            table_count=data.get("table_count", DEFAULT_TABLE_COUNT),
            seed=data.get("seed"),
            history_window_days=data.get(
                "history_window_days", DEFAULT_HISTORY_WINDOW_DAYS
            ),
        )


def _positive(value: Any, field_name: str) -> int:
    result = validate_positive_integer(value, field_name)
    if not result:
        raise InvalidConfigurationException(result.error_message)
    return result.sanitized_value
