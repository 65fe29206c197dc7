"""Participant data class."""

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
from typing import Any, Dict

from rallypairing.constants import DEFAULT_RATING
from rallypairing.exceptions import InvalidPlayerDataException
from rallypairing.utils.validation import (
    validate_name,
    validate_participant_id,
    validate_rating,
    validate_rating_strict,
)


@dataclass(frozen=True)
class Participant:
    """A rated participant taking part in a session.

    Instances are snapshots: a rating update after a result produces a new
    ``Participant`` for the next scheduling run, the generator never sees a
    rating change mid-run.

    Attributes
    ----------
    id : str
        Unique, opaque identifier.
    name : str
        Display name.
    rating : float
        Skill rating used for proximity pairing.
    """

    id: str
    name: str
    rating: float = DEFAULT_RATING

    def __post_init__(self) -> None:
        # ids are opaque; pair keys and result lookups compare them as strings
        if not isinstance(self.id, str):
            object.__setattr__(self, "id", str(self.id))

    def with_rating(self, rating: float) -> "Participant":
        """Return a copy carrying an externally updated rating.

        Raises
        ------
        RatingValidationException
            If the new rating is not a finite number in range.
        """
        return Participant(
            id=self.id, name=self.name, rating=validate_rating_strict(rating)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize participant to dictionary."""
        return {"id": self.id, "name": self.name, "rating": self.rating}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Participant":
        """Deserialize participant from dictionary.

        Raises
        ------
        InvalidPlayerDataException
            If the id, name or rating is missing or malformed.
        """
        id_result = validate_participant_id(data.get("id"))
        if not id_result:
            raise InvalidPlayerDataException(id_result.error_message)

        name_result = validate_name(data.get("name"))
        if not name_result:
            raise InvalidPlayerDataException(
                f"{name_result.error_message} (participant {id_result.sanitized_value})"
            )

        raw_rating = data.get("rating")
        if raw_rating is None:
            rating = DEFAULT_RATING
        else:
            rating_result = validate_rating(raw_rating)
            if not rating_result:
                raise InvalidPlayerDataException(
                    f"{rating_result.error_message} (participant {id_result.sanitized_value})"
                )
            rating = rating_result.sanitized_value

        return cls(
            id=id_result.sanitized_value,
            name=name_result.sanitized_value,
            rating=rating,
        )

    def __str__(self) -> str:
        return f"{self.name} ({round(self.rating)})"
