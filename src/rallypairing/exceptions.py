"""Exceptions for use in Rally Pairing"""

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


# ========== Base Application Exception ==========


class RallyPairingException(Exception):
    """Base exception for all Rally Pairing errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    """

    pass


# ========== Pairing Exceptions ==========


class PairingException(RallyPairingException):
    """Base exception for pairing-related errors."""

    pass


class InvalidPairException(PairingException):
    """Raised when a pair does not name two distinct participants."""

    pass


class InvalidQuotaException(PairingException):
    """Raised when the matches-per-participant quota is not a positive integer."""

    pass


class NoPairingAvailableException(PairingException):
    """Raised when a session cannot start because no valid pairing exists."""

    pass


# ========== Session Exceptions ==========


class SessionException(RallyPairingException):
    """Base exception for live table session errors."""

    pass


class SessionStateException(SessionException):
    """Raised when the session is in an invalid state for the requested operation."""

    pass


class InvalidTableCountException(SessionException):
    """Raised when the number of tables is not a positive integer."""

    pass


class TableNotOccupiedException(SessionException):
    """Raised when a result targets a table that does not exist or is empty."""

    pass


# ========== Result Exceptions ==========


class ResultException(RallyPairingException):
    """Base exception for result recording errors."""

    pass


class InvalidWinnerException(ResultException):
    """Raised when the winner is not one of the two players at the table."""

    pass


# ========== Player Exceptions ==========


class PlayerException(RallyPairingException):
    """Base exception for participant-related errors."""

    pass


class DuplicatePlayerException(PlayerException):
    """Raised when the same participant id appears twice in a roster."""

    pass


class InvalidPlayerDataException(PlayerException):
    """Raised when participant data is invalid or incomplete."""

    pass


# ========== Validation Exceptions ==========


class ValidationException(RallyPairingException):
    """Base exception for validation errors."""

    pass


class RatingValidationException(ValidationException):
    """Raised when a rating value is invalid."""

    pass


# ========== File/Resource Exceptions ==========


class ResourceException(RallyPairingException):
    """Base exception for resource-related errors."""

    pass


class FileLoadException(ResourceException):
    """Raised when a file cannot be loaded."""

    pass


class FileSaveException(ResourceException):
    """Raised when a file cannot be saved."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(RallyPairingException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
