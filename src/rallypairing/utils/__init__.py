"""Shared helpers for Rally Pairing."""

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

import logging
import os
import sys

from rallypairing.constants import (
    DEFAULT_LOG_LEVEL,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
    LOG_LEVEL_ENV_VAR,
)

_PACKAGE_LOGGER = "rallypairing"


def _configure_package_logger() -> logging.Logger:
    """Attach the console handler to the package logger once."""
    root = logging.getLogger(_PACKAGE_LOGGER)
    if root.handlers:
        return root

    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    return root


def setup_logger(name: str) -> logging.Logger:
    """Return a module logger living under the package logger.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        The configured logger
    """
    _configure_package_logger()
    return logging.getLogger(name)


def set_log_level(level: str) -> None:
    """Change the package log level at runtime (e.g. from a ``--verbose`` flag)."""
    _configure_package_logger().setLevel(level.upper())
