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

# --- Constants ---
# Rating given to participants whose roster entry has none
DEFAULT_RATING = 1500.0
MIN_RATING = 0
MAX_RATING = 4000

# Live tables
DEFAULT_TABLE_COUNT = 2

# Length of the "already played" window, in days
DEFAULT_HISTORY_WINDOW_DAYS = 1

# Round policies
POLICY_RANDOM = "random"  # odd rounds
POLICY_PROXIMITY = "proximity"  # even rounds

# Logging
LOG_LEVEL_ENV_VAR = "RALLYPAIRING_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
