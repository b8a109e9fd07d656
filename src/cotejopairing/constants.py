# Cotejo Pairing
# Copyright (C) 2025  Cotejo Pairing developers
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
EVENT_FILE_EXTENSION = ".json"

# Weight conversion factors (everything is compared in grams)
GRAMS_PER_POUND = 453.592
GRAMS_PER_OUNCE = 28.3495

# Closeness score: one month of age difference "costs" the same as 100 g
AGE_WEIGHT_GRAMS_PER_MONTH = 100
# Age substituted for a competitor without a recorded age
ABSENT_AGE_MONTHS = 1

# Default event settings
DEFAULT_WEIGHT_TOLERANCE = 50.0  # grams
DEFAULT_AGE_TOLERANCE_MONTHS = 2
DEFAULT_POINTS_FOR_WIN = 3
DEFAULT_POINTS_FOR_DRAW = 1
DEFAULT_BALANCE_CONTRIBUTION = True
DEFAULT_SCORE_INDIVIDUAL_FIGHTS = True

# Fight outcomes (for serialization)
OUTCOME_PENDING = "pending"
OUTCOME_WIN_FIRST = "win_first"
OUTCOME_WIN_SECOND = "win_second"
OUTCOME_DRAW = "draw"

# Matching phases
PHASE_MAIN = "main"
PHASE_INDIVIDUAL = "individual"

# Matching strategies
STRATEGY_EXACT = "exact"
STRATEGY_GREEDY = "greedy"
DEFAULT_STRATEGY = STRATEGY_EXACT

# Environment variable read by setup_logger
LOG_LEVEL_ENV = "COTEJO_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
