"""Fight ledger, standings and event orchestration."""

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

from cotejopairing.tournament.ledger import FightLedger, number_fights
from cotejopairing.tournament.standings import StandingsCalculator, compute_standings
from cotejopairing.tournament.tournament import (
    MatchmakingDraft,
    Tournament,
    TournamentSummary,
)

__all__ = [
    "FightLedger",
    "MatchmakingDraft",
    "StandingsCalculator",
    "Tournament",
    "TournamentSummary",
    "compute_standings",
    "number_fights",
]
