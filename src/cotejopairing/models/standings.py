"""StandingsRow data class."""

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

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class StandingsRow:
    """Per-team win/draw/loss/point tally.

    Rows are always rebuilt from the full fight history, never updated
    incrementally.
    """

    team_id: str
    team_name: str
    wins: int = 0
    draws: int = 0
    losses: int = 0
    points: float = 0

    @property
    def fights(self) -> int:
        return self.wins + self.draws + self.losses

    def to_dict(self) -> Dict[str, Any]:
        """Serialize standings row to dictionary."""
        return {
            "team_id": self.team_id,
            "team_name": self.team_name,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "points": self.points,
        }
