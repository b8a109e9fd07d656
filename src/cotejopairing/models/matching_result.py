"""MatchingResult and BalanceResult data classes."""

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

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from cotejopairing.models.competitor import Competitor
from cotejopairing.models.fight import Fight


class MatchStatus(Enum):
    """How a matching call ended."""

    COMPLETE = "complete"  # search finished (greedy always ends here)
    INFEASIBLE = "infeasible"  # no perfect matching exists
    ABORTED = "aborted"  # search guard fired, treated like INFEASIBLE


@dataclass
class MatchingResult:
    """Fights and leftovers produced by one matching call.

    Attributes
    ----------
    fights : list of Fight
        Unnumbered fights, in the order the matcher produced them.
    leftovers : list of Competitor
        Input competitors the matcher could not place.
    status : MatchStatus
        ``INFEASIBLE`` and ``ABORTED`` results never carry fights.
    strategy : str
        Name of the matcher that produced the result.
    """

    fights: List[Fight] = field(default_factory=list)
    leftovers: List[Competitor] = field(default_factory=list)
    status: MatchStatus = MatchStatus.COMPLETE
    strategy: str = ""

    @property
    def is_feasible(self) -> bool:
        return self.status is MatchStatus.COMPLETE

    @property
    def competitor_count(self) -> int:
        return 2 * len(self.fights) + len(self.leftovers)

    def check_accounting(self, input_size: int) -> bool:
        """Every input competitor is either in a fight or a leftover."""
        return self.competitor_count == input_size

    @classmethod
    def infeasible(
        cls,
        pool: List[Competitor],
        strategy: str,
        status: MatchStatus = MatchStatus.INFEASIBLE,
    ) -> "MatchingResult":
        """All of ``pool`` reported as leftovers."""
        return cls(fights=[], leftovers=list(pool), status=status, strategy=strategy)


@dataclass
class BalanceResult:
    """Outcome of per-team contribution balancing.

    Attributes
    ----------
    contribution_per_team : int
        Competitors each team supplies to the main bracket.
    initial_contribution : int
        Smallest roster size before the parity adjustment.
    selected_pool : list of Competitor
        Main-bracket pool, team by team, lightest first.
    excluded : list of Competitor
        Competitors left out of the main bracket (leftovers for the phase).
    team_ids : list of str
        Participating teams, in roster order.
    note : str or None
        Advisory message when the contribution was decremented.
    """

    contribution_per_team: int
    initial_contribution: int
    selected_pool: List[Competitor] = field(default_factory=list)
    excluded: List[Competitor] = field(default_factory=list)
    team_ids: List[str] = field(default_factory=list)
    note: Optional[str] = None

    @property
    def was_adjusted(self) -> bool:
        return self.contribution_per_team != self.initial_contribution

    def selection_by_team(self) -> Dict[str, List[Competitor]]:
        selection: Dict[str, List[Competitor]] = {team_id: [] for team_id in self.team_ids}
        for competitor in self.selected_pool:
            selection.setdefault(competitor.team_id, []).append(competitor)
        return selection
