"""Standings calculation for events.

This module folds recorded fight outcomes into a per-team table.
"""

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

from typing import Dict, Iterable, List, Optional, Sequence

from cotejopairing.models.fight import Fight, Outcome, Phase
from cotejopairing.models.rules import RuleSet
from cotejopairing.models.standings import StandingsRow
from cotejopairing.models.team import Team
from cotejopairing.utils import setup_logger

logger = setup_logger(__name__)


class StandingsCalculator:
    """Builds the standings table from the full fight history.

    The table is rebuilt from scratch on every call:
    - every team starts with a zeroed row
    - a win/loss or draw/draw is tallied for each decided fight
    - points are added only for fights of a scored phase
    - rows are ordered by points, then wins, both descending; remaining ties
      keep team order
    """

    def __init__(self, rules: RuleSet):
        self.rules = rules

    def is_scored(self, fight: Fight) -> bool:
        """Main bracket fights always score; individual ones per the rules."""
        if fight.phase is Phase.MAIN:
            return True
        return self.rules.score_individual_fights

    def compute(self, teams: Sequence[Team], fights: Iterable[Fight]) -> List[StandingsRow]:
        """Calculate standings for all teams.

        Args:
            teams: Registered teams; their order decides remaining ties
            fights: Every fight of the event, pending ones included

        Returns:
            Ordered list of StandingsRow
        """
        rows: Dict[str, StandingsRow] = {}
        for team in teams:
            rows.setdefault(team.id, StandingsRow(team_id=team.id, team_name=team.name))

        for fight in fights:
            if fight.is_pending:
                continue
            self._apply(fight, rows)

        # sorted() is stable: equal points and wins keep team order
        return sorted(rows.values(), key=lambda row: (-row.points, -row.wins))

    def _apply(self, fight: Fight, rows: Dict[str, StandingsRow]) -> None:
        first = rows.get(fight.first.team_id)
        second = rows.get(fight.second.team_id)
        if first is None or second is None:
            logger.debug(
                "Fight #%s involves an unregistered team; partially ignored",
                fight.sequence,
            )
        scored = self.is_scored(fight)

        if fight.outcome is Outcome.WIN_FIRST:
            self._add_win(first, scored)
            self._add_loss(second)
        elif fight.outcome is Outcome.WIN_SECOND:
            self._add_win(second, scored)
            self._add_loss(first)
        elif fight.outcome is Outcome.DRAW:
            self._add_draw(first, scored)
            self._add_draw(second, scored)

    def _add_win(self, row: Optional[StandingsRow], scored: bool) -> None:
        if row is None:
            return
        row.wins += 1
        if scored:
            row.points += self.rules.points_for_win

    def _add_draw(self, row: Optional[StandingsRow], scored: bool) -> None:
        if row is None:
            return
        row.draws += 1
        if scored:
            row.points += self.rules.points_for_draw

    @staticmethod
    def _add_loss(row: Optional[StandingsRow]) -> None:
        if row is not None:
            row.losses += 1


def compute_standings(
    teams: Sequence[Team], fights: Iterable[Fight], rules: RuleSet
) -> List[StandingsRow]:
    """Quick standings function; see ``StandingsCalculator``."""
    return StandingsCalculator(rules).compute(teams, fights)
