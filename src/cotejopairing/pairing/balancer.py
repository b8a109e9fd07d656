"""Per-team contribution balancing for the main bracket.

Every participating team supplies the same number of competitors to the
main bracket. That number is the smallest roster size, lowered by one when
the resulting pool would be odd.
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

from typing import Dict, Iterable, List, Mapping, Sequence

from cotejopairing.exceptions import InsufficientTeamsException
from cotejopairing.models.competitor import Competitor
from cotejopairing.models.matching_result import BalanceResult
from cotejopairing.models.rules import RuleSet
from cotejopairing.models.team import Team
from cotejopairing.utils import setup_logger

logger = setup_logger(__name__)


def group_by_team(
    teams: Sequence[Team], competitors: Iterable[Competitor]
) -> Dict[str, List[Competitor]]:
    """Build the roster index ``team id -> competitors`` (input order kept).

    Every team gets an entry, even with an empty roster. Competitors of
    unregistered teams get an entry of their own after the known teams.
    """
    rosters: Dict[str, List[Competitor]] = {team.id: [] for team in teams}
    for competitor in competitors:
        rosters.setdefault(competitor.team_id, []).append(competitor)
    return rosters


def _lightest(roster: List[Competitor], count: int) -> List[Competitor]:
    # sorted() is stable, so equal weights keep roster order
    return sorted(roster, key=lambda c: c.weight_grams)[:count]


def balance_contribution(
    teams: Sequence[Team],
    roster_by_team: Mapping[str, List[Competitor]],
    rules: RuleSet,
) -> BalanceResult:
    """Select the main-bracket pool with an equal contribution per team.

    Args:
        teams: Registered teams, in display order
        roster_by_team: Competitors of each team id
        rules: Event rules; balancing only applies when
            ``rules.balance_contribution`` is set

    Returns:
        BalanceResult with the selected pool and the excluded competitors

    Raises:
        InsufficientTeamsException: If balancing is enabled and fewer than two
            teams have at least one competitor
    """
    known_ids = {team.id for team in teams}
    participating = [team.id for team in teams if roster_by_team.get(team.id)]
    unregistered: List[Competitor] = []
    for team_id, roster in roster_by_team.items():
        if team_id not in known_ids and roster:
            logger.warning(
                "%s competitor(s) reference unregistered team %s; left out of the bracket",
                len(roster),
                team_id,
            )
            unregistered.extend(roster)

    if not rules.balance_contribution:
        pool = [c for team_id in participating for c in roster_by_team[team_id]]
        return BalanceResult(
            contribution_per_team=0,
            initial_contribution=0,
            selected_pool=pool,
            excluded=unregistered,
            team_ids=participating,
            note="Contribution balancing disabled; full roster selected",
        )

    if len(participating) < 2:
        raise InsufficientTeamsException(
            f"Contribution balancing needs at least 2 teams with competitors, "
            f"found {len(participating)}"
        )

    initial = min(len(roster_by_team[team_id]) for team_id in participating)
    final = initial
    note = None
    if initial > 0 and (len(participating) * initial) % 2 == 1:
        final = initial - 1
        note = (
            f"Contribution lowered from {initial} to {final} per team so the "
            f"main bracket has an even number of competitors"
        )
        logger.info(note)

    selected: List[Competitor] = []
    excluded: List[Competitor] = []
    for team_id in participating:
        roster = roster_by_team[team_id]
        chosen = _lightest(roster, final)
        chosen_ids = {c.id for c in chosen}
        selected.extend(chosen)
        excluded.extend(c for c in roster if c.id not in chosen_ids)
    excluded.extend(unregistered)

    logger.debug(
        "Balanced %s teams at %s competitor(s) each: %s selected, %s excluded",
        len(participating),
        final,
        len(selected),
        len(excluded),
    )
    return BalanceResult(
        contribution_per_team=final,
        initial_contribution=initial,
        selected_pool=selected,
        excluded=excluded,
        team_ids=participating,
        note=note,
    )
