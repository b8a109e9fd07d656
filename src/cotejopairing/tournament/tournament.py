"""Event orchestration - from registered rosters to standings.

A ``Tournament`` walks an event through its phases:

1. ``run_matchmaking`` balances the contribution of each team and pairs the
   main bracket. The result is a draft and may be re-run (reshuffled).
2. ``start`` commits the main fights to the ledger and numbers them.
3. ``generate_individual_fights`` pairs the competitors left without a
   fight, numbering the new fights after the main ones.
4. ``record_result`` writes outcomes during live play and ``standings``
   rebuilds the team table from them.
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

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from cotejopairing.constants import DEFAULT_STRATEGY, STRATEGY_EXACT
from cotejopairing.exceptions import (
    DuplicateCompetitorException,
    InsufficientTeamsException,
    TournamentException,
    TournamentStateException,
    UnknownTeamException,
)
from cotejopairing.models.competitor import Competitor
from cotejopairing.models.factory import create_competitor_from_dict
from cotejopairing.models.fight import Fight, Outcome, Phase
from cotejopairing.models.matching_result import BalanceResult, MatchingResult
from cotejopairing.models.rules import RuleSet
from cotejopairing.models.standings import StandingsRow
from cotejopairing.models.team import Team
from cotejopairing.pairing import get_matcher, group_by_team, match_greedy
from cotejopairing.pairing.balancer import balance_contribution
from cotejopairing.pairing.exact import split_odd_pool
from cotejopairing.tournament.ledger import FightLedger
from cotejopairing.tournament.standings import compute_standings
from cotejopairing.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class MatchmakingDraft:
    """Main bracket proposal that has not been committed yet.

    Attributes:
        result: Output of the main matcher over ``pool``
        pool: Competitors given to the main matcher
        balance: Balancing outcome, ``None`` when balancing was not possible
        pre_leftovers: Competitors kept out of the matcher (not selected by
            the balancer, or removed to make the pool even)
        notes: Advisory messages for the organizer
    """

    result: MatchingResult
    pool: List[Competitor] = field(default_factory=list)
    balance: Optional[BalanceResult] = None
    pre_leftovers: List[Competitor] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    @property
    def fights(self) -> List[Fight]:
        return self.result.fights

    @property
    def unpaired(self) -> List[Competitor]:
        """Everybody without a main fight."""
        return self.result.leftovers + self.pre_leftovers

    @property
    def pool_size(self) -> int:
        return self.result.competitor_count


@dataclass
class TournamentSummary:
    """Headline numbers of an event."""

    contribution_per_team: Dict[str, int]
    rounds: int
    main_competitors: int
    main_fights: int
    individual_fights: int
    unpaired: int
    pending_fights: int
    decided_fights: int
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contribution_per_team": dict(self.contribution_per_team),
            "rounds": self.rounds,
            "main_competitors": self.main_competitors,
            "main_fights": self.main_fights,
            "individual_fights": self.individual_fights,
            "unpaired": self.unpaired,
            "pending_fights": self.pending_fights,
            "decided_fights": self.decided_fights,
            "notes": list(self.notes),
        }


class Tournament:
    """One event: registered teams and competitors, its rules and its fights.

    The tournament owns a ``FightLedger``; everything it reports is derived
    from the ledger and the registered rosters.
    """

    def __init__(
        self,
        teams: Sequence[Team],
        competitors: Sequence[Competitor],
        rules: Optional[RuleSet] = None,
    ) -> None:
        """Register an event.

        Args:
            teams: Participating teams, in display order
            competitors: Every registered competitor
            rules: Event rules (default: the usual event defaults)

        Raises:
            TournamentException: If two teams share an id
            UnknownTeamException: If a competitor references an unknown team
            DuplicateCompetitorException: If two competitors share an id
        """
        self.rules = rules if rules is not None else RuleSet.event_defaults()
        self.teams: List[Team] = list(teams)
        self.competitors: List[Competitor] = list(competitors)
        self._check_registration()

        self.ledger = FightLedger()
        self.draft: Optional[MatchmakingDraft] = None
        self._started = False
        self._unpaired: List[Competitor] = []

    def _check_registration(self) -> None:
        team_ids = set()
        for team in self.teams:
            if team.id in team_ids:
                raise TournamentException(f"Duplicate team id: {team.id}")
            team_ids.add(team.id)

        seen = set()
        for competitor in self.competitors:
            if competitor.team_id not in team_ids:
                raise UnknownTeamException(
                    f"Competitor {competitor.id} references unknown team {competitor.team_id}"
                )
            if competitor.id in seen:
                raise DuplicateCompetitorException(f"Duplicate competitor id: {competitor.id}")
            seen.add(competitor.id)

    # ========== Properties ==========

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def competitors_by_id(self) -> Dict[str, Competitor]:
        return {c.id: c for c in self.competitors}

    @property
    def teams_by_id(self) -> Dict[str, Team]:
        return {t.id: t for t in self.teams}

    @property
    def main_fights(self) -> List[Fight]:
        """Committed main fights, or the draft ones before ``start``."""
        if self._started:
            return self.ledger.fights_for_phase(Phase.MAIN)
        return list(self.draft.fights) if self.draft else []

    @property
    def individual_fights(self) -> List[Fight]:
        return self.ledger.fights_for_phase(Phase.INDIVIDUAL)

    @property
    def unpaired(self) -> List[Competitor]:
        """Competitors currently without a fight."""
        if self._started:
            return list(self._unpaired)
        if self.draft is not None:
            return self.draft.unpaired
        return list(self.competitors)

    def team_name(self, team_id: str) -> str:
        team = self.teams_by_id.get(team_id)
        return team.name if team else team_id

    # ========== Matchmaking ==========

    def run_matchmaking(
        self,
        strategy: str = DEFAULT_STRATEGY,
        shuffle: bool = False,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        fallback_to_greedy: bool = False,
        max_steps: Optional[int] = None,
        time_limit: Optional[float] = None,
    ) -> MatchmakingDraft:
        """Build (or rebuild) the main bracket draft.

        Args:
            strategy: Main matcher name, "exact" or "greedy"
            shuffle: Exact matcher only, try partners in random order
            seed: Seed for the shuffle generator
            rng: Explicit generator for shuffle mode, overrides ``seed``
            fallback_to_greedy: Pair greedily when no perfect matching exists
            max_steps: Exact matcher search step guard
            time_limit: Exact matcher search time guard, in seconds

        Returns:
            The new draft, also stored on ``self.draft``

        Raises:
            TournamentStateException: If the main fights are already committed
            UnknownStrategyException: If ``strategy`` is not registered
        """
        if self._started:
            raise TournamentStateException(
                "Main fights are already committed; matchmaking cannot be re-run"
            )

        if strategy == STRATEGY_EXACT:
            matcher = get_matcher(
                strategy,
                shuffle=shuffle,
                seed=seed,
                rng=rng,
                max_steps=max_steps,
                time_limit=time_limit,
            )
        else:
            matcher = get_matcher(strategy)
            if shuffle:
                logger.debug("Shuffle ignored by the %s matcher", strategy)

        notes: List[str] = []
        rosters = group_by_team(self.teams, self.competitors)
        try:
            balance: Optional[BalanceResult] = balance_contribution(
                self.teams, rosters, self.rules
            )
            pool = list(balance.selected_pool)
            pre_leftovers = list(balance.excluded)
            if balance.note:
                notes.append(balance.note)
        except InsufficientTeamsException as exc:
            balance = None
            pool = list(self.competitors)
            pre_leftovers = []
            notes.append(f"{exc}; matching the full roster without balancing")
            logger.info(notes[-1])

        if strategy == STRATEGY_EXACT:
            pool, removed = split_odd_pool(pool)
            if removed is not None:
                pre_leftovers.append(removed)
                notes.append(
                    f"Odd pool: {removed.display_name} left out of the main bracket"
                )

        result = matcher.match(pool, self.rules, phase=Phase.MAIN)
        if not result.is_feasible:
            notes.append(
                f"No complete main bracket for {len(pool)} competitors "
                f"({result.status.value})"
            )
            if fallback_to_greedy:
                result = match_greedy(pool, self.rules, phase=Phase.MAIN)
                notes.append("Main bracket paired greedily instead")

        self.draft = MatchmakingDraft(
            result=result,
            pool=pool,
            balance=balance,
            pre_leftovers=pre_leftovers,
            notes=notes,
        )
        logger.info(
            "Matchmaking (%s): %s main fights, %s unpaired",
            result.strategy or strategy,
            len(result.fights),
            len(self.draft.unpaired),
        )
        return self.draft

    def start(self) -> List[Fight]:
        """Commit the main fights of the current draft and number them.

        Raises:
            TournamentStateException: If already started or no draft exists
        """
        if self._started:
            raise TournamentStateException("Tournament already started")
        if self.draft is None:
            raise TournamentStateException("Run matchmaking before starting")

        numbered = self.ledger.add_fights(self.draft.fights)
        self._unpaired = list(self.draft.unpaired)
        self._started = True
        logger.info(
            "Tournament started with %s main fights, %s competitors unpaired",
            len(numbered),
            len(self._unpaired),
        )
        return numbered

    def generate_individual_fights(self) -> MatchingResult:
        """Pair the unpaired competitors greedily and number their fights.

        Commits the main draft first when the tournament was not started.

        Returns:
            MatchingResult holding the numbered individual fights and the
            competitors that still have no partner

        Raises:
            TournamentStateException: If matchmaking never ran
        """
        if not self._started:
            self.start()

        result = match_greedy(self._unpaired, self.rules, phase=Phase.INDIVIDUAL)
        numbered = self.ledger.add_fights(result.fights)
        self._unpaired = list(result.leftovers)
        logger.info(
            "Individual round: %s fights, %s competitors still unpaired",
            len(numbered),
            len(self._unpaired),
        )
        return MatchingResult(
            fights=numbered,
            leftovers=list(result.leftovers),
            status=result.status,
            strategy=result.strategy,
        )

    # ========== Live play ==========

    def record_result(
        self, fight_id: str, outcome: Union[Outcome, str], duration: float
    ) -> Fight:
        """Record a fight outcome; see ``FightLedger.record_outcome``."""
        return self.ledger.record_outcome(fight_id, outcome, duration)

    def record_result_by_sequence(
        self, sequence: int, outcome: Union[Outcome, str], duration: float
    ) -> Fight:
        """Record the outcome of the fight numbered ``sequence``."""
        fight = self.ledger.get_by_sequence(sequence)
        return self.ledger.record_outcome(fight.id, outcome, duration)

    def standings(self) -> List[StandingsRow]:
        return compute_standings(self.teams, self.ledger.fights, self.rules)

    def summary(self) -> TournamentSummary:
        """Headline numbers of the event in its current state."""
        main_fights = self.main_fights
        contribution: Dict[str, int] = {team.id: 0 for team in self.teams}
        for fight in main_fights:
            for competitor in fight.competitors:
                contribution[competitor.team_id] = contribution.get(competitor.team_id, 0) + 1

        balance = self.draft.balance if self.draft else None
        # balanced pool size, paired or not
        main_competitors = (
            len(balance.selected_pool) if balance else 2 * len(main_fights)
        )
        return TournamentSummary(
            contribution_per_team=contribution,
            rounds=balance.contribution_per_team if balance else 0,
            main_competitors=main_competitors,
            main_fights=len(main_fights),
            individual_fights=len(self.individual_fights),
            unpaired=len(self.unpaired),
            pending_fights=len(self.ledger.pending_fights),
            decided_fights=len(self.ledger.decided_fights),
            notes=list(self.draft.notes) if self.draft else [],
        )

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize event to the JSON event file layout."""
        return {
            "rules": self.rules.to_dict(),
            "teams": [t.to_dict() for t in self.teams],
            "competitors": [c.to_dict() for c in self.competitors],
            "fights": self.ledger.to_dict()["fights"],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tournament":
        """Load an event; stored fights mark the tournament as started.

        Competitors without a stored fight are considered unpaired.
        """
        rules = RuleSet.from_dict(data["rules"]) if "rules" in data else None
        teams = [Team.from_dict(t) for t in data.get("teams", [])]
        competitors = [create_competitor_from_dict(c) for c in data.get("competitors", [])]
        tournament = cls(teams, competitors, rules)

        if data.get("fights"):
            tournament.ledger = FightLedger.from_dict(
                {"fights": data["fights"]}, tournament.competitors_by_id
            )
            tournament.draft = MatchmakingDraft(
                result=MatchingResult(
                    fights=tournament.ledger.fights_for_phase(Phase.MAIN)
                )
            )
            tournament._started = True
            fighting = {
                c.id for fight in tournament.ledger.fights for c in fight.competitors
            }
            tournament._unpaired = [
                c for c in tournament.competitors if c.id not in fighting
            ]
        return tournament
