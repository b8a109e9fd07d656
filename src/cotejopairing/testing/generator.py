"""Random Event Generator - seeded events for property tests and demos.

This module generates realistic events (teams and rosters) and plays their
fights with simulated outcomes. The same seed always produces the same
event.
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
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from cotejopairing.models.competitor import Competitor
from cotejopairing.models.factory import CompetitorFactory
from cotejopairing.models.fight import Fight, Outcome
from cotejopairing.models.rules import RuleSet
from cotejopairing.models.team import Team
from cotejopairing.models.weight import WeightUnit, from_grams
from cotejopairing.tournament.ledger import FightLedger
from cotejopairing.tournament.tournament import Tournament
from cotejopairing.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class EventGeneratorConfig:
    """Configuration for the Random Event Generator.

    Weights are in grams, ages in months. ``forbidden_pair_count`` random
    team pairs are added to the generated rules.
    """

    num_teams: int = 6
    roster_range: Tuple[int, int] = (1, 4)
    weight_range: Tuple[float, float] = (1800.0, 3200.0)
    age_range: Tuple[int, int] = (8, 24)
    missing_age_rate: float = 0.1
    weight_unit: WeightUnit = WeightUnit.GRAMS
    forbidden_pair_count: int = 0
    seed: Optional[int] = None
    draw_percentage: int = 10
    duration_range: Tuple[int, int] = (15, 600)


def _make_random(seed: Optional[int]) -> random.Random:
    return random.Random(seed) if seed is not None else random.Random()


class RandomEventGenerator:
    """Main event generator producing teams, rosters and rules."""

    def __init__(self, config: EventGeneratorConfig):
        if config.num_teams < 0:
            raise ValueError("num_teams must be non-negative")
        low, high = config.roster_range
        if low < 0 or high < low:
            raise ValueError(f"Invalid roster range: {config.roster_range}")
        self.config = config
        self.random = _make_random(config.seed)
        self.factory = CompetitorFactory(validate=True, strict=True)

    def create_teams(self) -> List[Team]:
        return [
            Team(id=f"t{number:02d}", name=f"Team-{number:02d}", owner=f"Owner-{number:02d}")
            for number in range(1, self.config.num_teams + 1)
        ]

    def create_competitors(self, teams: List[Team]) -> List[Competitor]:
        """Create a random roster for every team."""
        competitors: List[Competitor] = []
        low, high = self.config.roster_range
        for team in teams:
            for _ in range(self.random.randint(low, high)):
                number = len(competitors) + 1
                grams = self._generate_weight()
                competitors.append(
                    self.factory.create_competitor(
                        team_id=team.id,
                        weight=round(from_grams(grams, self.config.weight_unit), 3),
                        weight_unit=self.config.weight_unit,
                        age_months=self._generate_age(),
                        name=f"{team.name}-R{number:03d}",
                        id=f"c{number:03d}",
                    )
                )
        logger.info(
            "Created %s competitors for %s teams", len(competitors), len(teams)
        )
        return competitors

    def _generate_weight(self) -> float:
        low, high = self.config.weight_range
        # scales read to 5 g
        return float(round(self.random.uniform(low, high) / 5) * 5)

    def _generate_age(self) -> Optional[int]:
        if self.random.random() < self.config.missing_age_rate:
            return None
        return self.random.randint(*self.config.age_range)

    def create_rules(self, teams: List[Team], base: Optional[RuleSet] = None) -> RuleSet:
        rules = base if base is not None else RuleSet.event_defaults()
        ids = [team.id for team in teams]
        wanted = min(self.config.forbidden_pair_count, len(ids) * (len(ids) - 1) // 2)
        while len(rules.forbidden_pairs) < wanted:
            team_a, team_b = self.random.sample(ids, 2)
            rules = rules.with_forbidden_pair(team_a, team_b)
        return rules

    def generate_event(self, base_rules: Optional[RuleSet] = None) -> Dict[str, Any]:
        """Generate an event in the JSON event file layout."""
        teams = self.create_teams()
        competitors = self.create_competitors(teams)
        rules = self.create_rules(teams, base_rules)
        return {
            "rules": rules.to_dict(),
            "teams": [t.to_dict() for t in teams],
            "competitors": [c.to_dict() for c in competitors],
        }

    def generate_tournament(self, base_rules: Optional[RuleSet] = None) -> Tournament:
        teams = self.create_teams()
        competitors = self.create_competitors(teams)
        rules = self.create_rules(teams, base_rules)
        return Tournament(teams, competitors, rules)


class ResultSimulator:
    """Simulates fight outcomes and durations."""

    def __init__(self, config: EventGeneratorConfig):
        self.config = config
        self.random = _make_random(config.seed)

    def simulate_fight(self, fight: Fight) -> Tuple[Outcome, float]:
        """Draw an outcome; the lighter competitor has a slightly lower chance."""
        duration = float(self.random.randint(*self.config.duration_range))
        if self.random.random() < self.config.draw_percentage / 100.0:
            return Outcome.DRAW, duration

        first, second = fight.first.weight_grams, fight.second.weight_grams
        first_chance = 0.5 + max(-0.1, min(0.1, (first - second) / 1000.0))
        if self.random.random() < first_chance:
            return Outcome.WIN_FIRST, duration
        return Outcome.WIN_SECOND, duration

    def play_pending(self, ledger: FightLedger) -> List[Fight]:
        """Record a simulated outcome for every pending fight, in fight order."""
        decided = []
        for fight in ledger.pending_fights:
            outcome, duration = self.simulate_fight(fight)
            decided.append(ledger.record_outcome(fight.id, outcome, duration))
        return decided
