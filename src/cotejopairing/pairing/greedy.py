"""Nearest-neighbor matching for leftover and individual rounds."""

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

import math
from typing import List, Optional, Sequence

from cotejopairing.constants import STRATEGY_GREEDY
from cotejopairing.models.competitor import Competitor
from cotejopairing.models.fight import Fight, Phase
from cotejopairing.models.matching_result import MatchingResult
from cotejopairing.models.rules import RuleSet
from cotejopairing.pairing.base import Matcher
from cotejopairing.pairing.compatibility import closeness, is_legal_pair
from cotejopairing.utils import setup_logger

logger = setup_logger(__name__)


def _processing_order(pool: List[Competitor]) -> List[int]:
    """Indices sorted by weight, then age (unknown age sorts as 0)."""
    return sorted(
        range(len(pool)),
        key=lambda i: (
            pool[i].weight_grams,
            pool[i].age_months if pool[i].age_months is not None else 0,
        ),
    )


class GreedyMatcher(Matcher):
    """Pair each competitor, lightest first, with its closest legal partner.

    Never backtracks. The matching is maximal but not necessarily perfect:
    some competitors may be left over even when a perfect matching exists.
    """

    name = STRATEGY_GREEDY

    def match(
        self,
        pool: Sequence[Competitor],
        rules: RuleSet,
        phase: Phase = Phase.INDIVIDUAL,
    ) -> MatchingResult:
        """Greedily pair ``pool``.

        Args:
            pool: Competitors of any count
            rules: Pairing constraints
            phase: Phase stamped on the produced fights

        Returns:
            MatchingResult with the fights and the unplaced competitors,
            leftovers in input order
        """
        pool = self._validated_pool(pool)
        consumed = [False] * len(pool)
        fights: List[Fight] = []

        for i in _processing_order(pool):
            if consumed[i]:
                continue

            best: Optional[int] = None
            best_score = math.inf
            # candidates scanned in input order; only a strictly better score wins
            for j, candidate in enumerate(pool):
                if j == i or consumed[j]:
                    continue
                if not is_legal_pair(pool[i], candidate, rules):
                    continue
                score = closeness(pool[i], candidate)
                if score < best_score:
                    best, best_score = j, score

            if best is not None:
                fights.append(Fight(first=pool[i], second=pool[best], phase=phase))
                consumed[i] = consumed[best] = True

        leftovers = [c for c, used in zip(pool, consumed) if not used]
        logger.debug(
            "Greedy matching of %s competitors: %s fights, %s leftovers",
            len(pool),
            len(fights),
            len(leftovers),
        )
        return MatchingResult(fights=fights, leftovers=leftovers, strategy=self.name)


def match_greedy(
    pool: Sequence[Competitor],
    rules: RuleSet,
    phase: Phase = Phase.INDIVIDUAL,
) -> MatchingResult:
    """Quick nearest-neighbor matching function; see ``GreedyMatcher``."""
    return GreedyMatcher().match(pool, rules, phase=phase)
