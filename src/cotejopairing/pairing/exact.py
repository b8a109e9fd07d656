"""Perfect matching by backtracking search with memoization.

The search pairs the first unmatched competitor (input order) with each of
its legal partners in turn, closest first, and continues on the rest. The
first branch that pairs everybody wins, so the result is a satisfying
matching rather than an optimal one. Sub-pools already proven unsolvable
are memoized by their index set.
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
import time
from typing import List, Optional, Sequence, Set, Tuple

from cotejopairing.constants import STRATEGY_EXACT
from cotejopairing.exceptions import OddPoolException
from cotejopairing.models.competitor import Competitor
from cotejopairing.models.fight import Fight, Phase
from cotejopairing.models.matching_result import MatchingResult, MatchStatus
from cotejopairing.models.rules import RuleSet
from cotejopairing.pairing.base import Matcher
from cotejopairing.pairing.compatibility import closeness, is_legal_pair
from cotejopairing.type_hints import IndexPairing
from cotejopairing.utils import setup_logger

logger = setup_logger(__name__)

# How many expansions happen between two clock reads
_CLOCK_CHECK_INTERVAL = 256


class _SearchAborted(Exception):
    """Raised inside the search when its step or time limit is reached."""


def split_odd_pool(
    pool: Sequence[Competitor],
) -> Tuple[List[Competitor], Optional[Competitor]]:
    """Make a pool even by taking out its heaviest competitor.

    Among equally heavy competitors the last one in input order is removed.

    Returns:
        The even pool, and the removed competitor (``None`` if already even)
    """
    pool = list(pool)
    if len(pool) % 2 == 0:
        return pool, None
    heaviest_index = 0
    for index, competitor in enumerate(pool):
        if competitor.weight_grams >= pool[heaviest_index].weight_grams:
            heaviest_index = index
    removed = pool.pop(heaviest_index)
    return pool, removed


class _PerfectMatchingSearch:
    """One search over an arena of competitors addressed by index.

    The set of still-unmatched competitors is a bitmask over the arena, and
    that mask is the memo key. Only dead ends are memoized: the first
    complete branch ends the search.
    """

    def __init__(
        self,
        pool: List[Competitor],
        rules: RuleSet,
        rng: Optional[random.Random],
        max_steps: Optional[int],
        deadline: Optional[float],
    ) -> None:
        self.pool = pool
        self.rng = rng
        self.max_steps = max_steps
        self.deadline = deadline
        self.steps = 0
        self.dead_ends: Set[int] = set()
        self.partners = self._legal_partners(pool, rules)

    @staticmethod
    def _legal_partners(pool: List[Competitor], rules: RuleSet) -> List[List[int]]:
        partners = []
        for i, competitor in enumerate(pool):
            legal = [
                j
                for j, other in enumerate(pool)
                if j != i and is_legal_pair(competitor, other, rules)
            ]
            # stable sort: equal closeness keeps input order
            legal.sort(key=lambda j: closeness(competitor, pool[j]))
            partners.append(legal)
        return partners

    def run(self) -> IndexPairing:
        if any(not legal for legal in self.partners):
            # somebody has no legal partner at all
            return None
        return self._solve((1 << len(self.pool)) - 1)

    def _tick(self) -> None:
        self.steps += 1
        if self.max_steps is not None and self.steps > self.max_steps:
            raise _SearchAborted(f"step limit of {self.max_steps} reached")
        if (
            self.deadline is not None
            and self.steps % _CLOCK_CHECK_INTERVAL == 0
            and time.monotonic() > self.deadline
        ):
            raise _SearchAborted("time limit reached")

    def _expand(self, remaining: int) -> Tuple[int, int, List[int]]:
        """Open a search frame: the first unmatched index and its candidates."""
        self._tick()
        first = (remaining & -remaining).bit_length() - 1
        candidates = [j for j in self.partners[first] if remaining >> j & 1]
        if self.rng is not None:
            self.rng.shuffle(candidates)
        return remaining, first, candidates

    def _solve(self, remaining: int) -> IndexPairing:
        if remaining == 0:
            return []
        if remaining in self.dead_ends:
            return None

        # one frame per fight on an explicit stack, not the call stack
        pairs: List[Tuple[int, int]] = []
        frames = [self._expand(remaining)]
        next_candidate = [0]
        while frames:
            mask, first, candidates = frames[-1]
            position = next_candidate[-1]
            if position == len(candidates):
                self.dead_ends.add(mask)
                frames.pop()
                next_candidate.pop()
                if frames:
                    pairs.pop()
                continue

            next_candidate[-1] = position + 1
            partner = candidates[position]
            rest = mask & ~(1 << first) & ~(1 << partner)
            if rest in self.dead_ends:
                continue
            pairs.append((first, partner))
            if rest == 0:
                return pairs
            frames.append(self._expand(rest))
            next_candidate.append(0)
        return None


class ExactMatcher(Matcher):
    """Perfect matching, or a definitive "infeasible" answer.

    Attributes:
        shuffle: Try legal partners in random order instead of closest first
        rng: Random generator used in shuffle mode
        max_steps: Optional cap on search expansions
        time_limit: Optional cap on search time, in seconds

    Hitting either cap aborts the search; the result is then reported like an
    infeasible one, with status ``ABORTED``.
    """

    name = STRATEGY_EXACT

    def __init__(
        self,
        shuffle: bool = False,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        max_steps: Optional[int] = None,
        time_limit: Optional[float] = None,
    ) -> None:
        self.shuffle = shuffle
        if shuffle and rng is None:
            rng = random.Random(seed)
        self.rng = rng if shuffle else None
        self.max_steps = max_steps
        self.time_limit = time_limit

    def match(
        self,
        pool: Sequence[Competitor],
        rules: RuleSet,
        phase: Phase = Phase.MAIN,
    ) -> MatchingResult:
        """Pair every competitor in ``pool`` or report all of them as leftovers.

        Args:
            pool: Even-sized list of competitors
            rules: Pairing constraints
            phase: Phase stamped on the produced fights

        Returns:
            MatchingResult with status COMPLETE, INFEASIBLE or ABORTED

        Raises:
            OddPoolException: If the pool has an odd number of competitors
        """
        pool = self._validated_pool(pool)
        if len(pool) % 2 == 1:
            raise OddPoolException(
                f"Exact matching needs an even pool, got {len(pool)} competitors; "
                "remove one first (see split_odd_pool)"
            )
        if not pool:
            return MatchingResult(strategy=self.name)

        deadline = (
            time.monotonic() + self.time_limit if self.time_limit is not None else None
        )
        search = _PerfectMatchingSearch(
            pool, rules, self.rng, self.max_steps, deadline
        )
        try:
            pairs = search.run()
        except _SearchAborted as exc:
            logger.warning(
                "Exact matching of %s competitors aborted after %s steps: %s",
                len(pool),
                search.steps,
                exc,
            )
            return MatchingResult.infeasible(pool, self.name, MatchStatus.ABORTED)

        logger.debug(
            "Exact search over %s competitors: %s steps, %s dead ends memoized",
            len(pool),
            search.steps,
            len(search.dead_ends),
        )
        if pairs is None:
            logger.info("No perfect matching exists for %s competitors", len(pool))
            return MatchingResult.infeasible(pool, self.name)

        fights = [Fight(first=pool[i], second=pool[j], phase=phase) for i, j in pairs]
        return MatchingResult(fights=fights, leftovers=[], strategy=self.name)


def match_exact(
    pool: Sequence[Competitor],
    rules: RuleSet,
    shuffle: bool = False,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    max_steps: Optional[int] = None,
    time_limit: Optional[float] = None,
    phase: Phase = Phase.MAIN,
) -> MatchingResult:
    """Quick perfect-matching function; see ``ExactMatcher``."""
    matcher = ExactMatcher(
        shuffle=shuffle,
        seed=seed,
        rng=rng,
        max_steps=max_steps,
        time_limit=time_limit,
    )
    return matcher.match(pool, rules, phase=phase)
