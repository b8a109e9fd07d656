"""Common interface for matching strategies."""

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

from abc import ABC, abstractmethod
from typing import List, Sequence

from cotejopairing.exceptions import PairingException
from cotejopairing.models.competitor import Competitor
from cotejopairing.models.fight import Phase
from cotejopairing.models.matching_result import MatchingResult
from cotejopairing.models.rules import RuleSet


class Matcher(ABC):
    """
    Abstract base class for pairing strategies.

    A matcher turns a pool of competitors into fights and leftovers. Every
    input competitor ends up in exactly one fight or in the leftovers, so
    ``len(pool) == 2 * len(result.fights) + len(result.leftovers)``.

    Matchers keep no state between calls; a single instance may be reused.

    Notes
    -----
    - ``ExactMatcher`` either pairs everybody or reports everybody as a
      leftover.
    - ``GreedyMatcher`` always produces a maximal matching and may leave
      competitors over even when a perfect matching exists.

    See Also
    --------
    cotejopairing.pairing.get_matcher
        Look up a matcher by strategy name.
    """

    name: str = ""

    @abstractmethod
    def match(
        self,
        pool: Sequence[Competitor],
        rules: RuleSet,
        phase: Phase = Phase.MAIN,
    ) -> MatchingResult:
        """Pair ``pool`` under ``rules``; produced fights carry ``phase``.

        The default phase belongs to each strategy: ``ExactMatcher`` builds
        main brackets (``Phase.MAIN``) and ``GreedyMatcher`` repairs leftovers
        (``Phase.INDIVIDUAL``). Callers going through this interface should
        pass ``phase`` explicitly.
        """
        raise NotImplementedError

    @staticmethod
    def _validated_pool(pool: Sequence[Competitor]) -> List[Competitor]:
        """Copy the pool, refusing a competitor listed twice."""
        seen = set()
        for competitor in pool:
            if competitor.id in seen:
                raise PairingException(
                    f"Competitor {competitor.id} appears more than once in the pool"
                )
            seen.add(competitor.id)
        return list(pool)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
