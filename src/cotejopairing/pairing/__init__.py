"""Pairing strategies and the rules they share.

``ExactMatcher`` builds the main bracket, ``GreedyMatcher`` repairs the odds
and ends. Both implement ``Matcher`` and can be looked up by name.
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

from typing import Dict, Type

from cotejopairing.exceptions import UnknownStrategyException
from cotejopairing.pairing.balancer import balance_contribution, group_by_team
from cotejopairing.pairing.base import Matcher
from cotejopairing.pairing.compatibility import (
    closeness,
    incompatibility_reasons,
    is_legal_pair,
)
from cotejopairing.pairing.exact import ExactMatcher, match_exact, split_odd_pool
from cotejopairing.pairing.greedy import GreedyMatcher, match_greedy

MATCHERS: Dict[str, Type[Matcher]] = {
    ExactMatcher.name: ExactMatcher,
    GreedyMatcher.name: GreedyMatcher,
}


def get_matcher(name: str, **options) -> Matcher:
    """Instantiate the matcher registered under ``name``.

    Raises:
        UnknownStrategyException: If no matcher has that name
    """
    try:
        matcher_cls = MATCHERS[name]
    except KeyError as exc:
        raise UnknownStrategyException(
            f"Unknown matching strategy '{name}' (expected one of {sorted(MATCHERS)})"
        ) from exc
    return matcher_cls(**options)


__all__ = [
    "ExactMatcher",
    "GreedyMatcher",
    "MATCHERS",
    "Matcher",
    "balance_contribution",
    "closeness",
    "get_matcher",
    "group_by_team",
    "incompatibility_reasons",
    "is_legal_pair",
    "match_exact",
    "match_greedy",
    "split_odd_pool",
]
