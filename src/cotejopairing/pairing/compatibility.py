"""Pairing legality and closeness between two competitors."""

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

from typing import List

from cotejopairing.constants import ABSENT_AGE_MONTHS, AGE_WEIGHT_GRAMS_PER_MONTH
from cotejopairing.models.competitor import Competitor
from cotejopairing.models.rules import RuleSet

REASON_SAME_COMPETITOR = "same competitor"
REASON_SAME_TEAM = "same team"
REASON_FORBIDDEN = "forbidden team pair"
REASON_WEIGHT = "weight difference"
REASON_AGE = "age difference"


def effective_age(competitor: Competitor) -> int:
    """Age used in comparisons. Unknown ages count as one month."""
    if competitor.age_months is None:
        return ABSENT_AGE_MONTHS
    return competitor.age_months


def weight_difference(a: Competitor, b: Competitor) -> float:
    """Absolute weight difference in grams."""
    return abs(a.weight_grams - b.weight_grams)


def age_difference(a: Competitor, b: Competitor) -> int:
    return abs(effective_age(a) - effective_age(b))


def is_legal_pair(a: Competitor, b: Competitor, rules: RuleSet) -> bool:
    """Decide whether two competitors may fight.

    Fails closed: same team, a forbidden team pair, a weight difference above
    the tolerance, or an age difference above the age tolerance (when one is
    set) each make the pair illegal.
    """
    if a.id == b.id or a.team_id == b.team_id:
        return False
    if rules.is_forbidden(a.team_id, b.team_id):
        return False
    if weight_difference(a, b) > rules.weight_tolerance:
        return False
    if rules.age_tolerance_months is not None:
        if age_difference(a, b) > rules.age_tolerance_months:
            return False
    return True


def closeness(a: Competitor, b: Competitor) -> float:
    """Score of how well two competitors match; lower is better.

    Weight difference in grams plus 100 g for every month of age difference.
    """
    return weight_difference(a, b) + age_difference(a, b) * AGE_WEIGHT_GRAMS_PER_MONTH


def incompatibility_reasons(a: Competitor, b: Competitor, rules: RuleSet) -> List[str]:
    """List every rule the pair breaks (empty when the pair is legal)."""
    reasons = []
    if a.id == b.id:
        reasons.append(REASON_SAME_COMPETITOR)
    if a.team_id == b.team_id:
        reasons.append(REASON_SAME_TEAM)
    elif rules.is_forbidden(a.team_id, b.team_id):
        reasons.append(REASON_FORBIDDEN)

    weight_diff = weight_difference(a, b)
    if weight_diff > rules.weight_tolerance:
        reasons.append(
            f"{REASON_WEIGHT} {weight_diff:.0f} g > {rules.weight_tolerance:.0f} g"
        )

    if rules.age_tolerance_months is not None:
        age_diff = age_difference(a, b)
        if age_diff > rules.age_tolerance_months:
            reasons.append(
                f"{REASON_AGE} {age_diff} months > {rules.age_tolerance_months} months"
            )
    return reasons
