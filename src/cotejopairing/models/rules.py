"""RuleSet data class."""

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

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from cotejopairing.constants import (
    DEFAULT_AGE_TOLERANCE_MONTHS,
    DEFAULT_BALANCE_CONTRIBUTION,
    DEFAULT_POINTS_FOR_DRAW,
    DEFAULT_POINTS_FOR_WIN,
    DEFAULT_SCORE_INDIVIDUAL_FIGHTS,
    DEFAULT_WEIGHT_TOLERANCE,
)
from cotejopairing.exceptions import InvalidConfigurationException
from cotejopairing.models.weight import WeightUnit
from cotejopairing.utils.validation import (
    validate_age_months,
    validate_points,
    validate_tolerance,
)


def normalize_forbidden_pairs(pairs: Iterable[Iterable[str]]) -> FrozenSet[FrozenSet[str]]:
    """Turn any iterable of team-id pairs into a set of unordered pairs.

    Raises:
        InvalidConfigurationException: If a pair does not name two distinct teams
    """
    normalized = set()
    for pair in pairs:
        members = [str(team_id) for team_id in pair]
        if len(members) != 2 or members[0] == members[1]:
            raise InvalidConfigurationException(
                f"Forbidden pair must name two different teams: {members}"
            )
        normalized.add(frozenset(members))
    return frozenset(normalized)


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Immutable snapshot of the pairing constraints and scoring weights.

    Attributes
    ----------
    weight_tolerance : float
        Largest allowed weight difference, in grams.
    age_tolerance_months : int or None
        Largest allowed age difference in months. ``None`` disables the check.
    forbidden_pairs : frozenset of frozenset of str
        Unordered team-id pairs whose competitors never meet.
    points_for_win : float
        Standings points awarded for a win.
    points_for_draw : float
        Standings points awarded to both teams for a draw.
    balance_contribution : bool
        Whether every team contributes the same number of competitors to the
        main bracket.
    score_individual_fights : bool
        Whether individual (leftover) round fights add standings points.
    weight_unit : WeightUnit
        Unit used when weights are displayed.
    """

    weight_tolerance: float = DEFAULT_WEIGHT_TOLERANCE
    age_tolerance_months: Optional[int] = None
    forbidden_pairs: FrozenSet[FrozenSet[str]] = field(default_factory=frozenset)
    points_for_win: float = DEFAULT_POINTS_FOR_WIN
    points_for_draw: float = DEFAULT_POINTS_FOR_DRAW
    balance_contribution: bool = DEFAULT_BALANCE_CONTRIBUTION
    score_individual_fights: bool = DEFAULT_SCORE_INDIVIDUAL_FIGHTS
    weight_unit: WeightUnit = WeightUnit.GRAMS

    def __post_init__(self) -> None:
        """Validate tolerances and points, normalize forbidden pairs."""
        weight_result = validate_tolerance(self.weight_tolerance)
        if not weight_result:
            raise InvalidConfigurationException(
                f"Invalid weight tolerance: {weight_result.error_message}"
            )
        object.__setattr__(self, "weight_tolerance", weight_result.sanitized_value)

        # whole months, like competitor ages
        age_result = validate_age_months(self.age_tolerance_months)
        if not age_result:
            raise InvalidConfigurationException(
                f"Invalid age tolerance: {age_result.error_message}"
            )
        object.__setattr__(self, "age_tolerance_months", age_result.sanitized_value)

        for points_field in ("points_for_win", "points_for_draw"):
            points_result = validate_points(getattr(self, points_field))
            if not points_result:
                raise InvalidConfigurationException(
                    f"Invalid {points_field}: {points_result.error_message}"
                )
            object.__setattr__(self, points_field, points_result.sanitized_value)

        object.__setattr__(
            self, "forbidden_pairs", normalize_forbidden_pairs(self.forbidden_pairs)
        )
        object.__setattr__(self, "weight_unit", WeightUnit.parse(self.weight_unit))

    @classmethod
    def event_defaults(cls) -> "RuleSet":
        """Rules a new event starts with (50 g, 2 months, 3/1 points)."""
        return cls(age_tolerance_months=DEFAULT_AGE_TOLERANCE_MONTHS)

    def is_forbidden(self, team_a: str, team_b: str) -> bool:
        """Check whether two teams are forbidden from meeting (either order)."""
        return frozenset((team_a, team_b)) in self.forbidden_pairs

    def with_forbidden_pair(self, team_a: str, team_b: str) -> "RuleSet":
        """Return a copy with one more forbidden pair."""
        pairs = set(self.forbidden_pairs)
        pairs.add(frozenset((team_a, team_b)))
        return replace(self, forbidden_pairs=frozenset(pairs))

    def forbidden_pairs_list(self) -> List[List[str]]:
        """Forbidden pairs as sorted lists (stable serialization order)."""
        return sorted(sorted(pair) for pair in self.forbidden_pairs)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize rules to dictionary."""
        return {
            "weight_tolerance": self.weight_tolerance,
            "age_tolerance_months": self.age_tolerance_months,
            "forbidden_pairs": self.forbidden_pairs_list(),
            "points_for_win": self.points_for_win,
            "points_for_draw": self.points_for_draw,
            "balance_contribution": self.balance_contribution,
            "score_individual_fights": self.score_individual_fights,
            "weight_unit": self.weight_unit.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuleSet":
        """Deserialize rules from dictionary."""
        try:
            return cls(
                weight_tolerance=data.get("weight_tolerance", DEFAULT_WEIGHT_TOLERANCE),
                age_tolerance_months=data.get("age_tolerance_months"),
                forbidden_pairs=data.get("forbidden_pairs", []),
                points_for_win=data.get("points_for_win", DEFAULT_POINTS_FOR_WIN),
                points_for_draw=data.get("points_for_draw", DEFAULT_POINTS_FOR_DRAW),
                balance_contribution=data.get(
                    "balance_contribution", DEFAULT_BALANCE_CONTRIBUTION
                ),
                score_individual_fights=data.get(
                    "score_individual_fights", DEFAULT_SCORE_INDIVIDUAL_FIGHTS
                ),
                weight_unit=data.get("weight_unit", WeightUnit.GRAMS.value),
            )
        except (TypeError, ValueError) as exc:
            raise InvalidConfigurationException(str(exc)) from exc
