from cotejopairing.models.competitor import Competitor
from cotejopairing.models.factory import (
    CompetitorFactory,
    age_in_months,
    create_competitor,
    create_competitor_from_dict,
)
from cotejopairing.models.fight import Fight, Outcome, Phase
from cotejopairing.models.matching_result import (
    BalanceResult,
    MatchingResult,
    MatchStatus,
)
from cotejopairing.models.rules import RuleSet
from cotejopairing.models.standings import StandingsRow
from cotejopairing.models.team import Team
from cotejopairing.models.weight import WeightUnit, format_weight, from_grams, to_grams

__all__ = [
    "BalanceResult",
    "Competitor",
    "CompetitorFactory",
    "Fight",
    "MatchingResult",
    "MatchStatus",
    "Outcome",
    "Phase",
    "RuleSet",
    "StandingsRow",
    "Team",
    "WeightUnit",
    "age_in_months",
    "create_competitor",
    "create_competitor_from_dict",
    "format_weight",
    "from_grams",
    "to_grams",
]
