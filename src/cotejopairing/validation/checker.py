"""Bracket checker - independent validation of matcher output.

This module re-checks a ``MatchingResult`` against its input pool and the
event rules: every competitor accounted for exactly once and every fight
legal. It does not trust the matcher that produced the result.
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

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence

from cotejopairing.models.competitor import Competitor
from cotejopairing.models.matching_result import MatchingResult
from cotejopairing.models.rules import RuleSet
from cotejopairing.pairing.compatibility import age_difference, weight_difference
from cotejopairing.utils import setup_logger

logger = setup_logger(__name__)


class CheckStatus(Enum):
    """Status of a single bracket check."""

    COMPLIANT = "COMPLIANT"
    VIOLATION = "VIOLATION"
    NOT_APPLICABLE = "NOT_APPLICABLE"


@dataclass
class CheckResult:
    """Result of one bracket check."""

    check: str
    status: CheckStatus
    description: str = ""
    details: Dict[str, object] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.status is not CheckStatus.VIOLATION


@dataclass
class ValidationReport:
    """Complete validation report for one matching result."""

    results: List[CheckResult]
    summary: str = ""

    @property
    def violations(self) -> List[CheckResult]:
        return [r for r in self.results if r.status is CheckStatus.VIOLATION]

    @property
    def compliant_count(self) -> int:
        return sum(1 for r in self.results if r.status is CheckStatus.COMPLIANT)

    @property
    def overall_status(self) -> CheckStatus:
        return CheckStatus.VIOLATION if self.violations else CheckStatus.COMPLIANT

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def get(self, check: str) -> CheckResult:
        for result in self.results:
            if result.check == check:
                return result
        raise KeyError(check)


class BracketChecker:
    """Validates matcher output against the pool it was given."""

    def validate(
        self,
        result: MatchingResult,
        pool: Sequence[Competitor],
        rules: RuleSet,
    ) -> ValidationReport:
        """Run every check and collect the results.

        Args:
            result: Output of a matcher
            pool: The exact input given to the matcher
            rules: Rules the matcher was given
        """
        results = [
            self.check_accounting(result, pool),
            self.check_single_placement(result),
            self.check_no_foreign_competitors(result, pool),
            self.check_infeasible_reports_everyone(result, pool),
            self.check_different_teams(result),
            self.check_forbidden_pairs(result, rules),
            self.check_weight(result, rules),
            self.check_age(result, rules),
        ]
        report = ValidationReport(results=results)
        violations = report.violations
        if violations:
            report.summary = (
                f"{len(violations)} check(s) failed: "
                + ", ".join(v.check for v in violations)
            )
        else:
            report.summary = (
                f"All checks passed: {len(result.fights)} fights, "
                f"{len(result.leftovers)} leftovers"
            )
        logger.debug("Bracket check complete: %s", report.summary)
        return report

    def check_accounting(
        self, result: MatchingResult, pool: Sequence[Competitor]
    ) -> CheckResult:
        """|input| == 2*|fights| + |leftovers|."""
        if result.check_accounting(len(pool)):
            return CheckResult(
                check="accounting",
                status=CheckStatus.COMPLIANT,
                description=f"{len(pool)} competitors accounted for",
            )
        return CheckResult(
            check="accounting",
            status=CheckStatus.VIOLATION,
            description=(
                f"{len(pool)} competitors in, {len(result.fights)} fights and "
                f"{len(result.leftovers)} leftovers out"
            ),
            details={
                "input": len(pool),
                "fights": len(result.fights),
                "leftovers": len(result.leftovers),
            },
        )

    def check_single_placement(self, result: MatchingResult) -> CheckResult:
        """No competitor is in two fights, or in a fight and the leftovers."""
        placements = Counter(
            c.id for fight in result.fights for c in fight.competitors
        )
        placements.update(c.id for c in result.leftovers)
        repeated = sorted(cid for cid, count in placements.items() if count > 1)
        if repeated:
            return CheckResult(
                check="single_placement",
                status=CheckStatus.VIOLATION,
                description=f"Placed more than once: {', '.join(repeated)}",
                details={"competitors": repeated},
            )
        return CheckResult(
            check="single_placement",
            status=CheckStatus.COMPLIANT,
            description="Every competitor placed once",
        )

    def check_no_foreign_competitors(
        self, result: MatchingResult, pool: Sequence[Competitor]
    ) -> CheckResult:
        pool_ids = {c.id for c in pool}
        placed = [c for fight in result.fights for c in fight.competitors]
        placed.extend(result.leftovers)
        foreign = sorted({c.id for c in placed if c.id not in pool_ids})
        if foreign:
            return CheckResult(
                check="no_foreign_competitors",
                status=CheckStatus.VIOLATION,
                description=f"Not in the input pool: {', '.join(foreign)}",
                details={"competitors": foreign},
            )
        return CheckResult(
            check="no_foreign_competitors",
            status=CheckStatus.COMPLIANT,
            description="Only input competitors placed",
        )

    def check_infeasible_reports_everyone(
        self, result: MatchingResult, pool: Sequence[Competitor]
    ) -> CheckResult:
        """An infeasible or aborted result carries no fights and the whole pool."""
        if result.is_feasible:
            return CheckResult(
                check="infeasible_result",
                status=CheckStatus.NOT_APPLICABLE,
                description="Matching completed",
            )
        if result.fights or {c.id for c in result.leftovers} != {c.id for c in pool}:
            return CheckResult(
                check="infeasible_result",
                status=CheckStatus.VIOLATION,
                description=(
                    f"{result.status.value} result must report every competitor "
                    "as leftover"
                ),
            )
        return CheckResult(
            check="infeasible_result",
            status=CheckStatus.COMPLIANT,
            description=f"{result.status.value}: all competitors reported as leftovers",
        )

    def check_different_teams(self, result: MatchingResult) -> CheckResult:
        offending = [str(f) for f in result.fights if f.first.team_id == f.second.team_id]
        if offending:
            return CheckResult(
                check="different_teams",
                status=CheckStatus.VIOLATION,
                description=f"Same-team fights: {'; '.join(offending)}",
                details={"fights": offending},
            )
        return CheckResult(
            check="different_teams",
            status=CheckStatus.COMPLIANT,
            description="No same-team fights",
        )

    def check_forbidden_pairs(self, result: MatchingResult, rules: RuleSet) -> CheckResult:
        if not rules.forbidden_pairs:
            return CheckResult(
                check="forbidden_pairs",
                status=CheckStatus.NOT_APPLICABLE,
                description="No forbidden team pairs configured",
            )
        offending = [
            str(f) for f in result.fights if rules.is_forbidden(*f.team_ids)
        ]
        if offending:
            return CheckResult(
                check="forbidden_pairs",
                status=CheckStatus.VIOLATION,
                description=f"Forbidden team pairs met: {'; '.join(offending)}",
                details={"fights": offending},
            )
        return CheckResult(
            check="forbidden_pairs",
            status=CheckStatus.COMPLIANT,
            description="No forbidden team pair met",
        )

    def check_weight(self, result: MatchingResult, rules: RuleSet) -> CheckResult:
        offending = {
            str(f): weight_difference(f.first, f.second)
            for f in result.fights
            if weight_difference(f.first, f.second) > rules.weight_tolerance
        }
        if offending:
            return CheckResult(
                check="weight_tolerance",
                status=CheckStatus.VIOLATION,
                description=(
                    f"{len(offending)} fight(s) above {rules.weight_tolerance:g} g"
                ),
                details={"fights": offending},
            )
        return CheckResult(
            check="weight_tolerance",
            status=CheckStatus.COMPLIANT,
            description=f"All fights within {rules.weight_tolerance:g} g",
        )

    def check_age(self, result: MatchingResult, rules: RuleSet) -> CheckResult:
        if rules.age_tolerance_months is None:
            return CheckResult(
                check="age_tolerance",
                status=CheckStatus.NOT_APPLICABLE,
                description="No age tolerance configured",
            )
        offending = {
            str(f): age_difference(f.first, f.second)
            for f in result.fights
            if age_difference(f.first, f.second) > rules.age_tolerance_months
        }
        if offending:
            return CheckResult(
                check="age_tolerance",
                status=CheckStatus.VIOLATION,
                description=(
                    f"{len(offending)} fight(s) above "
                    f"{rules.age_tolerance_months} months"
                ),
                details={"fights": offending},
            )
        return CheckResult(
            check="age_tolerance",
            status=CheckStatus.COMPLIANT,
            description=f"All fights within {rules.age_tolerance_months} months",
        )


def create_bracket_checker() -> BracketChecker:
    """Create bracket checker instance."""
    return BracketChecker()


def validate_bracket(
    result: MatchingResult, pool: Sequence[Competitor], rules: RuleSet
) -> ValidationReport:
    """Quick bracket validation function."""
    return create_bracket_checker().validate(result, pool, rules)
