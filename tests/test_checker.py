from cotejopairing.models import Competitor, Fight, MatchingResult, MatchStatus, RuleSet
from cotejopairing.validation import CheckStatus, validate_bracket


def _rooster(cid, team, weight, age=None):
    return Competitor(id=cid, team_id=team, weight=weight, age_months=age)


A = _rooster("a", "T1", 2000, 10)
B = _rooster("b", "T2", 2030, 11)
C = _rooster("c", "T1", 2040, 10)
D = _rooster("d", "T3", 2500, 20)


def test_valid_bracket_passes_every_check():
    result = MatchingResult(fights=[Fight(first=A, second=B)], leftovers=[C])
    report = validate_bracket(result, [A, B, C], RuleSet(weight_tolerance=50))
    assert report.is_valid
    assert report.overall_status is CheckStatus.COMPLIANT
    assert report.get("forbidden_pairs").status is CheckStatus.NOT_APPLICABLE
    assert report.get("age_tolerance").status is CheckStatus.NOT_APPLICABLE
    assert report.get("infeasible_result").status is CheckStatus.NOT_APPLICABLE
    assert report.summary.startswith("All checks passed")


def test_lost_competitor_breaks_accounting():
    result = MatchingResult(fights=[Fight(first=A, second=B)], leftovers=[])
    report = validate_bracket(result, [A, B, C], RuleSet(weight_tolerance=50))
    assert [v.check for v in report.violations] == ["accounting"]
    assert report.get("accounting").details["input"] == 3


def test_double_placement_and_foreign_competitor():
    result = MatchingResult(fights=[Fight(first=A, second=B)], leftovers=[A, D])
    report = validate_bracket(result, [A, B, C, D], RuleSet(weight_tolerance=50))
    assert report.get("single_placement").details["competitors"] == ["a"]
    assert report.get("accounting").passed

    result = MatchingResult(fights=[Fight(first=A, second=D)], leftovers=[])
    report = validate_bracket(result, [A, B], RuleSet(weight_tolerance=1000))
    assert report.get("no_foreign_competitors").details["competitors"] == ["d"]


def test_rule_violations_are_reported():
    rules = RuleSet(weight_tolerance=20, age_tolerance_months=0, forbidden_pairs=[("T1", "T2")])
    result = MatchingResult(fights=[Fight(first=A, second=B), Fight(first=C, second=_rooster("e", "T1", 2040))])
    pool = [A, B, C, result.fights[1].second]
    report = validate_bracket(result, pool, rules)
    failed = {v.check for v in report.violations}
    assert failed == {"different_teams", "forbidden_pairs", "weight_tolerance", "age_tolerance"}
    assert report.compliant_count == 3
    assert report.summary.startswith("4 check(s) failed")


def test_infeasible_result_must_report_the_whole_pool():
    pool = [A, B, C]
    good = MatchingResult.infeasible(pool, "exact")
    assert validate_bracket(good, pool, RuleSet()).get("infeasible_result").status is CheckStatus.COMPLIANT

    bad = MatchingResult(leftovers=[A, B], status=MatchStatus.ABORTED, strategy="exact")
    report = validate_bracket(bad, pool, RuleSet())
    assert not report.get("infeasible_result").passed
    assert not report.get("accounting").passed
