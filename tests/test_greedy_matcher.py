import pytest

from cotejopairing.exceptions import UnknownStrategyException
from cotejopairing.models import Competitor, MatchStatus, Phase, RuleSet
from cotejopairing.pairing import GreedyMatcher, Matcher, get_matcher, match_exact, match_greedy
from cotejopairing.testing import EventGeneratorConfig, RandomEventGenerator
from cotejopairing.validation import validate_bracket


def _rooster(cid, team, weight, age=None):
    return Competitor(id=cid, team_id=team, weight=weight, age_months=age)


def test_odd_pool_of_five_gives_two_fights_and_one_leftover():
    pool = [_rooster(c, f"T{i}", 2000 + 10 * i) for i, c in enumerate("abcde")]
    result = match_greedy(pool, RuleSet(weight_tolerance=100))
    assert len(result.fights) == 2
    assert [c.id for c in result.leftovers] == ["e"]
    assert result.check_accounting(5)


def test_lightest_first_with_nearest_partner():
    pool = [
        _rooster("heavy", "T1", 2300),
        _rooster("light", "T2", 2000),
        _rooster("mid", "T3", 2050),
        _rooster("other", "T4", 2250),
    ]
    result = match_greedy(pool, RuleSet(weight_tolerance=400))
    assert [(f.first.id, f.second.id) for f in result.fights] == [
        ("light", "mid"),
        ("other", "heavy"),
    ]


def test_ties_go_to_first_candidate_in_input_order():
    pool = [_rooster("a", "T1", 2000), _rooster("b", "T2", 2000), _rooster("c", "T3", 2000)]
    result = match_greedy(pool, RuleSet())
    assert [(f.first.id, f.second.id) for f in result.fights] == [("a", "b")]
    assert [c.id for c in result.leftovers] == ["c"]


def test_greedy_can_miss_a_perfect_matching():
    pool = [
        _rooster("d", "T3", 1060),
        _rooster("c", "T3", 1040),
        _rooster("b", "T2", 1010),
        _rooster("a", "T1", 1000),
    ]
    rules = RuleSet(weight_tolerance=50)
    greedy = match_greedy(pool, rules)
    assert len(greedy.fights) == 1
    assert [c.id for c in greedy.leftovers] == ["d", "c"]
    assert match_exact(pool, rules).leftovers == []


def test_zero_tolerance_leaves_everyone_without_error():
    pool = [_rooster(f"c{i}", f"T{i}", 2000 + i) for i in range(4)]
    result = match_greedy(pool, RuleSet(weight_tolerance=0))
    assert result.status is MatchStatus.COMPLETE
    assert result.fights == []
    assert len(result.leftovers) == 4


def test_default_phase_is_individual():
    pool = [_rooster("a", "T1", 2000), _rooster("b", "T2", 2000)]
    result = GreedyMatcher().match(pool, RuleSet())
    assert result.fights[0].phase is Phase.INDIVIDUAL
    assert match_greedy(pool, RuleSet(), phase=Phase.MAIN).fights[0].phase is Phase.MAIN


def test_registry_lookup():
    assert isinstance(get_matcher("greedy"), GreedyMatcher)
    assert isinstance(get_matcher("greedy"), Matcher)
    with pytest.raises(UnknownStrategyException):
        get_matcher("hungarian")


@pytest.mark.parametrize("seed", range(15))
def test_random_events_produce_valid_greedy_brackets(seed):
    config = EventGeneratorConfig(num_teams=6, roster_range=(1, 5), seed=seed, forbidden_pair_count=2)
    tournament = RandomEventGenerator(config).generate_tournament()
    result = match_greedy(tournament.competitors, tournament.rules)
    report = validate_bracket(result, tournament.competitors, tournament.rules)
    assert report.is_valid, report.summary


@pytest.mark.parametrize(
    "strategy, default_phase",
    [("exact", Phase.MAIN), ("greedy", Phase.INDIVIDUAL)],
)
def test_phase_default_per_strategy_and_explicit_phase(strategy, default_phase):
    pool = [_rooster("a", "T1", 2000), _rooster("b", "T2", 2000)]
    matcher: Matcher = get_matcher(strategy)
    assert matcher.match(pool, RuleSet()).fights[0].phase is default_phase
    for phase in Phase:
        assert matcher.match(pool, RuleSet(), phase=phase).fights[0].phase is phase
