import pytest

from cotejopairing.exceptions import (
    DuplicateCompetitorException,
    TournamentStateException,
    UnknownStrategyException,
    UnknownTeamException,
)
from cotejopairing.models import Competitor, MatchStatus, Outcome, Phase, RuleSet, Team
from cotejopairing.tournament import Tournament


def _tournament(rosters, rules=None):
    """rosters: {team_id: [weight, ...]}"""
    teams = [Team(id=team_id, name=team_id.title()) for team_id in rosters]
    competitors = [
        Competitor(id=f"{team_id}{n}", team_id=team_id, weight=weight)
        for team_id, weights in rosters.items()
        for n, weight in enumerate(weights, start=1)
    ]
    return Tournament(teams, competitors, rules or RuleSet(weight_tolerance=1000))


def test_balanced_main_bracket_then_individual_round():
    tournament = _tournament(
        {"a": [2000, 2100, 2900], "b": [2050, 2150, 2950], "c": [2000, 2100]}
    )
    draft = tournament.run_matchmaking()
    assert draft.balance.contribution_per_team == 2
    assert len(draft.fights) == 3
    assert {c.id for c in draft.unpaired} == {"a3", "b3"}

    main = tournament.start()
    assert [f.sequence for f in main] == [1, 2, 3]

    individual = tournament.generate_individual_fights()
    assert [f.sequence for f in individual.fights] == [4]
    assert individual.fights[0].phase is Phase.INDIVIDUAL
    assert tournament.unpaired == []


def test_odd_contribution_is_lowered_with_a_note():
    tournament = _tournament({"a": [2000, 2010], "b": [2020, 2030], "c": [2040, 2050, 2060]})
    draft = tournament.run_matchmaking()
    assert draft.balance.contribution_per_team == 2
    assert draft.notes == []

    tournament = _tournament({"a": [2000], "b": [2020], "c": [2040, 2050]})
    draft = tournament.run_matchmaking()
    assert draft.balance.contribution_per_team == 0
    assert draft.fights == []
    assert len(draft.notes) == 1
    assert len(tournament.unpaired) == 4


def test_matchmaking_can_be_rerun_until_start():
    tournament = _tournament({"a": [2000, 2010], "b": [2020, 2030]})
    tournament.run_matchmaking()
    tournament.run_matchmaking(shuffle=True, seed=4)
    tournament.start()
    with pytest.raises(TournamentStateException):
        tournament.run_matchmaking()
    with pytest.raises(TournamentStateException):
        tournament.start()


def test_start_needs_a_draft():
    tournament = _tournament({"a": [2000], "b": [2000]})
    with pytest.raises(TournamentStateException):
        tournament.start()


def test_individual_round_commits_main_draft_first():
    tournament = _tournament(
        {"a": [2000, 2100, 2600], "b": [2000, 2100, 2650], "c": [2000, 2100]}
    )
    tournament.run_matchmaking()
    result = tournament.generate_individual_fights()
    assert tournament.is_started
    main = tournament.ledger.fights_for_phase(Phase.MAIN)
    assert [f.sequence for f in main] == [1, 2, 3]
    assert [f.sequence for f in result.fights] == [4]
    assert tournament.generate_individual_fights().fights == []


def test_single_team_falls_back_to_full_roster():
    tournament = _tournament({"a": [2000, 2010], "b": []})
    draft = tournament.run_matchmaking()
    assert draft.balance is None
    assert "full roster" in draft.notes[0]
    assert draft.result.status is MatchStatus.INFEASIBLE
    assert len(tournament.unpaired) == 2


def test_greedy_fallback_when_no_perfect_bracket_exists():
    rosters = {"a": [1000, 1000], "b": [1000, 5000], "c": [1000, 9000]}
    rules = RuleSet(weight_tolerance=100)

    strict_tournament = _tournament(rosters, rules)
    strict = strict_tournament.run_matchmaking()
    assert strict.result.status is MatchStatus.INFEASIBLE
    assert strict.fights == []
    assert len(strict.unpaired) == 6
    summary = strict_tournament.summary()
    assert (summary.main_competitors, summary.main_fights) == (6, 0)

    tournament = _tournament(rosters, rules)
    relaxed = tournament.run_matchmaking(fallback_to_greedy=True)
    assert relaxed.result.is_feasible
    assert len(relaxed.fights) == 2
    assert {c.id for c in relaxed.unpaired} == {"b2", "c2"}
    assert any("greedily" in note for note in relaxed.notes)


def test_greedy_main_strategy_and_unknown_strategy():
    tournament = _tournament({"a": [2000, 2010], "b": [2020, 2030]})
    draft = tournament.run_matchmaking(strategy="greedy")
    assert draft.result.strategy == "greedy"
    assert all(f.phase is Phase.MAIN for f in draft.fights)
    with pytest.raises(UnknownStrategyException):
        tournament.run_matchmaking(strategy="swiss")


def test_shuffled_drafts_are_reproducible_with_a_seed():
    rosters = {t: [2000 + 10 * i for i in range(4)] for t in ("a", "b", "c", "d")}

    def pairs(seed):
        draft = _tournament(rosters).run_matchmaking(shuffle=True, seed=seed)
        return [(f.first.id, f.second.id) for f in draft.fights]

    assert pairs(17) == pairs(17)


def test_results_and_standings():
    tournament = _tournament({"a": [2000], "b": [2010]})
    tournament.run_matchmaking()
    tournament.start()
    fight = tournament.record_result_by_sequence(1, Outcome.WIN_FIRST, 95)
    winner_team = fight.first.team_id
    standings = tournament.standings()
    assert standings[0].team_id == winner_team
    assert standings[0].points == 3


def test_summary_counts():
    tournament = _tournament(
        {"a": [2000, 2100, 2900], "b": [2050, 2150, 2950], "c": [2000, 2100]}
    )
    tournament.run_matchmaking()
    tournament.generate_individual_fights()
    tournament.record_result(tournament.ledger.fights[0].id, Outcome.DRAW, 30)
    summary = tournament.summary()
    assert summary.rounds == 2
    assert summary.contribution_per_team == {"a": 2, "b": 2, "c": 2}
    assert summary.main_competitors == 6
    assert summary.main_fights == 3
    assert summary.individual_fights == 1
    assert summary.unpaired == 0
    assert (summary.pending_fights, summary.decided_fights) == (3, 1)
    assert summary.to_dict()["rounds"] == 2


def test_registration_errors():
    teams = [Team(id="a", name="A")]
    with pytest.raises(UnknownTeamException):
        Tournament(teams, [Competitor(id="x", team_id="zz", weight=2000)])
    with pytest.raises(DuplicateCompetitorException):
        Tournament(
            teams,
            [
                Competitor(id="x", team_id="a", weight=2000),
                Competitor(id="x", team_id="a", weight=2100),
            ],
        )


def test_event_round_trip_after_start():
    tournament = _tournament({"a": [2000, 2900, 3500], "b": [2010, 2950]})
    tournament.run_matchmaking()
    tournament.start()
    first = tournament.ledger.fights[0]
    tournament.record_result(first.id, Outcome.WIN_SECOND, 12)

    restored = Tournament.from_dict(tournament.to_dict())
    assert restored.is_started
    assert restored.ledger.fights == tournament.ledger.fights
    assert {c.id for c in restored.unpaired} == {c.id for c in tournament.unpaired}
    assert restored.rules == tournament.rules
