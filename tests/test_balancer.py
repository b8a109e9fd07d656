import pytest

from cotejopairing.exceptions import InsufficientTeamsException
from cotejopairing.models import Competitor, RuleSet, Team
from cotejopairing.pairing import balance_contribution, group_by_team


def _event(*roster_sizes, base_weight=2500):
    teams = [Team(id=f"t{i}", name=f"Team {i}") for i in range(len(roster_sizes))]
    competitors = []
    for team, size in zip(teams, roster_sizes):
        for n in range(size):
            competitors.append(
                Competitor(
                    id=f"{team.id}-c{n}",
                    team_id=team.id,
                    weight=base_weight + 100 * (size - n),
                )
            )
    return teams, competitors


def _balance(teams, competitors, rules=None):
    return balance_contribution(teams, group_by_team(teams, competitors), rules or RuleSet())


def test_contribution_is_smallest_roster():
    teams, competitors = _event(3, 2, 2)
    result = _balance(teams, competitors)
    assert result.contribution_per_team == 2
    assert result.note is None
    assert len(result.selected_pool) == 6
    assert [c.id for c in result.excluded] == ["t0-c0"]


def test_odd_total_decrements_once_with_note():
    teams, competitors = _event(3, 3, 3)
    result = _balance(teams, competitors)
    assert result.initial_contribution == 3
    assert result.contribution_per_team == 2
    assert result.was_adjusted
    assert result.note
    assert len(result.selected_pool) % 2 == 0


def test_single_competitor_teams_drop_to_zero():
    teams, competitors = _event(1, 1, 1)
    result = _balance(teams, competitors)
    assert result.contribution_per_team == 0
    assert result.selected_pool == []
    assert len(result.excluded) == 3


def test_selected_are_lightest_per_team_ties_in_roster_order():
    teams = [Team(id="a", name="A"), Team(id="b", name="B")]
    competitors = [
        Competitor(id="x", team_id="a", weight=2500),
        Competitor(id="y", team_id="a", weight=2500),
        Competitor(id="z", team_id="a", weight=2400),
        Competitor(id="p", team_id="b", weight=2600),
        Competitor(id="q", team_id="b", weight=2450),
    ]
    result = _balance(teams, competitors)
    selection = result.selection_by_team()
    assert [c.id for c in selection["a"]] == ["z", "x"]
    assert [c.id for c in selection["b"]] == ["q", "p"]
    assert [c.id for c in result.excluded] == ["y"]


@pytest.mark.parametrize("sizes", [(2,), (2, 0), (0, 0)])
def test_fewer_than_two_contributing_teams_is_rejected(sizes):
    teams, competitors = _event(*sizes)
    with pytest.raises(InsufficientTeamsException):
        _balance(teams, competitors)


def test_balancing_disabled_selects_full_roster():
    teams, competitors = _event(3, 1)
    result = _balance(teams, competitors, RuleSet(balance_contribution=False))
    assert [c.id for c in result.selected_pool] == [c.id for c in competitors]
    assert result.excluded == []
    assert result.note


def test_unregistered_team_is_excluded():
    teams, competitors = _event(2, 2)
    stray = Competitor(id="stray", team_id="ghost", weight=2500)
    result = _balance(teams, competitors + [stray])
    assert stray in result.excluded
    assert stray not in result.selected_pool


def test_group_by_team_keeps_empty_teams_and_input_order():
    teams, competitors = _event(2, 0)
    rosters = group_by_team(teams, competitors)
    assert list(rosters) == ["t0", "t1"]
    assert rosters["t1"] == []
    assert [c.id for c in rosters["t0"]] == ["t0-c0", "t0-c1"]


@pytest.mark.parametrize("sizes", [(1, 1, 1), (2, 3, 5), (3, 3, 3, 3, 3), (4, 7)])
def test_bracket_size_is_always_even(sizes):
    teams, competitors = _event(*sizes)
    result = _balance(teams, competitors)
    assert (len(result.team_ids) * result.contribution_per_team) % 2 == 0
    assert len(result.selected_pool) + len(result.excluded) == len(competitors)
