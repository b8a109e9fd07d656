from cotejopairing.models import Competitor, Fight, Outcome, Phase, RuleSet, Team
from cotejopairing.tournament import StandingsCalculator, compute_standings


def _teams(*ids):
    return [Team(id=team_id, name=team_id.upper()) for team_id in ids]


def _fight(team_a, team_b, outcome, phase=Phase.MAIN):
    a = Competitor(id=f"{team_a}-r", team_id=team_a, weight=2000)
    b = Competitor(id=f"{team_b}-r", team_id=team_b, weight=2000)
    fight = Fight(first=a, second=b, phase=phase)
    if outcome is Outcome.PENDING:
        return fight
    return fight.decided(outcome, 60.0)


def test_wins_draws_and_points():
    teams = _teams("a", "b", "c")
    fights = [
        _fight("a", "b", Outcome.WIN_FIRST),
        _fight("b", "c", Outcome.DRAW),
        _fight("a", "c", Outcome.PENDING),
    ]
    rows = {row.team_id: row for row in compute_standings(teams, fights, RuleSet())}
    assert (rows["a"].wins, rows["a"].losses, rows["a"].points) == (1, 0, 3)
    assert (rows["b"].draws, rows["b"].losses, rows["b"].points) == (1, 1, 1)
    assert (rows["c"].draws, rows["c"].points) == (1, 1)
    assert rows["a"].fights == 1


def test_second_side_win():
    rows = compute_standings(_teams("a", "b"), [_fight("a", "b", Outcome.WIN_SECOND)], RuleSet())
    assert [row.team_id for row in rows] == ["b", "a"]
    assert rows[1].losses == 1


def test_every_team_gets_a_row():
    rows = compute_standings(_teams("a", "b", "c"), [], RuleSet())
    assert [(row.team_id, row.points) for row in rows] == [("a", 0), ("b", 0), ("c", 0)]


def test_equal_points_and_wins_keep_team_order():
    fights = [_fight("x", "y", Outcome.DRAW)]
    rows = compute_standings(_teams("x", "y"), fights, RuleSet())
    assert [row.team_id for row in rows] == ["x", "y"]
    rows = compute_standings(_teams("y", "x"), fights, RuleSet())
    assert [row.team_id for row in rows] == ["y", "x"]


def test_wins_break_equal_points():
    fights = [_fight("d", "o", Outcome.DRAW) for _ in range(3)]
    fights.append(_fight("w", "o", Outcome.WIN_FIRST))
    rows = compute_standings(_teams("d", "o", "w"), fights, RuleSet())
    assert [(row.team_id, row.points, row.wins) for row in rows] == [
        ("w", 3, 1),
        ("d", 3, 0),
        ("o", 3, 0),
    ]


def test_unscored_individual_fights_still_count_results():
    fights = [_fight("a", "b", Outcome.WIN_FIRST, Phase.INDIVIDUAL)]
    rules = RuleSet(score_individual_fights=False)
    rows = {row.team_id: row for row in compute_standings(_teams("a", "b"), fights, rules)}
    assert rows["a"].wins == 1
    assert rows["a"].points == 0
    assert StandingsCalculator(rules).is_scored(_fight("a", "b", Outcome.DRAW)) is True


def test_custom_points():
    rules = RuleSet(points_for_win=2, points_for_draw=0.5)
    fights = [_fight("a", "b", Outcome.WIN_FIRST), _fight("a", "b", Outcome.DRAW)]
    rows = {row.team_id: row for row in compute_standings(_teams("a", "b"), fights, rules)}
    assert rows["a"].points == 2.5
    assert rows["b"].points == 0.5


def test_unregistered_team_is_ignored():
    fights = [_fight("a", "ghost", Outcome.WIN_SECOND)]
    rows = compute_standings(_teams("a"), fights, RuleSet())
    assert len(rows) == 1
    assert rows[0].losses == 1
    assert rows[0].points == 0
