import itertools

import pytest

from icpc_scoreboard import (
    ContractViolation,
    FlushSnapshot,
    LiveOrder,
    Team,
    apply_submission,
    better_team,
    compare_teams,
    order_teams,
)


def _team(name, solves=(), problems=4):
    """Team with each (problem, wrong_attempts, time) applied in running mode."""
    team = Team(name=name)
    team.reset_problems(problems)
    for problem_id, wrong, time in solves:
        for _ in range(wrong):
            apply_submission(team, problem_id, "Wrong_Answer", 0, frozen=False)
        apply_submission(team, problem_id, "Accepted", time, frozen=False)
    return team


def test_more_solves_wins():
    a = _team("Zed", [(0, 5, 100), (1, 5, 100)])
    b = _team("Amy", [(0, 0, 1)])
    assert better_team(a, b)
    assert not better_team(b, a)


def test_smaller_penalty_wins():
    a = _team("Zed", [(0, 0, 30)])
    b = _team("Amy", [(0, 1, 20)])
    assert a.total_penalty == 30
    assert b.total_penalty == 40
    assert better_team(a, b)


def test_solve_times_compared_largest_first():
    # Equal penalty (70): a = [50, 20], b = [60, 10]; a's largest time is smaller.
    a = _team("Zed", [(0, 0, 20), (1, 0, 50)])
    b = _team("Amy", [(0, 0, 10), (1, 0, 60)])
    assert a.total_penalty == b.total_penalty
    assert better_team(a, b)
    assert compare_teams(b, a) > 0


def test_name_breaks_remaining_ties():
    a = _team("Amy", [(0, 0, 10)])
    b = _team("Bob", [(1, 0, 10)])
    assert better_team(a, b)
    assert compare_teams(a, a) == 0
    assert not better_team(a, a)


def test_mismatched_solve_lists_violate_contract():
    a = _team("Amy", [(0, 0, 10)])
    b = _team("Bob", [(0, 0, 10)])
    # Force inconsistent aggregates: equal count and penalty, different lists.
    b.solve_times = [10, 0]
    with pytest.raises(ContractViolation):
        compare_teams(a, b)


def test_comparator_is_strict_total_order():
    teams = [
        _team("A", [(0, 0, 10)]),
        _team("B", [(1, 0, 10)]),
        _team("C", [(0, 1, 5), (1, 0, 5)]),
        _team("D", [(0, 0, 15), (1, 0, 15)]),
        _team("E", [(0, 0, 20), (1, 0, 10)]),
        _team("F"),
        _team("G"),
    ]
    for a in teams:
        assert not better_team(a, a)
    for a, b in itertools.permutations(teams, 2):
        assert better_team(a, b) != better_team(b, a)
    for a, b, c in itertools.permutations(teams, 3):
        if better_team(a, b) and better_team(b, c):
            assert better_team(a, c)
    assert [t.name for t in order_teams(teams)] == ["C", "D", "E", "A", "B", "F", "G"]


def test_flush_snapshot_ranks():
    snapshot = FlushSnapshot.from_names(["B", "A", "C"])
    assert snapshot.order == ("B", "A", "C")
    assert snapshot.rank_of("B") == 1
    assert snapshot.rank_of("C") == 3
    assert snapshot.rank_of("missing") == 0
    assert FlushSnapshot().order == ()


def test_live_order_promote_reports_last_passed():
    top = _team("Top", [(0, 0, 5), (1, 0, 5)])
    mid = _team("Mid", [(0, 0, 50)])
    low = _team("Low")
    live = LiveOrder([low, mid, top])
    assert [t.name for t in live.teams] == ["Top", "Mid", "Low"]

    apply_submission(low, 0, "Accepted", 10, frozen=False)
    passed = live.promote(low)
    assert passed is mid
    assert [t.name for t in live.teams] == ["Top", "Low", "Mid"]
    assert live.slot_of("Low") == 1
    assert live.slot_of("Mid") == 2
    assert live.promote(low) is None


def test_live_order_last_concealed_scans_from_bottom():
    a = _team("A", [(0, 0, 5)])
    b = _team("B")
    c = _team("C")
    apply_submission(b, 2, "Accepted", 9, frozen=True)
    apply_submission(a, 1, "Accepted", 9, frozen=True)
    live = LiveOrder([a, b, c])
    assert live.last_concealed() is b
    b.problems[2].unveil()
    assert live.last_concealed() is a
    a.problems[1].unveil()
    assert live.last_concealed() is None
