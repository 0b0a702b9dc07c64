import random

from icpc_scoreboard import (
    LiveOrder,
    RankChange,
    STATUSES,
    apply_command,
    default_state,
    order_teams,
    unveil_problem,
)


def _contest(names, problems):
    state = default_state()
    for name in names:
        apply_command(state, {"type": "ADDTEAM", "team": name})
    apply_command(state, {"type": "START", "duration": 300, "problem_count": problems})
    return state


def _submit(state, team, problem, status, time):
    apply_command(
        state,
        {"type": "SUBMIT", "team": team, "problem": problem, "status": status, "time": time},
    )


def _random_contest(seed, teams=8, problems=5, before=40, during=40):
    rng = random.Random(seed)
    names = [f"T{i:02d}" for i in range(teams)]
    state = _contest(names, problems)
    time = 0
    for idx in range(before + during):
        if idx == before:
            apply_command(state, {"type": "FLUSH"})
            apply_command(state, {"type": "FREEZE"})
        time += rng.randint(0, 3)
        _submit(state, rng.choice(names), rng.randrange(problems), rng.choice(STATUSES), time)
    return state


def test_scroll_reports_boards_and_rank_changes():
    state = _contest(["Alpha", "Beta", "Gamma"], problems=2)
    _submit(state, "Alpha", 0, "Accepted", 10)
    _submit(state, "Beta", 0, "Wrong_Answer", 15)
    apply_command(state, {"type": "FREEZE"})
    _submit(state, "Beta", 0, "Accepted", 20)
    _submit(state, "Gamma", 1, "Accepted", 30)
    _submit(state, "Alpha", 1, "Wrong_Answer", 40)

    report = apply_command(state, {"type": "SCROLL"}).payload["report"]

    assert [(r.team, r.rank, r.solved_count, r.total_penalty, r.cells) for r in report.before] == [
        ("Alpha", 1, 1, 10, ("+", "0/1")),
        ("Beta", 2, 0, 0, ("-1/1", ".")),
        ("Gamma", 3, 0, 0, (".", "0/1")),
    ]
    assert report.changes == (RankChange(team="Gamma", passed="Beta", solved_count=1, total_penalty=30),)
    assert [(r.team, r.rank, r.solved_count, r.total_penalty, r.cells) for r in report.after] == [
        ("Alpha", 1, 1, 10, ("+", "-1")),
        ("Gamma", 2, 1, 30, (".", "+")),
        ("Beta", 3, 1, 40, ("+1", ".")),
    ]
    assert state.snapshot.order == ("Alpha", "Gamma", "Beta")
    assert state.snapshot.rank_of("Beta") == 3


def test_scroll_change_names_last_team_passed():
    state = _contest(["A", "B", "C", "D"], problems=2)
    _submit(state, "A", 0, "Accepted", 50)
    _submit(state, "B", 0, "Accepted", 60)
    _submit(state, "C", 0, "Accepted", 70)
    apply_command(state, {"type": "FREEZE"})
    _submit(state, "D", 0, "Accepted", 1)
    _submit(state, "D", 1, "Accepted", 2)

    report = apply_command(state, {"type": "SCROLL"}).payload["report"]
    # One reveal lifts D past C, B and A; only the last team passed is reported.
    assert report.changes[0] == RankChange(team="D", passed="A", solved_count=1, total_penalty=1)
    assert report.changes[1:] == ()
    assert report.order == ("D", "A", "B", "C")


def test_scroll_is_deterministic():
    first = apply_command(_random_contest(7), {"type": "SCROLL"}).payload["report"]
    second = apply_command(_random_contest(7), {"type": "SCROLL"}).payload["report"]
    assert first == second


def test_scroll_final_order_matches_full_reranking():
    for seed in range(5):
        state = _random_contest(seed)
        apply_command(state, {"type": "SCROLL"})
        expected = [team.name for team in order_teams(state.teams.values())]
        assert list(state.snapshot.order) == expected
        assert all(not team.has_concealed() for team in state.teams.values())


def test_rank_never_worsens_across_own_reveals():
    state = _random_contest(11, teams=10, problems=6)
    teams = list(state.teams.values())
    for team in teams:
        team.recompute()
    live = LiveOrder(teams)
    while True:
        team = live.last_concealed()
        if team is None:
            break
        before = live.slot_of(team.name)
        unveil_problem(team, team.first_concealed_problem())
        live.promote(team)
        assert live.slot_of(team.name) <= before


def test_scroll_without_concealed_problems_keeps_order():
    state = _contest(["B", "A"], problems=1)
    _submit(state, "B", 0, "Accepted", 5)
    apply_command(state, {"type": "FREEZE"})
    report = apply_command(state, {"type": "SCROLL"}).payload["report"]
    assert report.changes == ()
    assert report.order == ("B", "A")
    assert [r.cells for r in report.before] == [r.cells for r in report.after]


def test_second_freeze_after_scroll_conceals_again():
    state = _contest(["A", "B"], problems=2)
    assert apply_command(state, {"type": "FREEZE"}).ok
    _submit(state, "B", 0, "Accepted", 5)
    _submit(state, "A", 0, "Wrong_Answer", 3)
    first = apply_command(state, {"type": "SCROLL"}).payload["report"]
    assert first.changes == (RankChange("B", "A", 1, 5),)
    assert first.order == ("B", "A")
    unsolved = state.teams["A"].problems[0]
    assert unsolved.wrong_before_ac == 1
    assert unsolved.concealment is None

    assert apply_command(state, {"type": "FREEZE"}).ok
    assert state.frozen is True
    _submit(state, "A", 0, "Wrong_Answer", 6)
    assert unsolved.concealment.pre_conceal_wrong == 1
    assert unsolved.display(frozen=True) == "-1/1"
    _submit(state, "A", 0, "Accepted", 7)
    _submit(state, "A", 1, "Accepted", 8)

    outcome = apply_command(state, {"type": "SCROLL"})
    second = outcome.payload["report"]
    # 2 wrong attempts on A (one from each cycle), solves at 7 and 8.
    assert second.changes == (RankChange("A", "B", 2, 55),)
    assert state.snapshot.order == ("A", "B")
    assert state.frozen is False
    assert not state.teams["A"].has_concealed()
