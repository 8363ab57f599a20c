from __future__ import annotations
import uuid
from types import SimpleNamespace
import pytest
from scavenger.services.leaderboard import compute_leaderboard


def _team(name, role="team"):
    return SimpleNamespace(id=uuid.uuid4(), name=name, role=role, avatar_color="#00f0ff")


def _attempt(team, task_id, status="completed", elapsed_ms=None, photo_points=None):
    return SimpleNamespace(
        team_id=team.id, task_id=task_id, status=status, elapsed_ms=elapsed_ms, photo_points=photo_points
    )


@pytest.fixture
def world():
    a, b, c = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    return SimpleNamespace(task_a=a, task_b=b, task_c=c, points={a: 100, b: 200, c: 50})


def _teams(*teams):
    return {t.id: t for t in teams}


def test_single_completion(world):
    t = _team("T")
    rows = compute_leaderboard([_attempt(t, world.task_a, elapsed_ms=90_000)], world.points, _teams(t))
    assert len(rows) == 1
    row = rows[0]
    assert (row.rank, row.completed_tasks, row.total_points, row.total_elapsed_ms) == (1, 1, 100, 90_000)


def test_blocked_attempt_earns_no_base_points(world):
    t = _team("T")
    blocked = _attempt(t, world.task_a, status="blocked", elapsed_ms=90_000, photo_points=0)
    rows = compute_leaderboard([blocked], world.points, _teams(t))
    assert rows[0].completed_tasks == 0
    assert rows[0].total_points == 0
    assert rows[0].total_elapsed_ms == 0


def test_blocked_attempt_photo_points_still_count(world):
    t = _team("T")
    blocked = _attempt(t, world.task_a, status="blocked", elapsed_ms=90_000, photo_points=50)
    row = compute_leaderboard([blocked], world.points, _teams(t))[0]
    assert row.photo_points == 50
    assert row.total_points == 50
    assert row.task_base_points == 0


def test_points_then_elapsed_sort_law(world):
    teams = [_team(f"T{i}") for i in range(6)]
    attempts = [
        _attempt(teams[0], world.task_a, elapsed_ms=50_000),
        _attempt(teams[1], world.task_a, elapsed_ms=40_000),
        _attempt(teams[2], world.task_b, elapsed_ms=500_000),
        _attempt(teams[3], world.task_a, elapsed_ms=10_000, photo_points=100),
        _attempt(teams[4], world.task_c, elapsed_ms=1_000, photo_points=50),
        _attempt(teams[5], world.task_a, elapsed_ms=40_000),
    ]
    rows = compute_leaderboard(attempts, world.points, _teams(*teams))
    for upper, lower in zip(rows, rows[1:]):
        assert upper.total_points >= lower.total_points
        if upper.total_points == lower.total_points:
            assert upper.total_elapsed_ms <= lower.total_elapsed_ms
    assert [r.rank for r in rows] == list(range(1, 7))
    # equal points: faster team first
    assert rows[0].team_id == teams[3].id
    assert rows[1].team_id == teams[2].id


def test_deterministic_including_full_ties(world):
    teams = [_team(f"T{i}") for i in range(5)]
    attempts = [_attempt(t, world.task_a, elapsed_ms=30_000) for t in teams]
    first = compute_leaderboard(attempts, world.points, _teams(*teams))
    second = compute_leaderboard(list(reversed(attempts)), world.points, _teams(*reversed(teams)))
    assert [r.model_dump() for r in first] == [r.model_dump() for r in second]


def test_admins_in_progress_and_unknown_teams_left_out(world):
    admin, idle, ghost = _team("Org", role="admin"), _team("Idle"), _team("Ghost")
    attempts = [
        _attempt(admin, world.task_a, elapsed_ms=1),
        _attempt(idle, world.task_a, status="in-progress"),
        _attempt(ghost, world.task_a, elapsed_ms=1),
    ]
    assert compute_leaderboard(attempts, world.points, _teams(admin, idle)) == []


def test_task_points_come_from_current_catalog(world):
    t = _team("T")
    attempts = [_attempt(t, world.task_a, elapsed_ms=1), _attempt(t, uuid.uuid4(), elapsed_ms=1)]
    row = compute_leaderboard(attempts, {world.task_a: 300}, _teams(t))[0]
    # a task deleted from the catalog contributes no base points
    assert row.total_points == 300
    assert row.completed_tasks == 2


def test_fastest_mode_ranks_by_total_time(world):
    quick, slow = _team("Quick"), _team("Slow")
    attempts = [
        _attempt(quick, world.task_a, elapsed_ms=10_000),
        _attempt(slow, world.task_a, elapsed_ms=500_000),
        _attempt(slow, world.task_b, elapsed_ms=500_000),
    ]
    teams = _teams(quick, slow)
    fastest = compute_leaderboard(attempts, world.points, teams, mode="fastest")
    assert [(r.team_name, r.completed_tasks, r.total_elapsed_ms) for r in fastest] == [
        ("Quick", 1, 10_000), ("Slow", 2, 1_000_000),
    ]
    most = compute_leaderboard(attempts, world.points, teams, mode="most-tasks")
    assert [r.team_name for r in most] == ["Slow", "Quick"]


def test_fastest_mode_breaks_time_ties_on_points(world):
    a, b = _team("A"), _team("B")
    attempts = [
        _attempt(a, world.task_a, elapsed_ms=30_000),
        _attempt(b, world.task_a, elapsed_ms=30_000, photo_points=20),
    ]
    rows = compute_leaderboard(attempts, world.points, _teams(a, b), mode="fastest")
    assert [r.team_name for r in rows] == ["B", "A"]
