from __future__ import annotations
import pytest
from conftest import add_task, add_team, auth, png_bytes, token_for


async def _complete(client, clock, team, task, seconds=90, photo=None) -> str:
    """Open the task, wait, upload. Returns the submission id."""
    tok = token_for(team)
    r = await client.post(f"/tasks/{task.id}/start", headers=auth(tok))
    assert r.status_code == 200, r.text
    clock.advance(seconds=seconds)
    r = await client.post(
        f"/submissions/{task.id}/upload", headers=auth(tok),
        files={"photo": ("proof.png", photo or png_bytes(), "image/png")},
    )
    assert r.status_code == 200, r.text
    return r.json()["submission"]["id"]


async def _board(client):
    r = await client.get("/leaderboard")
    assert r.status_code == 200
    return r.json()


@pytest.mark.asyncio
async def test_completion_reaches_leaderboard(client, clock, team, task):
    await _complete(client, clock, team, task, seconds=90)
    board = await _board(client)
    assert len(board) == 1
    row = board[0]
    assert row["teamName"] == "Red Foxes"
    assert row["rank"] == 1
    assert row["completedTasks"] == 1
    assert row["totalPoints"] == 100
    assert row["totalElapsedMs"] == 90_000


@pytest.mark.asyncio
async def test_block_then_score_a_blocked_attempt(client, clock, admin, team, task):
    sid = await _complete(client, clock, team, task)
    adm = auth(token_for(admin))

    r = await client.put(f"/admin/submissions/{sid}/block", headers=adm, json={"reason": "duplicate photo"})
    assert r.status_code == 200, r.text
    sub = r.json()["submission"]
    assert sub["status"] == "blocked"
    assert sub["photoPoints"] == 0
    assert sub["blockReason"] == "duplicate photo"
    assert sub["blockedBy"] == str(admin.id)

    row = (await _board(client))[0]
    assert row["completedTasks"] == 0
    assert row["totalPoints"] == 0

    r = await client.put(f"/admin/submissions/{sid}/score", headers=adm, json={"points": 50})
    assert r.status_code == 200
    assert r.json()["submission"]["status"] == "blocked"

    row = (await _board(client))[0]
    assert row["photoPoints"] == 50
    assert row["totalPoints"] == 50
    assert row["completedTasks"] == 0


@pytest.mark.asyncio
async def test_block_without_reason_uses_default(client, clock, admin, team, task):
    sid = await _complete(client, clock, team, task)
    r = await client.put(f"/admin/submissions/{sid}/block", headers=auth(token_for(admin)))
    assert r.status_code == 200
    assert r.json()["submission"]["blockReason"] == "Blocked by admin"


@pytest.mark.asyncio
async def test_block_requires_completed_attempt(client, clock, admin, team, task):
    adm = auth(token_for(admin))
    r = await client.post(f"/tasks/{task.id}/start", headers=auth(token_for(team)))
    sid = r.json()["submission"]["id"]
    r = await client.put(f"/admin/submissions/{sid}/block", headers=adm)
    assert r.status_code == 409
    assert r.json()["error"] == "Conflict"


@pytest.mark.asyncio
async def test_blocked_team_cannot_reupload(client, clock, admin, team, task):
    sid = await _complete(client, clock, team, task)
    adm = auth(token_for(admin))
    await client.put(f"/admin/submissions/{sid}/block", headers=adm)

    r = await client.post(
        f"/submissions/{task.id}/upload", headers=auth(token_for(team)),
        files={"photo": ("again.png", png_bytes((0, 255, 0)), "image/png")},
    )
    assert r.status_code == 403
    assert r.json()["error"] == "SubmissionBlocked"

    r = await client.put(f"/admin/submissions/{sid}/block", headers=adm)
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_unblock_restores_completion_but_not_photo_points(client, clock, admin, team, task):
    sid = await _complete(client, clock, team, task)
    adm = auth(token_for(admin))
    await client.put(f"/admin/submissions/{sid}/score", headers=adm, json={"points": 30})
    await client.put(f"/admin/submissions/{sid}/block", headers=adm)

    r = await client.put(f"/admin/submissions/{sid}/unblock", headers=adm)
    assert r.status_code == 200
    sub = r.json()["submission"]
    assert sub["status"] == "completed"
    assert sub["blockedAt"] is None and sub["blockedBy"] is None and sub["blockReason"] == ""
    assert sub["photoPoints"] == 0

    row = (await _board(client))[0]
    assert row["totalPoints"] == 100
    assert row["completedTasks"] == 1

    r = await client.put(f"/admin/submissions/{sid}/unblock", headers=adm)
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_unblock_delete_then_upload_succeeds(client, clock, admin, team, task):
    sid = await _complete(client, clock, team, task)
    adm = auth(token_for(admin))
    await client.put(f"/admin/submissions/{sid}/block", headers=adm)
    await client.put(f"/admin/submissions/{sid}/unblock", headers=adm)
    r = await client.delete(f"/admin/submissions/{sid}", headers=adm)
    assert r.status_code == 200

    r = await client.post(
        f"/submissions/{task.id}/upload", headers=auth(token_for(team)),
        files={"photo": ("redo.png", png_bytes((0, 0, 255)), "image/png")},
    )
    assert r.status_code == 200
    assert r.json()["submission"]["status"] == "completed"


@pytest.mark.asyncio
async def test_delete_photo_keeps_original_open_time(client, clock, admin, team, task, store):
    tok = token_for(team)
    opened = (await client.post(f"/tasks/{task.id}/start", headers=auth(tok))).json()["submission"]
    clock.advance(seconds=60)
    up = await client.post(
        f"/submissions/{task.id}/upload", headers=auth(tok),
        files={"photo": ("proof.png", png_bytes(), "image/png")},
    )
    photo_url = up.json()["submission"]["photoUrl"]
    sid = opened["id"]
    adm = auth(token_for(admin))
    await client.put(f"/admin/submissions/{sid}/score", headers=adm, json={"points": 20})

    clock.advance(seconds=300)
    r = await client.delete(f"/admin/submissions/{sid}", headers=adm)
    assert r.status_code == 200
    sub = r.json()["submission"]
    assert sub["status"] == "in-progress"
    assert sub["photoUrl"] is None
    assert sub["elapsedMs"] is None
    assert sub["photoSubmittedAt"] is None
    assert sub["photoPoints"] is None and sub["scoredAt"] is None and sub["scoredBy"] is None
    assert sub["riddleOpenedAt"] == opened["riddleOpenedAt"]

    # blob is gone
    r = await client.get(photo_url, headers=auth(tok))
    assert r.status_code == 404

    clock.advance(seconds=40)
    r = await client.post(
        f"/submissions/{task.id}/upload", headers=auth(tok),
        files={"photo": ("redo.png", png_bytes((0, 0, 255)), "image/png")},
    )
    assert r.status_code == 200
    assert r.json()["submission"]["elapsedMs"] == 400_000

    assert await _board(client) != []


@pytest.mark.asyncio
@pytest.mark.parametrize("points", [-1, 2.5, "abc", None, True, [5]])
async def test_score_rejects_bad_points(client, clock, admin, team, task, points):
    sid = await _complete(client, clock, team, task)
    r = await client.put(f"/admin/submissions/{sid}/score", headers=auth(token_for(admin)), json={"points": points})
    assert r.status_code == 400
    assert r.json()["error"] == "InvalidScore"


@pytest.mark.asyncio
@pytest.mark.parametrize("points, stored", [(0, 0), (25, 25), ("40", 40), (10.0, 10)])
async def test_score_accepts_non_negative_integers(client, clock, admin, team, task, points, stored):
    sid = await _complete(client, clock, team, task)
    r = await client.put(f"/admin/submissions/{sid}/score", headers=auth(token_for(admin)), json={"points": points})
    assert r.status_code == 200
    sub = r.json()["submission"]
    assert sub["photoPoints"] == stored
    assert sub["scoredBy"] == str(admin.id)


@pytest.mark.asyncio
async def test_score_is_repeatable(client, clock, admin, team, task):
    sid = await _complete(client, clock, team, task)
    adm = auth(token_for(admin))
    await client.put(f"/admin/submissions/{sid}/score", headers=adm, json={"points": 10})
    r = await client.put(f"/admin/submissions/{sid}/score", headers=adm, json={"points": 70})
    assert r.json()["submission"]["photoPoints"] == 70
    assert (await _board(client))[0]["totalPoints"] == 170


@pytest.mark.asyncio
async def test_moderation_on_unknown_submission_is_404(client, admin):
    missing = "00000000-0000-0000-0000-000000000000"
    adm = auth(token_for(admin))
    for method, path, kw in [
        ("put", f"/admin/submissions/{missing}/block", {}),
        ("put", f"/admin/submissions/{missing}/unblock", {}),
        ("put", f"/admin/submissions/{missing}/score", {"json": {"points": 5}}),
        ("delete", f"/admin/submissions/{missing}", {}),
    ]:
        r = await getattr(client, method)(path, headers=adm, **kw)
        assert r.status_code == 404, path


@pytest.mark.asyncio
async def test_moderation_needs_admin(client, clock, team, task):
    sid = await _complete(client, clock, team, task)
    r = await client.put(f"/admin/submissions/{sid}/block", headers=auth(token_for(team)))
    assert r.status_code == 403
    assert r.json()["error"] == "Forbidden"


@pytest.mark.asyncio
async def test_moderation_list_filters_and_flags_duplicates(client, clock, admin, session_factory):
    task_a = await add_task(session_factory, "Alpha")
    task_b = await add_task(session_factory, "Bravo")
    one = await add_team(session_factory, "One")
    two = await add_team(session_factory, "Two")
    same = png_bytes((10, 200, 30))
    first = await _complete(client, clock, one, task_a, photo=same)
    second = await _complete(client, clock, two, task_a, photo=same)
    await client.post(f"/tasks/{task_b.id}/start", headers=auth(token_for(one)))

    adm = auth(token_for(admin))
    rows = (await client.get("/admin/submissions", headers=adm)).json()
    assert len(rows) == 3
    by_id = {r["id"]: r for r in rows}
    assert by_id[second]["possibleDuplicateOf"] == first
    assert by_id[first]["possibleDuplicateOf"] is None
    assert by_id[second]["team"]["name"] == "Two"
    assert by_id[second]["task"]["title"] == "Alpha"
    # newest photo first
    assert rows[0]["id"] == second

    rows = (await client.get("/admin/submissions", headers=adm, params={"status": "in-progress"})).json()
    assert [r["task"]["title"] for r in rows] == ["Bravo"]

    rows = (await client.get("/admin/submissions", headers=adm, params={"taskId": str(task_a.id)})).json()
    assert {r["id"] for r in rows} == {first, second}


@pytest.mark.asyncio
async def test_blocked_photos_leave_the_feed(client, clock, admin, team, task):
    sid = await _complete(client, clock, team, task)
    tok = auth(token_for(team))
    assert len((await client.get("/submissions/feed", headers=tok)).json()) == 1
    await client.put(f"/admin/submissions/{sid}/block", headers=auth(token_for(admin)))
    assert (await client.get("/submissions/feed", headers=tok)).json() == []
