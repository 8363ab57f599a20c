from __future__ import annotations
import uuid
from datetime import timedelta
from types import SimpleNamespace
import pytest
from scavenger.services.reveal import is_revealed, reveal_at, visible_task
from conftest import GAME_START


def _config(hint=180, location=360):
    return SimpleNamespace(hint_reveal_delay_sec=hint, location_reveal_delay_sec=location)


def _task():
    return SimpleNamespace(
        id=uuid.uuid4(), title="Fountain", description="Where water never sleeps", location_hint="Old town",
        detailed_hint="Behind the statue", points=100, order=1, is_active=True, map_label="F",
        lat=52.2297, lng=21.0122,
    )


def _attempt(opened=GAME_START):
    return SimpleNamespace(riddle_opened_at=opened)


def test_hint_hidden_one_second_before_delay_and_shown_at_delay():
    task, attempt, config = _task(), _attempt(), _config(hint=180)

    before = visible_task(task, attempt, config, GAME_START + timedelta(seconds=179))
    assert before.detailed_hint is None
    assert before.hint_revealed is False

    at = visible_task(task, attempt, config, GAME_START + timedelta(seconds=180))
    assert at.detailed_hint == "Behind the statue"
    assert at.hint_revealed is True


def test_reveal_is_monotonic():
    opened = GAME_START
    seen = [is_revealed(opened, 180, opened + timedelta(seconds=s)) for s in range(0, 400, 7)]
    first = seen.index(True)
    assert all(seen[first:])
    assert not any(seen[:first])


def test_location_needs_its_own_delay():
    task, attempt, config = _task(), _attempt(), _config(hint=180, location=360)
    view = visible_task(task, attempt, config, GAME_START + timedelta(seconds=200))
    assert view.detailed_hint is not None
    assert view.lat is None and view.lng is None

    view = visible_task(task, attempt, config, GAME_START + timedelta(seconds=360))
    assert (view.lat, view.lng) == (52.2297, 21.0122)
    assert view.location_revealed is True


def test_nothing_revealed_without_attempt():
    view = visible_task(_task(), None, _config(hint=0, location=0), GAME_START + timedelta(days=1))
    assert view.detailed_hint is None
    assert view.lat is None
    assert view.hint_reveal_at is None and view.location_reveal_at is None
    # riddle text itself is never gated
    assert view.description == "Where water never sleeps"


def test_admin_always_sees_coordinates_but_hint_stays_timed():
    view = visible_task(_task(), _attempt(), _config(), GAME_START, as_admin=True)
    assert view.lat == 52.2297
    assert view.detailed_hint is None

    view = visible_task(_task(), None, _config(), GAME_START, as_admin=True)
    assert view.lng == 21.0122


def test_reveal_instants_are_absolute():
    view = visible_task(_task(), _attempt(), _config(hint=180, location=360), GAME_START)
    assert view.hint_reveal_at == GAME_START + timedelta(seconds=180)
    assert view.location_reveal_at == GAME_START + timedelta(seconds=360)


@pytest.mark.parametrize("delay", [0, -5])
def test_zero_or_negative_delay_reveals_immediately(delay):
    assert reveal_at(GAME_START, delay) == GAME_START
    assert is_revealed(GAME_START, delay, GAME_START)
