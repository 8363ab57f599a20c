from __future__ import annotations
from datetime import datetime, timedelta
from scavenger.models.game_config import GameConfig
from scavenger.models.submission import Submission
from scavenger.models.task import Task
from scavenger.schemas.task import TaskView


def reveal_at(opened_at: datetime, delay_sec: int) -> datetime:
    return opened_at + timedelta(seconds=max(0, int(delay_sec)))


def is_revealed(opened_at: datetime | None, delay_sec: int, now: datetime) -> bool:
    """
    True once `delay_sec` has fully elapsed since the riddle was opened.
    Nothing is revealed before the riddle is opened.
    """
    if opened_at is None:
        return False
    return now >= reveal_at(opened_at, delay_sec)


def visible_task(
    task: Task,
    attempt: Submission | None,
    config: GameConfig,
    now: datetime,
    as_admin: bool = False,
) -> TaskView:
    """
    What a viewer may see of `task` at `now`. Evaluated on every read; there is no
    background job flipping reveal state.

    Riddle text is always included. The detailed hint appears after
    hintRevealDelaySec and the coordinates after locationRevealDelaySec, both
    counted from the attempt's riddle_opened_at. Admins always see coordinates.
    """
    opened_at = attempt.riddle_opened_at if attempt is not None else None

    hint_shown = is_revealed(opened_at, config.hint_reveal_delay_sec, now)
    location_shown = as_admin or is_revealed(opened_at, config.location_reveal_delay_sec, now)

    return TaskView(
        id=task.id,
        title=task.title,
        description=task.description,
        location_hint=task.location_hint,
        points=task.points,
        order=task.order,
        is_active=task.is_active,
        map_label=task.map_label,
        detailed_hint=task.detailed_hint if hint_shown else None,
        lat=task.lat if location_shown else None,
        lng=task.lng if location_shown else None,
        hint_revealed=hint_shown,
        location_revealed=location_shown,
        hint_reveal_at=reveal_at(opened_at, config.hint_reveal_delay_sec) if opened_at else None,
        location_reveal_at=reveal_at(opened_at, config.location_reveal_delay_sec) if opened_at else None,
    )
