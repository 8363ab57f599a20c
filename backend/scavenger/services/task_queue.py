from __future__ import annotations
import random
from typing import Iterable, Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.models.task import Task

_rng = random.SystemRandom()


def fisher_yates(items: list, rng: random.Random | None = None) -> list:
    """Return a Fisher-Yates shuffled copy of `items`."""
    rng = rng or _rng
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out


def build_task_queue(task_ids: Sequence[str], shuffle: bool, rng: random.Random | None = None) -> list[str]:
    """Snapshot of active task ids in catalog order, optionally shuffled."""
    ids = [str(t) for t in task_ids]
    return fisher_yates(ids, rng) if shuffle else ids


def merge_queue(stored: Iterable[str], active_task_ids: Sequence[str]) -> list[str]:
    """
    Read-time view of a team's queue. Stored order is kept (tasks that are gone or
    inactive drop out); active tasks created after the snapshot are appended in
    catalog order. The stored queue itself is never modified here.
    """
    active = [str(t) for t in active_task_ids]
    active_set = set(active)
    merged: list[str] = []
    seen: set[str] = set()
    for tid in stored or []:
        tid = str(tid)
        if tid in active_set and tid not in seen:
            merged.append(tid)
            seen.add(tid)
    merged.extend(tid for tid in active if tid not in seen)
    return merged


async def active_task_ids(session: AsyncSession) -> list[str]:
    rows = (await session.execute(
        select(Task.id).where(Task.is_active.is_(True)).order_by(Task.order.asc(), Task.created_at.asc())
    )).scalars().all()
    return [str(r) for r in rows]
