"""
microtodo.db.repositories.tasks

Repository for `Task` entities.

Responsibilities:
- Ownership-scoped CRUD: `find`, `list_by_owner`, `create`, `update`, `delete`.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from microtodo.db.models import Task, TaskStatus

# Columns a caller may change after creation; `owner_id` is not one of them.
_MUTABLE_FIELDS = frozenset({"title", "description", "status"})


class TaskRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find(self, task_id: int) -> Task | None:
        return await self._session.get(Task, task_id)

    async def list_by_owner(self, owner_id: int) -> list[Task]:
        # Scoped in SQL: other owners' rows are never loaded.
        stmt = select(Task).where(Task.owner_id == owner_id).order_by(Task.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def create(
        self,
        *,
        owner_id: int,
        title: str,
        description: str | None = None,
        status: TaskStatus | None = None,
    ) -> Task:
        task = Task(
            owner_id=owner_id,
            title=title,
            description=description,
            status=status or TaskStatus.pending,
        )
        self._session.add(task)
        await self._session.flush()
        return task

    async def update(self, task: Task, changes: dict[str, Any]) -> Task:
        for name, value in changes.items():
            if name in _MUTABLE_FIELDS:
                setattr(task, name, value)
        await self._session.flush()
        return task

    async def delete(self, task: Task) -> None:
        await self._session.delete(task)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# `update`/`delete` take an already-authorized entity, so the ownership check in
# `services.tasks` always happens before the write.
