"""
microtodo.services.tasks

Task operations with ownership enforcement.

Responsibilities:
- Create tasks owned by the caller, whatever the request body claims.
- List only the caller's tasks, scoped at the query.
- Fetch, authorize, then read/update/delete by id.
"""

from __future__ import annotations

from typing import Any

from microtodo.auth.models import Principal
from microtodo.auth.ownership import OwnershipEnforcer
from microtodo.db.models import Task
from microtodo.db.repositories.tasks import TaskRepo
from microtodo.observability.logging import get_logger

log = get_logger(__name__)


class OwnedTaskService:
    def __init__(self, *, repo: TaskRepo, enforcer: OwnershipEnforcer) -> None:
        self._repo = repo
        self._enforcer = enforcer

    async def create(self, principal: Principal, fields: dict[str, Any]) -> Task:
        owned = self._enforcer.claim(principal, fields)
        task = await self._repo.create(
            owner_id=owned["owner_id"],
            title=owned["title"],
            description=owned.get("description"),
            status=owned.get("status"),
        )
        log.info("task_created", task_id=task.id)
        return task

    async def list_owned(self, principal: Principal) -> list[Task]:
        return await self._repo.list_by_owner(self._enforcer.scope(principal))

    async def get(self, principal: Principal, task_id: int) -> Task:
        task = await self._repo.find(task_id)
        return self._enforcer.require(principal, task)

    async def update(self, principal: Principal, task_id: int, changes: dict[str, Any]) -> Task:
        task = self._enforcer.require(principal, await self._repo.find(task_id))
        # claim() strips any owner fields; the stamped owner equals the current one.
        allowed = self._enforcer.claim(principal, changes)
        allowed.pop("owner_id")
        task = await self._repo.update(task, allowed)
        log.info("task_updated", task_id=task.id)
        return task

    async def delete(self, principal: Principal, task_id: int) -> None:
        task = self._enforcer.require(principal, await self._repo.find(task_id))
        await self._repo.delete(task)
        log.info("task_deleted", task_id=task_id)


# --- Module Notes -----------------------------------------------------------
# The caller commits the session; a denied request raises before any flush.
