"""
microtodo.api.routers.tasks

Task endpoints of the task service. Every route requires a valid token.

Responsibilities:
- Translate HTTP requests into `OwnedTaskService` calls.
- Never read identity from the request body or query string.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from microtodo.api.deps import db_session, tasks_dep
from microtodo.api.schemas import TaskCreateRequest, TaskResponse, TaskUpdateRequest
from microtodo.auth.deps import get_principal
from microtodo.auth.models import Principal
from microtodo.services.tasks import OwnedTaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.post("", response_model=TaskResponse, status_code=HTTP_201_CREATED)
async def create_task(
    body: TaskCreateRequest,
    principal: Principal = Depends(get_principal),
    tasks: OwnedTaskService = Depends(tasks_dep),
    session: AsyncSession = Depends(db_session),
) -> TaskResponse:
    task = await tasks.create(principal, body.model_dump(exclude_unset=True))
    await session.commit()
    return TaskResponse.model_validate(task)


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    principal: Principal = Depends(get_principal),
    tasks: OwnedTaskService = Depends(tasks_dep),
) -> list[TaskResponse]:
    return [TaskResponse.model_validate(t) for t in await tasks.list_owned(principal)]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    principal: Principal = Depends(get_principal),
    tasks: OwnedTaskService = Depends(tasks_dep),
) -> TaskResponse:
    return TaskResponse.model_validate(await tasks.get(principal, task_id))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    body: TaskUpdateRequest,
    principal: Principal = Depends(get_principal),
    tasks: OwnedTaskService = Depends(tasks_dep),
    session: AsyncSession = Depends(db_session),
) -> TaskResponse:
    task = await tasks.update(principal, task_id, body.model_dump(exclude_unset=True))
    await session.commit()
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    principal: Principal = Depends(get_principal),
    tasks: OwnedTaskService = Depends(tasks_dep),
    session: AsyncSession = Depends(db_session),
) -> Response:
    await tasks.delete(principal, task_id)
    await session.commit()
    return Response(status_code=HTTP_204_NO_CONTENT)


# --- Module Notes -----------------------------------------------------------
# Authentication runs before the DB session is used; an invalid token never
# reaches the repository.
