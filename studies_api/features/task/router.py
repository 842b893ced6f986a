"""Task router (API endpoints)."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from studies_api.database.dependencies import get_db_session
from studies_api.features.auth.dependencies import get_current_principal
from studies_api.shared.exceptions import EntityNotFound

from .models import TaskState
from .schemas import TaskCreateRequest, TaskResponse, TaskUpdateRequest
from .service import TaskService

router = APIRouter(prefix="/tasks", tags=["Tasks"], dependencies=[Depends(get_current_principal)])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(data: TaskCreateRequest, session: AsyncSession = Depends(get_db_session)) -> int:
    """Create a task and return its id."""
    task = await TaskService.create_task(session, data)
    await session.commit()
    return task.id


@router.get("", response_model=list[TaskResponse])
async def list_tasks(state: TaskState | None = None, session: AsyncSession = Depends(get_db_session)):
    """List tasks.

    - **state**: Optional filter (`new`, `done`, `deleted`)
    """
    tasks = await TaskService.get_tasks(session, state)
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, session: AsyncSession = Depends(get_db_session)):
    task = await TaskService.get_task(session, task_id)

    if not task:
        raise EntityNotFound("Task")

    return TaskResponse.model_validate(task)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(task_id: int, data: TaskUpdateRequest, session: AsyncSession = Depends(get_db_session)):
    task = await TaskService.get_task(session, task_id)

    if not task:
        raise EntityNotFound("Task")

    task = await TaskService.update_task(task, data)
    await session.commit()
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}")
async def delete_task(task_id: int, session: AsyncSession = Depends(get_db_session)):
    success = await TaskService.delete_task(session, task_id)
    await session.commit()

    if not success:
        raise EntityNotFound("Task")

    return "Done"
