"""Task service layer."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Task, TaskState
from .schemas import TaskCreateRequest, TaskUpdateRequest

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task operations."""

    @staticmethod
    async def create_task(session: AsyncSession, data: TaskCreateRequest) -> Task:
        task = Task(name=data.name, state=data.state.value)
        session.add(task)
        await session.flush()
        logger.info(f"Task created: task_id={task.id}")
        return task

    @staticmethod
    async def get_task(session: AsyncSession, task_id: int) -> Task | None:
        stmt = select(Task).where(Task.id == task_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_tasks(session: AsyncSession, state: TaskState | None = None) -> list[Task]:
        """List tasks, optionally only those in the given state."""
        stmt = select(Task).order_by(Task.id)
        if state is not None:
            stmt = stmt.where(Task.state == state.value)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def update_task(task: Task, data: TaskUpdateRequest) -> Task:
        if data.name is not None:
            task.name = data.name
        if data.state is not None:
            task.state = data.state.value
        return task

    @staticmethod
    async def delete_task(session: AsyncSession, task_id: int) -> bool:
        task = await TaskService.get_task(session, task_id)

        if task:
            await session.delete(task)
            logger.info(f"Task deleted: task_id={task_id}")
            return True
        return False
