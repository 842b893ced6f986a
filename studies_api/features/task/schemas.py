"""Task schemas (DTOs)."""

from pydantic import Field

from studies_api.shared.schemas import PascalModel

from .models import TaskState


class TaskCreateRequest(PascalModel):
    name: str = Field(..., min_length=1, max_length=255)
    state: TaskState = TaskState.NEW


class TaskUpdateRequest(PascalModel):
    """Task update request. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    state: TaskState | None = None


class TaskResponse(PascalModel):
    id: int
    name: str
    state: TaskState
