"""Tag schemas (DTOs)."""

from pydantic import Field

from studies_api.shared.schemas import PascalModel

from .models import TagState


class TagCreateRequest(PascalModel):
    name: str = Field(..., min_length=1, max_length=255)
    state: TagState = TagState.NEW


class TagUpdateRequest(PascalModel):
    """Tag update request. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    state: TagState | None = None


class TagResponse(PascalModel):
    id: int
    name: str
    state: TagState
