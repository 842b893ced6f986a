"""Note schemas (DTOs)."""

from pydantic import Field

from studies_api.shared.schemas import PascalModel

from .models import NoteState


class NoteCreateRequest(PascalModel):
    """Note creation request. The author is the authenticated caller."""

    text: str = Field(..., min_length=1)
    topic: str = Field(..., min_length=1, max_length=255)
    tag_id: int | None = None
    state: NoteState = NoteState.NEW


class NoteUpdateRequest(PascalModel):
    """Note update request. Omitted fields are left unchanged."""

    text: str | None = Field(None, min_length=1)
    topic: str | None = Field(None, min_length=1, max_length=255)
    tag_id: int | None = None
    state: NoteState | None = None


class NoteResponse(PascalModel):
    id: int
    text: str
    topic: str
    tag_id: int | None
    user_id: int
    state: NoteState
