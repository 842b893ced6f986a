"""Note router (API endpoints)."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from studies_api.database.dependencies import get_db_session
from studies_api.features.auth.dependencies import get_current_principal
from studies_api.features.user.verifier import Principal
from studies_api.shared.exceptions import EntityNotFound

from .schemas import NoteCreateRequest, NoteResponse, NoteUpdateRequest
from .service import NoteService

router = APIRouter(prefix="/notes", tags=["Notes"], dependencies=[Depends(get_current_principal)])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_note(
    data: NoteCreateRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
) -> int:
    """Create a note authored by the caller and return its id."""
    note = await NoteService.create_note(session, principal.id, data)
    await session.commit()
    return note.id


@router.get("", response_model=list[NoteResponse])
async def list_notes(tag_id: int | None = None, session: AsyncSession = Depends(get_db_session)):
    """List notes.

    - **tag_id**: Optional filter by tag
    """
    notes = await NoteService.get_notes(session, tag_id)
    return [NoteResponse.model_validate(n) for n in notes]


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(note_id: int, session: AsyncSession = Depends(get_db_session)):
    note = await NoteService.get_note(session, note_id)

    if not note:
        raise EntityNotFound("Note")

    return NoteResponse.model_validate(note)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(note_id: int, data: NoteUpdateRequest, session: AsyncSession = Depends(get_db_session)):
    note = await NoteService.get_note(session, note_id)

    if not note:
        raise EntityNotFound("Note")

    note = await NoteService.update_note(session, note, data)
    await session.commit()
    return NoteResponse.model_validate(note)


@router.delete("/{note_id}")
async def delete_note(note_id: int, session: AsyncSession = Depends(get_db_session)):
    success = await NoteService.delete_note(session, note_id)
    await session.commit()

    if not success:
        raise EntityNotFound("Note")

    return "Done"
