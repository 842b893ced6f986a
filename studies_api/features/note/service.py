"""Note service layer."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from studies_api.features.tag.models import Tag
from studies_api.shared.exceptions import EntityNotFound

from .models import Note
from .schemas import NoteCreateRequest, NoteUpdateRequest

logger = logging.getLogger(__name__)


class NoteService:
    """Service for note operations."""

    @staticmethod
    async def _ensure_tag(session: AsyncSession, tag_id: int | None) -> None:
        """Reject references to tags that do not exist.

        Raises:
            EntityNotFound: If the tag is missing

        """
        if tag_id is None:
            return
        if await session.get(Tag, tag_id) is None:
            raise EntityNotFound("Tag")

    @staticmethod
    async def create_note(session: AsyncSession, user_id: int, data: NoteCreateRequest) -> Note:
        """Create a note authored by ``user_id``.

        Args:
            session: Database session
            user_id: Author, taken from the caller's access token
            data: Note data

        Returns:
            Created Note object

        Raises:
            EntityNotFound: If ``tag_id`` references a missing tag

        """
        await NoteService._ensure_tag(session, data.tag_id)

        note = Note(
            text=data.text,
            topic=data.topic,
            tag_id=data.tag_id,
            user_id=user_id,
            state=data.state.value,
        )
        session.add(note)
        await session.flush()
        logger.info(f"Note created: note_id={note.id} user_id={user_id}")
        return note

    @staticmethod
    async def get_note(session: AsyncSession, note_id: int) -> Note | None:
        stmt = select(Note).where(Note.id == note_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_notes(session: AsyncSession, tag_id: int | None = None) -> list[Note]:
        stmt = select(Note).order_by(Note.id)
        if tag_id is not None:
            stmt = stmt.where(Note.tag_id == tag_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def update_note(session: AsyncSession, note: Note, data: NoteUpdateRequest) -> Note:
        if data.tag_id is not None:
            await NoteService._ensure_tag(session, data.tag_id)
            note.tag_id = data.tag_id
        if data.text is not None:
            note.text = data.text
        if data.topic is not None:
            note.topic = data.topic
        if data.state is not None:
            note.state = data.state.value
        return note

    @staticmethod
    async def delete_note(session: AsyncSession, note_id: int) -> bool:
        note = await NoteService.get_note(session, note_id)

        if note:
            await session.delete(note)
            logger.info(f"Note deleted: note_id={note_id}")
            return True
        return False
