"""Tag service layer."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Tag
from .schemas import TagCreateRequest, TagUpdateRequest

logger = logging.getLogger(__name__)


class TagService:
    """Service for tag operations."""

    @staticmethod
    async def create_tag(session: AsyncSession, data: TagCreateRequest) -> Tag:
        tag = Tag(name=data.name, state=data.state.value)
        session.add(tag)
        await session.flush()
        logger.info(f"Tag created: tag_id={tag.id}")
        return tag

    @staticmethod
    async def get_tag(session: AsyncSession, tag_id: int) -> Tag | None:
        stmt = select(Tag).where(Tag.id == tag_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_tags(session: AsyncSession) -> list[Tag]:
        result = await session.execute(select(Tag).order_by(Tag.id))
        return list(result.scalars().all())

    @staticmethod
    async def update_tag(tag: Tag, data: TagUpdateRequest) -> Tag:
        if data.name is not None:
            tag.name = data.name
        if data.state is not None:
            tag.state = data.state.value
        return tag

    @staticmethod
    async def delete_tag(session: AsyncSession, tag_id: int) -> bool:
        tag = await TagService.get_tag(session, tag_id)

        if tag:
            await session.delete(tag)
            logger.info(f"Tag deleted: tag_id={tag_id}")
            return True
        return False
