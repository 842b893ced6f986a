"""Tag router (API endpoints)."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from studies_api.database.dependencies import get_db_session
from studies_api.features.auth.dependencies import get_current_principal
from studies_api.shared.exceptions import EntityNotFound

from .schemas import TagCreateRequest, TagResponse, TagUpdateRequest
from .service import TagService

router = APIRouter(prefix="/tags", tags=["Tags"], dependencies=[Depends(get_current_principal)])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tag(data: TagCreateRequest, session: AsyncSession = Depends(get_db_session)) -> int:
    """Create a tag and return its id."""
    tag = await TagService.create_tag(session, data)
    await session.commit()
    return tag.id


@router.get("", response_model=list[TagResponse])
async def list_tags(session: AsyncSession = Depends(get_db_session)):
    tags = await TagService.get_tags(session)
    return [TagResponse.model_validate(t) for t in tags]


@router.get("/{tag_id}", response_model=TagResponse)
async def get_tag(tag_id: int, session: AsyncSession = Depends(get_db_session)):
    tag = await TagService.get_tag(session, tag_id)

    if not tag:
        raise EntityNotFound("Tag")

    return TagResponse.model_validate(tag)


@router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(tag_id: int, data: TagUpdateRequest, session: AsyncSession = Depends(get_db_session)):
    tag = await TagService.get_tag(session, tag_id)

    if not tag:
        raise EntityNotFound("Tag")

    tag = await TagService.update_tag(tag, data)
    await session.commit()
    return TagResponse.model_validate(tag)


@router.delete("/{tag_id}")
async def delete_tag(tag_id: int, session: AsyncSession = Depends(get_db_session)):
    success = await TagService.delete_tag(session, tag_id)
    await session.commit()

    if not success:
        raise EntityNotFound("Tag")

    return "Done"
