"""Tag domain models."""

from enum import StrEnum

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from studies_api.database.base import Base, TimestampMixin


class TagState(StrEnum):
    NEW = "new"
    BLOCKED = "blocked"
    DELETED = "deleted"


class Tag(Base, TimestampMixin):
    """Label attached to notes."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    state: Mapped[str] = mapped_column(
        Enum(TagState, native_enum=False, length=50, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TagState.NEW.value,
    )
