"""Note domain models."""

from enum import StrEnum

from sqlalchemy import Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studies_api.database.base import Base, TimestampMixin


class NoteState(StrEnum):
    NEW = "new"
    BLOCKED = "blocked"
    DELETED = "deleted"


class Note(Base, TimestampMixin):
    """Study note written by a user, optionally tagged."""

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    topic: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relations
    tag_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tags.id", ondelete="SET NULL"), nullable=True, index=True
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    state: Mapped[str] = mapped_column(
        Enum(NoteState, native_enum=False, length=50, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=NoteState.NEW.value,
    )
