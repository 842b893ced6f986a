"""Task domain models."""

from enum import StrEnum

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from studies_api.database.base import Base, TimestampMixin


class TaskState(StrEnum):
    """Task lifecycle state."""

    NEW = "new"
    DONE = "done"
    DELETED = "deleted"


class Task(Base, TimestampMixin):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    state: Mapped[str] = mapped_column(
        Enum(TaskState, native_enum=False, length=50, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TaskState.NEW.value,
        index=True,
    )
