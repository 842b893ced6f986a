"""Authentication models (refresh token sessions)."""

from datetime import UTC, datetime

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from studies_api.database.base import Base, UTCDateTime


class RefreshToken(Base):
    """Refresh token session.

    One row per user at most: ``user_id`` and ``token`` are both unique, and
    rotation rewrites the row in a single statement. Deleting the user deletes
    the session.
    """

    __tablename__ = "refresh_tokens"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Token data
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    token: Mapped[str] = mapped_column(String(500), unique=True, nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)

    # Audit trail
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
