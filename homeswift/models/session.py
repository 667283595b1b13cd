"""
Server-side web session, the store behind the "remember me" cookie.
"""

from sqlalchemy import String, DateTime, JSON, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from homeswift.database import Base, as_utc, utcnow
from datetime import datetime
import uuid
from typing import Any, Dict, Optional


class UserSession(Base):
    """Opaque session id mapped to a JSON payload with an expiry."""

    __tablename__ = "sessions"

    sid: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<UserSession(sid={self.sid[:8]}..., user_id={self.user_id})>"

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return as_utc(self.expires_at) <= (now or utcnow())
