"""
Waitlist signup for the pre-launch landing page.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from homeswift.database import Base


class WaitlistEntry(Base):
    __tablename__ = "waitlist"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<WaitlistEntry(email={self.email})>"

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
        }
