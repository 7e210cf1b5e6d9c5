from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wishlist.core.time import utcnow
from wishlist.models.base import Base


class FeatureStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    REJECTED = "REJECTED"


class FeatureRequest(Base):
    __tablename__ = "feature_requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=FeatureStatus.OPEN.value, index=True)
    # Set once on insert; no onupdate
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    ticket_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    votes: Mapped[list["Vote"]] = relationship("Vote", back_populates="feature")
