from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wishlist.core.time import utcnow
from wishlist.models.base import Base


class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("feature_id", "voter_id", name="uq_vote_feature_voter"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    feature_id: Mapped[int] = mapped_column(ForeignKey("feature_requests.id"), index=True)
    voter_id: Mapped[str] = mapped_column(String(64), index=True)
    voted_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    feature: Mapped["FeatureRequest"] = relationship("FeatureRequest", back_populates="votes")
