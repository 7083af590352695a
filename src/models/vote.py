import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models.base import Base


class Vote(Base):
    """
    A single up/down vote cast by a browser on a house.

    A browser holds at most one vote per house; clearing a vote deletes the
    row, so ``value`` is only ever +1 or -1.
    """
    __tablename__ = "votes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    house_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("houses.id", ondelete="CASCADE"), nullable=False, index=True)
    browser_id: Mapped[str] = mapped_column(String, nullable=False)
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    house = relationship("House", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("house_id", "browser_id", name="votes_house_id_browser_id_unique"),
        CheckConstraint("value IN (-1, 1)", name="votes_value_check"),
    )

    def to_dict(self):
        return {
            "id": str(self.id),
            "house_id": str(self.house_id),
            "browser_id": self.browser_id,
            "value": self.value,
        }
