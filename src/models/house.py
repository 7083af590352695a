"""
House model for the house map application.

This module defines the House model, which represents a decorated house
pinned on the map by a visitor (or seeded from a geocoded address list).
"""
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, Float, String, Text, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models.base import Base


class House(Base):
    """
    House model representing a single pin on the map.

    Attributes:
        id (UUID): Primary key for the house
        name (str): Display label shown on the marker popup
        description (str): Optional free text
        address (str): Optional street address (may come from reverse geocoding)
        latitude (float): Latitude of the pin
        longitude (float): Longitude of the pin
        image_path (str): Optional reference to an uploaded photo
        created_by (str): Browser ID of the visitor who created the pin, NULL for seeded rows
    """
    __tablename__ = "houses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    image_path: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), server_default=func.now(), nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    votes: Mapped[List["Vote"]] = relationship("Vote", back_populates="house", cascade="all, delete-orphan")

    def to_dict(self):
        """
        Convert the House object to a dictionary of its persisted fields.

        Per-viewer fields (vote score, the viewer's vote, ownership) are not
        stored; see utils.voting.project_house.
        """
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "imagePath": self.image_path,
            "createdBy": self.created_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<House {self.id}: {self.name}>"
