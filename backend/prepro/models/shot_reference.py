import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Enum
from sqlalchemy.orm import relationship

from prepro.db.base import Base


class ReferenceType(str, enum.Enum):
    recommended_image = "recommended_image"  # provider-sourced, selected by ranking
    external_link = "external_link"          # supplied by the user


class ReferenceProvider(str, enum.Enum):
    pexels = "pexels"
    unsplash = "unsplash"    # imported rows only, search uses pexels
    frameset = "frameset"


class ShotReference(Base):
    __tablename__ = "shot_references"

    id = Column(Integer, primary_key=True, index=True)
    shot_id = Column(
        Integer,
        ForeignKey("shots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type = Column(Enum(ReferenceType), nullable=False)
    provider = Column(Enum(ReferenceProvider), nullable=False)

    url = Column(String(2048), nullable=False)
    preview_url = Column(String(2048), nullable=True)

    attribution_text = Column(String(512), nullable=True)
    attribution_url = Column(String(2048), nullable=True)
    license_info = Column(String(255), nullable=True)

    why_this_works = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    shot = relationship("Shot", back_populates="references")
