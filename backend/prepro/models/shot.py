from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship

from prepro.db.base import Base


class Shot(Base):
    __tablename__ = "shots"

    id = Column(Integer, primary_key=True, index=True)

    scene_id = Column(
        Integer,
        ForeignKey("scenes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    shot_code = Column(String(16), nullable=True)      # "1A", "1B", ...
    position_index = Column(Integer, nullable=False)   # crew-facing order, 0-based

    # Nominal enums, stored as free text
    shot_size = Column(String(64), nullable=True)      # WS, MS, MCU, CU, ECU
    angle = Column(String(64), nullable=True)
    movement = Column(String(64), nullable=True)       # static, handheld, push-in, ...
    lens_suggestion = Column(String(64), nullable=True)
    time_cost_estimate = Column(String(64), nullable=True)

    blocking_notes = Column(Text, nullable=True)
    intent_text = Column(Text, nullable=True)
    audio_notes = Column(Text, nullable=True)

    reference_targets = Column(JSON, nullable=True)    # {lighting, framing, movement, depth, texture}
    search_prompts = Column(JSON, nullable=True)       # only used to query the image provider

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    scene = relationship("Scene", back_populates="shots")
    references = relationship(
        "ShotReference",
        back_populates="shot",
        cascade="all, delete-orphan",
    )
