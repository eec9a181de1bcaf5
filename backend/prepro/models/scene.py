from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship

from prepro.db.base import Base


class Scene(Base):
    __tablename__ = "scenes"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Assigned by the parse stage, stored as given
    scene_number = Column(Integer, nullable=True)
    int_ext = Column(String(32), nullable=True)       # INT, EXT, INT/EXT
    location = Column(String(255), nullable=True)
    time_of_day = Column(String(64), nullable=True)
    characters = Column(JSON, nullable=False, default=list)
    beat_summary = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    project = relationship("Project", back_populates="scenes")
    shots = relationship(
        "Shot",
        back_populates="scene",
        cascade="all, delete-orphan",
        order_by="Shot.position_index",
    )
