from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from sqlalchemy.orm import relationship

from prepro.db.base import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    project_type = Column(String(64), nullable=False, default="short_film")

    # optional: full script text stored here
    script_text = Column(Text, nullable=True)

    # Generation inputs, fixed at creation
    look_words = Column(JSON, nullable=False, default=list)   # ["quiet", "cold", ...]
    constraints = Column(JSON, nullable=False, default=dict)  # {budget, crew_size, coverage_mode}

    # Generation output, overwritten whole by the style stage
    style_profile = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    scenes = relationship(
        "Scene",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Scene.scene_number",
    )
