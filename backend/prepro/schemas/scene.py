from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List

from .shot import ShotWithReferences


class Scene(BaseModel):
    id: int
    project_id: int
    scene_number: Optional[int] = None
    int_ext: Optional[str] = None
    location: Optional[str] = None
    time_of_day: Optional[str] = None
    characters: List[str] = []
    beat_summary: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SceneWithShots(Scene):
    shots: List[ShotWithReferences] = []
