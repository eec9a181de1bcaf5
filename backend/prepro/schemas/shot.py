from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

from .shot_reference import ShotReference


class ShotBase(BaseModel):
    shot_code: Optional[str] = None
    shot_size: Optional[str] = None
    angle: Optional[str] = None
    movement: Optional[str] = None
    lens_suggestion: Optional[str] = None
    blocking_notes: Optional[str] = None
    intent_text: Optional[str] = None
    audio_notes: Optional[str] = None
    time_cost_estimate: Optional[str] = None


class ShotUpdate(ShotBase):
    """Fields a crew member may edit by hand; generation outputs stay read-only."""

    position_index: Optional[int] = Field(default=None, ge=0)

    @field_validator("position_index")
    @classmethod
    def position_index_not_null(cls, value: Optional[int]) -> int:
        # omitted is fine, an explicit null is not
        if value is None:
            raise ValueError("position_index cannot be null")
        return value


class Shot(ShotBase):
    id: int
    scene_id: int
    position_index: int
    reference_targets: Optional[dict] = None
    search_prompts: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ShotWithReferences(Shot):
    references: List[ShotReference] = []
