from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional

from prepro.models.shot_reference import ReferenceType, ReferenceProvider


class ExternalReferenceCreate(BaseModel):
    url: str = Field(..., min_length=1)
    description: Optional[str] = None


class ShotReference(BaseModel):
    id: int
    shot_id: int
    type: ReferenceType
    provider: ReferenceProvider
    url: str
    preview_url: Optional[str] = None
    attribution_text: Optional[str] = None
    attribution_url: Optional[str] = None
    license_info: Optional[str] = None
    why_this_works: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
