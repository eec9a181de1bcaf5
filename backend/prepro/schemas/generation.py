# prepro/schemas/generation.py

from typing import List
from pydantic import BaseModel

from .scene import Scene
from .shot import Shot
from .shot_reference import ShotReference


class GenerateShotsRequest(BaseModel):
    scene_id: int


class ParseScriptResponse(BaseModel):
    scenes: List[Scene]


class StyleProfileResponse(BaseModel):
    style_profile: dict


class GenerateShotsResponse(BaseModel):
    shots: List[Shot]


class GenerateReferencesResponse(BaseModel):
    references: List[ShotReference]


class HouseBiasResponse(BaseModel):
    summary: str
    profile: dict
