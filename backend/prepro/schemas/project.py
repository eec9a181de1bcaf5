from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal

from .scene import SceneWithShots

MIN_LOOK_WORDS = 3
MAX_LOOK_WORDS = 10


class ProjectConstraints(BaseModel):
    budget: Literal["micro", "low", "moderate"] = "low"
    crew_size: Literal["skeleton", "small", "standard"] = "small"
    coverage_mode: Literal["minimal", "standard", "safety"] = "minimal"


class ProjectBase(BaseModel):
    title: str = Field(..., min_length=1)
    project_type: str = "short_film"


class ProjectCreate(ProjectBase):
    script_text: Optional[str] = None
    look_words: List[str]
    constraints: ProjectConstraints = ProjectConstraints()

    @field_validator("look_words")
    @classmethod
    def normalize_look_words(cls, words: List[str]) -> List[str]:
        # trimmed, lower-cased, first occurrence wins
        normalized: List[str] = []
        for word in words:
            w = word.strip().lower()
            if w and w not in normalized:
                normalized.append(w)

        if not MIN_LOOK_WORDS <= len(normalized) <= MAX_LOOK_WORDS:
            raise ValueError(
                f"Add between {MIN_LOOK_WORDS} and {MAX_LOOK_WORDS} look & feel words"
            )
        return normalized


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    script_text: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("title cannot be null")
        return value


class Project(ProjectBase):
    id: int
    user_id: str
    script_text: Optional[str] = None
    look_words: List[str]
    constraints: ProjectConstraints
    style_profile: Optional[dict] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectTree(Project):
    scenes: List[SceneWithShots] = []
