from prepro.db.base import Base
from .project import Project
from .scene import Scene
from .shot import Shot
from .shot_reference import ShotReference, ReferenceType, ReferenceProvider

__all__ = ["Base", "Project", "Scene", "Shot", "ShotReference", "ReferenceType", "ReferenceProvider"]
