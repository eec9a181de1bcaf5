from .project import Project, ProjectCreate, ProjectUpdate, ProjectTree, ProjectConstraints
from .scene import Scene, SceneWithShots
from .shot import Shot, ShotUpdate, ShotWithReferences
from .shot_reference import ShotReference, ExternalReferenceCreate
from .generation import (
    GenerateShotsRequest,
    ParseScriptResponse,
    StyleProfileResponse,
    GenerateShotsResponse,
    GenerateReferencesResponse,
    HouseBiasResponse,
)

__all__ = [
    "Project",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectTree",
    "ProjectConstraints",
    "Scene",
    "SceneWithShots",
    "Shot",
    "ShotUpdate",
    "ShotWithReferences",
    "ShotReference",
    "ExternalReferenceCreate",
    "GenerateShotsRequest",
    "ParseScriptResponse",
    "StyleProfileResponse",
    "GenerateShotsResponse",
    "GenerateReferencesResponse",
    "HouseBiasResponse",
]
