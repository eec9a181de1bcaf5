from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, selectinload

from prepro.api.dependencies import get_current_user, get_db, get_pipeline
from prepro import models, schemas
from prepro.core.exceptions import NotFoundError
from prepro.services.pipeline import Pipeline

router = APIRouter(prefix="/projects", tags=["projects"])


def _get_owned_project(db: Session, project_id: int, user_id: str) -> models.Project:
    project = (
        db.query(models.Project)
        .filter(models.Project.id == project_id, models.Project.user_id == user_id)
        .first()
    )
    if not project:
        raise NotFoundError("Project", project_id)
    return project


@router.post("/", response_model=schemas.Project, status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: schemas.ProjectCreate,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = models.Project(
        user_id=user_id,
        title=project_in.title,
        project_type=project_in.project_type,
        script_text=project_in.script_text,
        look_words=project_in.look_words,
        constraints=project_in.constraints.model_dump(),
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@router.get("/", response_model=List[schemas.Project])
def list_projects(
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(models.Project)
        .filter(models.Project.user_id == user_id)
        .order_by(models.Project.created_at.desc())
        .all()
    )


@router.get("/{project_id}", response_model=schemas.ProjectTree)
def get_project(
    project_id: int,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Project with scenes by scene_number, shots by position_index, and references."""
    project = (
        db.query(models.Project)
        .options(
            selectinload(models.Project.scenes)
            .selectinload(models.Scene.shots)
            .selectinload(models.Shot.references)
        )
        .filter(models.Project.id == project_id, models.Project.user_id == user_id)
        .first()
    )
    if not project:
        raise NotFoundError("Project", project_id)
    return project


@router.patch("/{project_id}", response_model=schemas.Project)
def update_project(
    project_id: int,
    project_in: schemas.ProjectUpdate,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = _get_owned_project(db, project_id, user_id)

    data = project_in.model_dump(exclude_unset=True)
    for field, value in data.items():
        setattr(project, field, value)

    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = _get_owned_project(db, project_id, user_id)
    db.delete(project)
    db.commit()


# --- generation stages ----------------------------------------------------

@router.post("/{project_id}/parse-script", response_model=schemas.ParseScriptResponse)
def parse_script(
    project_id: int,
    user_id: str = Depends(get_current_user),
    pipeline: Pipeline = Depends(get_pipeline),
):
    project = _get_owned_project(pipeline.db, project_id, user_id)
    scenes = pipeline.parse_script(project)
    return {"scenes": scenes}


@router.post("/{project_id}/generate-style", response_model=schemas.StyleProfileResponse)
def generate_style(
    project_id: int,
    user_id: str = Depends(get_current_user),
    pipeline: Pipeline = Depends(get_pipeline),
):
    project = _get_owned_project(pipeline.db, project_id, user_id)
    style_profile = pipeline.generate_style_profile(project)
    return {"style_profile": style_profile}


@router.post("/{project_id}/generate-shots", response_model=schemas.GenerateShotsResponse)
def generate_shots(
    project_id: int,
    payload: schemas.GenerateShotsRequest,
    user_id: str = Depends(get_current_user),
    pipeline: Pipeline = Depends(get_pipeline),
):
    project = _get_owned_project(pipeline.db, project_id, user_id)
    shots = pipeline.generate_shots(project, payload.scene_id)
    return {"shots": shots}
