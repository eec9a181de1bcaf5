from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from prepro.api.dependencies import get_current_user, get_db, get_pipeline
from prepro import models, schemas
from prepro.core.exceptions import NotFoundError
from prepro.services.pipeline import Pipeline

router = APIRouter(prefix="/shots", tags=["shots"])


def _get_owned_shot(db: Session, shot_id: int, user_id: str) -> models.Shot:
    shot = (
        db.query(models.Shot)
        .join(models.Scene, models.Shot.scene_id == models.Scene.id)
        .join(models.Project, models.Scene.project_id == models.Project.id)
        .filter(models.Shot.id == shot_id, models.Project.user_id == user_id)
        .first()
    )
    if not shot:
        raise NotFoundError("Shot", shot_id)
    return shot


@router.patch("/{shot_id}", response_model=schemas.Shot)
def update_shot(
    shot_id: int,
    shot_in: schemas.ShotUpdate,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    shot = _get_owned_shot(db, shot_id, user_id)

    data = shot_in.model_dump(exclude_unset=True)
    for field, value in data.items():
        setattr(shot, field, value)

    db.add(shot)
    db.commit()
    db.refresh(shot)
    return shot


@router.post("/{shot_id}/generate-references", response_model=schemas.GenerateReferencesResponse)
def generate_references(
    shot_id: int,
    user_id: str = Depends(get_current_user),
    pipeline: Pipeline = Depends(get_pipeline),
):
    shot = _get_owned_shot(pipeline.db, shot_id, user_id)
    references = pipeline.generate_references(shot)
    return {"references": references}


@router.post(
    "/{shot_id}/external-reference",
    response_model=schemas.ShotReference,
    status_code=status.HTTP_201_CREATED,
)
def add_external_reference(
    shot_id: int,
    payload: schemas.ExternalReferenceCreate,
    user_id: str = Depends(get_current_user),
    pipeline: Pipeline = Depends(get_pipeline),
):
    shot = _get_owned_shot(pipeline.db, shot_id, user_id)
    return pipeline.add_external_link(shot, payload.url, payload.description)
