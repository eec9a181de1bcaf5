from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from prepro.api.dependencies import get_current_user, get_db
from prepro import models
from prepro.core.exceptions import NotFoundError

router = APIRouter(prefix="/references", tags=["references"])


@router.delete("/{reference_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reference(
    reference_id: int,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    reference = (
        db.query(models.ShotReference)
        .join(models.Shot, models.ShotReference.shot_id == models.Shot.id)
        .join(models.Scene, models.Shot.scene_id == models.Scene.id)
        .join(models.Project, models.Scene.project_id == models.Project.id)
        .filter(models.ShotReference.id == reference_id, models.Project.user_id == user_id)
        .first()
    )
    if not reference:
        raise NotFoundError("Reference", reference_id)

    db.delete(reference)
    db.commit()
