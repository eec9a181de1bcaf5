from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from prepro.core.exceptions import UnauthorizedError
from prepro.db.session import SessionLocal
from prepro.services.candidates import CandidateSource
from prepro.services.generation import GenerationClient
from prepro.services.pipeline import Pipeline


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """
    The authenticated actor. Sessions are handled upstream; the gateway
    forwards the user id in the X-User-Id header.
    """
    if not x_user_id or not x_user_id.strip():
        raise UnauthorizedError()
    return x_user_id.strip()


@lru_cache
def get_generation_client() -> GenerationClient:
    return GenerationClient()


@lru_cache
def get_candidate_source() -> CandidateSource:
    return CandidateSource()


def get_pipeline(
    db: Session = Depends(get_db),
    generation: GenerationClient = Depends(get_generation_client),
    candidate_source: CandidateSource = Depends(get_candidate_source),
) -> Pipeline:
    return Pipeline(db, generation, candidate_source)
