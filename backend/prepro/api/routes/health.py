from fastapi import APIRouter

from prepro import schemas
from prepro.services import house_bias

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/house-bias", response_model=schemas.HouseBiasResponse)
def get_house_bias():
    return {"summary": house_bias.HOUSE_SUMMARY, "profile": house_bias.profile_as_dict()}
