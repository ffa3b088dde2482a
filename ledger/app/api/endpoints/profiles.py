"""
Profile endpoints
"""
from fastapi import APIRouter, Depends

from ledger.app.api.deps import get_profile
from ledger.app.models.profile import Profile
from ledger.app.schemas.profile import ProfileResponse

router = APIRouter()


@router.get("/me", response_model=ProfileResponse)
async def read_own_profile(profile: Profile = Depends(get_profile)) -> ProfileResponse:
    """The caller's profile and current balance"""
    return ProfileResponse.model_validate(profile)
