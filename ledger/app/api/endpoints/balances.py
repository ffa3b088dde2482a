"""
Balance endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ledger.app.api.deps import get_profile, get_session_factory
from ledger.app.models.profile import Profile
from ledger.app.schemas.common import StatusResponse
from ledger.app.services.deposit_guard import DepositGuard

router = APIRouter()


@router.post("/deposit/{client_id}/{amount}", response_model=StatusResponse)
async def deposit(
    client_id: int,
    amount: str,
    profile: Profile = Depends(get_profile),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> StatusResponse:
    """
    Deposit into the caller's own balance

    - **client_id**: must be the caller
    - **amount**: positive amount, at most a quarter of the caller's unpaid jobs
    """
    guard = DepositGuard(session_factory)
    await guard.deposit(client_id, profile.id, amount)
    return StatusResponse(status="Ok")
