"""
Job endpoints
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ledger.app.api.deps import get_db, get_profile, get_session_factory
from ledger.app.models.contract import Contract, CONTRACT_IN_PROGRESS
from ledger.app.models.job import Job
from ledger.app.models.profile import Profile
from ledger.app.schemas.common import StatusResponse
from ledger.app.schemas.job import JobResponse
from ledger.app.services.transfer_engine import BalanceTransferEngine

router = APIRouter()


@router.get("/unpaid", response_model=List[JobResponse])
async def list_unpaid_jobs(
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_db),
) -> List[JobResponse]:
    """Unpaid jobs on the caller's in-progress contracts"""
    query = (
        select(Job)
        .join(Contract, Job.contract_id == Contract.id)
        .where(
            Job.unpaid_clause(),
            Contract.status == CONTRACT_IN_PROGRESS,
            Contract.is_party(profile.id),
        )
        .order_by(Job.id)
    )
    result = await db.execute(query)
    return [JobResponse.model_validate(j) for j in result.scalars().all()]


@router.post("/{job_id}/pay", response_model=StatusResponse)
async def pay_job(
    job_id: int,
    profile: Profile = Depends(get_profile),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> StatusResponse:
    """
    Pay a job from the caller's balance to the contractor

    Responds Ok only after the payment has committed; rejections are
    rendered by the ledger error handler.
    """
    engine = BalanceTransferEngine(session_factory)
    await engine.pay_job(job_id, profile.id)
    return StatusResponse(status="Ok")
