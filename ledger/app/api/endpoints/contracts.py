"""
Contract endpoints
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.app.api.deps import get_db, get_profile
from ledger.app.core.exceptions import NotFoundError
from ledger.app.models.contract import Contract, CONTRACT_TERMINATED
from ledger.app.models.profile import Profile
from ledger.app.schemas.contract import ContractResponse

router = APIRouter()


@router.get("", response_model=List[ContractResponse])
async def list_contracts(
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_db),
) -> List[ContractResponse]:
    """Non-terminated contracts where the caller is client or contractor"""
    query = (
        select(Contract)
        .where(Contract.is_party(profile.id), Contract.status != CONTRACT_TERMINATED)
        .order_by(Contract.id)
    )
    result = await db.execute(query)
    return [ContractResponse.model_validate(c) for c in result.scalars().all()]


@router.get("/{contract_id}", response_model=ContractResponse)
async def get_contract(
    contract_id: int,
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_db),
) -> ContractResponse:
    """A single contract, visible only to its two parties"""
    query = select(Contract).where(Contract.id == contract_id, Contract.is_party(profile.id))
    result = await db.execute(query)
    contract = result.scalar_one_or_none()

    if not contract:
        raise NotFoundError("Contract", contract_id)

    return ContractResponse.model_validate(contract)
