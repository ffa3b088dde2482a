"""
Admin report endpoints
"""
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.app.api.deps import get_db
from ledger.app.core.config import settings
from ledger.app.core.exceptions import NoDataError
from ledger.app.schemas.admin import BestProfessionResponse, BestClientResponse
from ledger.app.services.earnings import EarningsAggregator

router = APIRouter()


@router.get("/best-profession", response_model=BestProfessionResponse)
async def best_profession(
    start: datetime | None = Query(None, description="Start of the window (ISO 8601)"),
    end: datetime | None = Query(None, description="End of the window (ISO 8601)"),
    db: AsyncSession = Depends(get_db),
) -> BestProfessionResponse:
    """Profession that earned the most for jobs paid between start and end"""
    result = await EarningsAggregator(db).best_profession(start, end)
    if result is None:
        raise NoDataError()
    return BestProfessionResponse(profession=result.profession, earnings=result.earnings)


@router.get("/best-clients", response_model=List[BestClientResponse])
async def best_clients(
    start: datetime | None = Query(None, description="Start of the window (ISO 8601)"),
    end: datetime | None = Query(None, description="End of the window (ISO 8601)"),
    limit: int = Query(settings.BEST_CLIENTS_DEFAULT_LIMIT, ge=1, le=100, description="Number of clients"),
    db: AsyncSession = Depends(get_db),
) -> List[BestClientResponse]:
    """Clients that paid the most for jobs paid between start and end"""
    rows = await EarningsAggregator(db).best_clients(start, end, limit)
    return [BestClientResponse(id=r.id, full_name=r.full_name, paid=r.paid) for r in rows]
