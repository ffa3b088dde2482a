"""
Earnings reports over paid jobs.
"""
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.app.models.contract import Contract
from ledger.app.models.job import Job
from ledger.app.models.profile import Profile
from ledger.app.services.metrics import report_duration_seconds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfessionEarnings:
    profession: str
    earnings: Decimal


@dataclass(frozen=True)
class ClientSpending:
    id: int
    full_name: str
    paid: Decimal


class EarningsAggregator:
    """
    Read-only aggregations over paid jobs.

    Windows are inclusive on both ends and an omitted bound is open. Results
    are computed per call; nothing is cached.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _as_stored(moment: datetime) -> datetime:
        """Payment dates are stored as naive UTC"""
        if moment.tzinfo is None:
            return moment
        return moment.astimezone(timezone.utc).replace(tzinfo=None)

    @classmethod
    def _window(cls, start: Optional[datetime], end: Optional[datetime]) -> list:
        conditions = [Job.paid_clause()]
        if start is not None:
            conditions.append(Job.payment_date >= cls._as_stored(start))
        if end is not None:
            conditions.append(Job.payment_date <= cls._as_stored(end))
        return conditions

    async def best_profession(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Optional[ProfessionEarnings]:
        """
        Profession whose contractors earned the most in the window.

        Ties go to the profession name that sorts first.

        Returns:
            ProfessionEarnings, or None when no job was paid in the window
        """
        earnings = func.sum(Job.price).label("earnings")
        query = (
            select(Profile.profession, earnings)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(Profile, Contract.contractor_id == Profile.id)
            .where(*self._window(start, end))
            .group_by(Profile.profession)
            .order_by(earnings.desc(), Profile.profession.asc())
            .limit(1)
        )

        started = time.perf_counter()
        row = (await self._session.execute(query)).first()
        report_duration_seconds.labels(report="best_profession").observe(time.perf_counter() - started)

        if row is None:
            logger.debug(f"No paid jobs between {start} and {end}")
            return None
        return ProfessionEarnings(profession=row.profession, earnings=Decimal(str(row.earnings)))

    async def best_clients(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 2,
    ) -> List[ClientSpending]:
        """
        Clients who paid the most for jobs in the window.

        Ties go to the lower profile id.

        Args:
            start: Inclusive lower bound on payment date
            end: Inclusive upper bound on payment date
            limit: Maximum number of clients returned
        """
        paid = func.sum(Job.price).label("paid")
        query = (
            select(Profile.id, Profile.full_name.label("full_name"), paid)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(Profile, Contract.client_id == Profile.id)
            .where(*self._window(start, end))
            .group_by(Profile.id, Profile.first_name, Profile.last_name)
            .order_by(paid.desc(), Profile.id.asc())
            .limit(limit)
        )

        started = time.perf_counter()
        rows = (await self._session.execute(query)).all()
        report_duration_seconds.labels(report="best_clients").observe(time.perf_counter() - started)

        return [
            ClientSpending(
                id=row.id,
                full_name=row.full_name,
                paid=Decimal(str(row.paid)),
            )
            for row in rows
        ]
