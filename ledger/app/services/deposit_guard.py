"""
DepositGuard - bounded client top-ups.

A client may deposit at most DEPOSIT_LIMIT_RATIO of the value of all their
unpaid jobs, whatever the contract status. With no unpaid jobs the limit is
zero and every deposit is refused.
"""
import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ledger.app.core.config import settings
from ledger.app.core.exceptions import (
    LedgerError,
    ForbiddenError,
    InvalidAmountError,
    DepositLimitExceededError,
    NotFoundError,
    TransferFailedError,
)
from ledger.app.db.base import utcnow
from ledger.app.models.contract import Contract
from ledger.app.models.job import Job
from ledger.app.models.profile import Profile
from ledger.app.services.metrics import record_deposit

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def parse_amount(raw: str | Decimal) -> Decimal:
    """
    Parse a monetary amount

    Args:
        raw: Amount as received (path segment or Decimal)

    Returns:
        Positive Decimal with at most two decimal places

    Raises:
        InvalidAmountError: Malformed, non-finite, non-positive or sub-cent amount
    """
    try:
        amount = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
        if amount.is_finite() and amount > 0 and amount == amount.quantize(CENT):
            return amount
    except InvalidOperation:
        pass
    raise InvalidAmountError(str(raw))


class DepositGuard:
    """Authorizes and applies client deposits."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        limit_ratio: Decimal = settings.DEPOSIT_LIMIT_RATIO,
    ):
        self._session_factory = session_factory
        self._limit_ratio = limit_ratio

    @staticmethod
    async def pending_total(session: AsyncSession, client_id: int) -> Decimal:
        """Sum of prices of every unpaid job on the client's contracts"""
        result = await session.execute(
            select(func.coalesce(func.sum(Job.price), 0))
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .where(Contract.client_id == client_id, Job.unpaid_clause())
        )
        return Decimal(str(result.scalar_one()))

    def max_deposit(self, pending: Decimal) -> Decimal:
        return pending * self._limit_ratio

    async def deposit(self, client_id: int, caller_id: int, amount: str | Decimal) -> Decimal:
        """
        Deposit into a client's own balance.

        Args:
            client_id: Account to credit
            caller_id: Authenticated profile
            amount: Amount to deposit

        Returns:
            The accepted amount

        Raises:
            ForbiddenError: caller_id differs from client_id
            InvalidAmountError: amount is not a positive monetary value
            DepositLimitExceededError: amount above the allowed share of pending work
            TransferFailedError: The store aborted the transaction
        """
        if caller_id != client_id:
            logger.info(f"Profile {caller_id} tried to deposit into profile {client_id}")
            record_deposit("forbidden")
            raise ForbiddenError("Deposits are only allowed into your own balance")

        try:
            value = parse_amount(amount)
            async with self._session_factory() as session:
                async with session.begin():
                    pending = await self.pending_total(session, client_id)
                    limit = self.max_deposit(pending)
                    if value > limit:
                        logger.info(
                            f"Deposit of {value} by profile {client_id} refused: "
                            f"limit {limit} on pending {pending}"
                        )
                        raise DepositLimitExceededError(value, limit.quantize(CENT))

                    result = await session.execute(
                        update(Profile)
                        .where(Profile.id == client_id)
                        .values(balance=Profile.balance + value, updated_at=utcnow())
                        .execution_options(synchronize_session=False)
                    )
                    if result.rowcount != 1:
                        raise NotFoundError("Profile", client_id)
        except InvalidAmountError:
            record_deposit("invalid_amount")
            raise
        except DepositLimitExceededError:
            record_deposit("limit_exceeded")
            raise
        except LedgerError:
            record_deposit("failed")
            raise
        except SQLAlchemyError as e:
            logger.error(f"Deposit into profile {client_id} rolled back: {e}", exc_info=True)
            record_deposit("failed")
            raise TransferFailedError(f"deposit into profile {client_id}") from e

        record_deposit("ok", value)
        logger.info(f"Profile {client_id} deposited {value}")
        return value
