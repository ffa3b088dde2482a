"""
BalanceTransferEngine - atomic job payments.

A payment debits the client, credits the contractor and marks the job paid
in one transaction. The client row is locked for the duration, the debit is
conditional on the balance still covering the price, and the job update is
conditional on the job still being unpaid, so concurrent payments can neither
overdraw a client nor pay a job twice.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Awaitable, Callable, Optional

from sqlalchemy import select, update, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ledger.app.core.config import settings
from ledger.app.core.exceptions import (
    LedgerError,
    NotPayableError,
    InsufficientFundsError,
    TransferFailedError,
)
from ledger.app.db.base import utcnow
from ledger.app.models.contract import Contract, CONTRACT_TERMINATED
from ledger.app.models.job import Job
from ledger.app.models.profile import Profile
from ledger.app.services.metrics import record_payment

logger = logging.getLogger(__name__)

SideEffect = Callable[[AsyncSession], Awaitable[None]]


@dataclass(frozen=True)
class PaymentReceipt:
    """Committed job payment"""
    job_id: int
    client_id: int
    contractor_id: int
    amount: Decimal
    payment_date: datetime


class BalanceTransferEngine:
    """
    Executes job payments against the ledger store.

    Each call opens its own session from the injected factory, so the whole
    payment is exactly one transaction regardless of what the caller's
    request session has already read.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        lock_timeout_ms: int = settings.LOCK_TIMEOUT_MS,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Args:
            session_factory: Async session factory (e.g., async_sessionmaker)
            lock_timeout_ms: Maximum wait for the client row lock (PostgreSQL)
            clock: Source of payment timestamps
        """
        self._session_factory = session_factory
        self._lock_timeout_ms = lock_timeout_ms
        self._clock = clock

    async def pay_job(self, job_id: int, caller_id: int) -> PaymentReceipt:
        """
        Pay a job on behalf of the client that owns its contract.

        Args:
            job_id: Job to pay
            caller_id: Profile id of the paying client

        Returns:
            PaymentReceipt, only once the transaction has committed

        Raises:
            NotPayableError: Job missing, already paid, terminated or owned by someone else
            InsufficientFundsError: Client balance below the job price
            TransferFailedError: The store aborted the transaction (safe to retry)
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    receipt = await self._pay_job(session, job_id, caller_id)
        except NotPayableError:
            record_payment("not_payable")
            raise
        except InsufficientFundsError:
            record_payment("insufficient_funds")
            raise
        except LedgerError:
            record_payment("transfer_failed")
            raise
        except SQLAlchemyError as e:
            logger.error(f"Payment of job {job_id} by profile {caller_id} rolled back: {e}", exc_info=True)
            record_payment("transfer_failed")
            raise TransferFailedError(f"payment of job {job_id}") from e

        record_payment("ok", receipt.amount)
        logger.info(
            f"Job {job_id} paid: {receipt.amount} from profile {receipt.client_id} "
            f"to profile {receipt.contractor_id}"
        )
        return receipt

    async def _pay_job(self, session: AsyncSession, job_id: int, caller_id: int) -> PaymentReceipt:
        await self._apply_lock_timeout(session)

        row = (await session.execute(
            select(Job, Contract)
            .join(Contract, Job.contract_id == Contract.id)
            .where(Job.id == job_id)
        )).one_or_none()

        if row is None:
            logger.info(f"Job {job_id} not payable by profile {caller_id}: no such job")
            raise NotPayableError(job_id)
        job, contract = row
        if contract.client_id != caller_id:
            logger.info(f"Job {job_id} not payable by profile {caller_id}: contract {contract.id} belongs to another client")
            raise NotPayableError(job_id)
        if job.is_paid:
            logger.info(f"Job {job_id} not payable by profile {caller_id}: already paid on {job.payment_date}")
            raise NotPayableError(job_id)
        if contract.status == CONTRACT_TERMINATED:
            logger.info(f"Job {job_id} not payable by profile {caller_id}: contract {contract.id} is terminated")
            raise NotPayableError(job_id)

        paid_at = self._clock()

        async def mark_paid(tx: AsyncSession) -> None:
            result = await tx.execute(
                update(Job)
                .where(Job.id == job_id, Job.unpaid_clause())
                .values(paid=True, payment_date=paid_at, updated_at=paid_at)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                logger.info(f"Job {job_id} was paid by a concurrent transaction")
                raise NotPayableError(job_id)

        await self.atomic_transfer(
            session,
            debit_id=caller_id,
            credit_id=contract.contractor_id,
            amount=job.price,
            side_effect=mark_paid,
        )

        return PaymentReceipt(
            job_id=job_id,
            client_id=caller_id,
            contractor_id=contract.contractor_id,
            amount=job.price,
            payment_date=paid_at,
        )

    async def atomic_transfer(
        self,
        session: AsyncSession,
        debit_id: int,
        credit_id: int,
        amount: Decimal,
        side_effect: Optional[SideEffect] = None,
    ) -> None:
        """
        Move `amount` from one profile to another inside the caller's transaction.

        The debited row is locked, the debit only applies while the balance
        covers the amount, and the credit is a plain increment. Any exception
        raised here, including from `side_effect`, must abort the enclosing
        transaction.

        Args:
            session: Session with an open transaction
            debit_id: Profile losing funds
            credit_id: Profile receiving funds
            amount: Positive amount to move
            side_effect: Extra mutation applied in the same transaction

        Raises:
            InsufficientFundsError: Debited balance below amount
            TransferFailedError: Either profile disappeared
        """
        locked = (await session.execute(
            select(Profile).where(Profile.id == debit_id).with_for_update()
        )).scalar_one_or_none()
        if locked is None:
            raise TransferFailedError(f"debit of profile {debit_id}")
        if locked.balance < amount:
            logger.info(f"Profile {debit_id} cannot cover {amount}: balance {locked.balance}")
            raise InsufficientFundsError(amount, locked.balance)

        now = self._clock()
        debit = await session.execute(
            update(Profile)
            .where(Profile.id == debit_id, Profile.balance >= amount)
            .values(balance=Profile.balance - amount, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if debit.rowcount != 1:
            logger.warning(f"Conditional debit of {amount} from profile {debit_id} matched no row")
            raise InsufficientFundsError(amount)

        credit = await session.execute(
            update(Profile)
            .where(Profile.id == credit_id)
            .values(balance=Profile.balance + amount, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if credit.rowcount != 1:
            logger.error(f"Credit of {amount} to profile {credit_id} matched no row")
            raise TransferFailedError(f"credit of profile {credit_id}")

        if side_effect is not None:
            await side_effect(session)

    async def _apply_lock_timeout(self, session: AsyncSession) -> None:
        """Bound the row lock wait so a blocked payment fails instead of hanging."""
        if session.get_bind().dialect.name == "postgresql":
            await session.execute(text(f"SET LOCAL lock_timeout = {int(self._lock_timeout_ms)}"))
