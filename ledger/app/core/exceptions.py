"""
Ledger exceptions

Every business-rule rejection and store failure raised by the services is a
LedgerError. The API layer renders them as {"status": "Error", "message": ...}
with the status code carried by the exception class.
"""
from decimal import Decimal
from typing import Optional


class LedgerError(Exception):
    """Base ledger exception"""

    status_code: int = 400

    def __init__(self, message: str, error_code: Optional[str] = None):
        """
        Args:
            message: Human readable message (safe to show to the caller)
            error_code: Machine readable code
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class AuthenticationError(LedgerError):
    """Caller identity could not be resolved."""

    status_code = 401

    def __init__(self, reason: str = "Unknown profile"):
        super().__init__(reason, error_code="UNAUTHENTICATED")


class NotFoundError(LedgerError):
    """Entity absent or not visible to the caller."""

    status_code = 404

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} {entity_id} not found", error_code="NOT_FOUND")
        self.entity = entity
        self.entity_id = entity_id


class NotPayableError(LedgerError):
    """Job does not exist, is already paid, or belongs to another client."""

    status_code = 404

    def __init__(self, job_id: int):
        super().__init__(f"Job {job_id} not found or already paid", error_code="NOT_PAYABLE")
        self.job_id = job_id


class ForbiddenError(LedgerError):
    """Caller is acting on an account that is not their own."""

    status_code = 400

    def __init__(self, reason: str = "Operation not allowed for this profile"):
        super().__init__(reason, error_code="FORBIDDEN")


class InvalidAmountError(LedgerError):
    """Amount is malformed or not positive."""

    status_code = 400

    def __init__(self, raw_amount: str):
        super().__init__(f"Invalid amount: {raw_amount}", error_code="INVALID_AMOUNT")
        self.raw_amount = raw_amount


class InsufficientFundsError(LedgerError):
    """Client balance does not cover the job price."""

    status_code = 409

    def __init__(self, required: Decimal, available: Optional[Decimal] = None):
        """
        Args:
            required: Job price
            available: Balance observed under lock (None when the conditional debit lost a race)
        """
        if available is None:
            message = f"Insufficient funds: {required} required"
        else:
            message = f"Insufficient funds: {required} required, {available} available"
        super().__init__(message, error_code="INSUFFICIENT_FUNDS")
        self.required = required
        self.available = available


class DepositLimitExceededError(LedgerError):
    """Deposit is larger than the share of pending work a client may top up."""

    status_code = 400

    def __init__(self, amount: Decimal, max_deposit: Decimal):
        super().__init__(
            f"Deposit of {amount} exceeds the allowed maximum of {max_deposit}",
            error_code="DEPOSIT_LIMIT_EXCEEDED",
        )
        self.amount = amount
        self.max_deposit = max_deposit


class TransferFailedError(LedgerError):
    """The store aborted the transaction; nothing was applied and the call may be retried."""

    status_code = 409

    def __init__(self, operation: str):
        """
        Args:
            operation: What was attempted (e.g. "payment of job 3")
        """
        super().__init__(f"The {operation} could not be completed, retry later",
                         error_code="TRANSFER_FAILED")
        self.operation = operation


class NoDataError(LedgerError):
    """A report window contains nothing to aggregate."""

    status_code = 404

    def __init__(self, reason: str = "No paid jobs in the requested period"):
        super().__init__(reason, error_code="NO_DATA")
