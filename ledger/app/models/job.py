"""
Job model
Billable unit of work under a contract. `paid` only ever moves from
unpaid (NULL or false) to true, and `payment_date` is written once with it.
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Boolean, Text, Numeric, DateTime, ForeignKey, CheckConstraint, Index, or_
from sqlalchemy.orm import Mapped, mapped_column

from ledger.app.db.base import Base, utcnow


class Job(Base):
    """Jobs table"""
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    paid: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=None)
    payment_date: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True,
        comment="Set together with paid, never changed afterwards"
    )
    contract_id: Mapped[int] = mapped_column(
        ForeignKey("contracts.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        CheckConstraint("price > 0", name="price_positive"),
        Index('ix_jobs_paid_payment_date', 'paid', 'payment_date'),
    )

    @classmethod
    def unpaid_clause(cls):
        """SQL predicate matching jobs that have not been paid yet"""
        return or_(cls.paid.is_(None), cls.paid.is_(False))

    @classmethod
    def paid_clause(cls):
        return cls.paid.is_(True)

    @property
    def is_paid(self) -> bool:
        return bool(self.paid)

    def __repr__(self) -> str:
        return f"<Job {self.id} price={self.price} paid={self.is_paid}>"
