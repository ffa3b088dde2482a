"""
Profile model
Account record of a paying client or an earning contractor.
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import String, Numeric, DateTime, CheckConstraint
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column

from ledger.app.db.base import Base, utcnow


PROFILE_CLIENT = "client"
PROFILE_CONTRACTOR = "contractor"


class Profile(Base):
    """Profiles table"""
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    profession: Mapped[str] = mapped_column(
        String(100), nullable=False, default="",
        comment="Trade of a contractor; informational for clients"
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0"),
        comment="Available funds, never negative"
    )
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True,
        comment="client or contractor"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        CheckConstraint("balance >= 0", name="balance_non_negative"),
        CheckConstraint("type IN ('client', 'contractor')", name="type_valid"),
    )

    @hybrid_property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @full_name.expression
    def full_name(cls):
        return cls.first_name + " " + cls.last_name

    def __repr__(self) -> str:
        return f"<Profile {self.id} {self.type} balance={self.balance}>"
