"""
Contract model
Agreement binding one client and one contractor.
"""
from datetime import datetime
from sqlalchemy import String, Text, DateTime, ForeignKey, Index, or_
from sqlalchemy.ext.hybrid import hybrid_method
from sqlalchemy.orm import Mapped, mapped_column

from ledger.app.db.base import Base, utcnow


CONTRACT_NEW = "new"
CONTRACT_IN_PROGRESS = "in_progress"
CONTRACT_TERMINATED = "terminated"


class Contract(Base):
    """Contracts table"""
    __tablename__ = "contracts"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    terms: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CONTRACT_NEW, index=True,
        comment="new, in_progress, terminated"
    )
    client_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id"), nullable=False, index=True
    )
    contractor_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        Index('ix_contracts_client_id_status', 'client_id', 'status'),
    )

    @hybrid_method
    def is_party(self, profile_id: int) -> bool:
        """Profile is the client or the contractor of this contract"""
        return profile_id in (self.client_id, self.contractor_id)

    @is_party.expression
    def is_party(cls, profile_id: int):
        return or_(cls.client_id == profile_id, cls.contractor_id == profile_id)

    def __repr__(self) -> str:
        return f"<Contract {self.id} {self.status} client={self.client_id} contractor={self.contractor_id}>"
