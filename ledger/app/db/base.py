"""
SQLAlchemy Base
Declarative base shared by every ledger table.
"""
from datetime import datetime, timezone

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase


# Naming convention for constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=convention)


class Base(DeclarativeBase):
    """Base class for all ORM models"""
    metadata = metadata


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in the DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
