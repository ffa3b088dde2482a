"""
Database models package
Imports every SQLAlchemy model so the metadata is complete.
"""
from ledger.app.models.profile import Profile
from ledger.app.models.contract import Contract
from ledger.app.models.job import Job

__all__ = [
    "Profile",
    "Contract",
    "Job",
]
