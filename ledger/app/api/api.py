"""
API router
Registers every endpoint group.
"""
from fastapi import APIRouter

from ledger.app.api.endpoints import contracts, jobs, balances, admin, profiles

api_router = APIRouter()

api_router.include_router(
    contracts.router,
    prefix="/contracts",
    tags=["contracts"]
)

api_router.include_router(
    jobs.router,
    prefix="/jobs",
    tags=["jobs"]
)

api_router.include_router(
    balances.router,
    prefix="/balances",
    tags=["balances"]
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["admin"]
)

api_router.include_router(
    profiles.router,
    prefix="/profiles",
    tags=["profiles"]
)
