"""
Pytest configuration and shared fixtures
Every test gets its own file-backed SQLite database so that the services,
which open their own sessions, see the same data as the test.
"""
import os

os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")

from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from ledger.app.main import app
from ledger.app.db.init_db import create_tables
from ledger.app.db.session import get_db, get_session_factory
from ledger.app.models.contract import Contract, CONTRACT_IN_PROGRESS
from ledger.app.models.job import Job
from ledger.app.models.profile import Profile, PROFILE_CLIENT, PROFILE_CONTRACTOR


@pytest.fixture
async def async_engine(tmp_path):
    """Test engine backed by a temporary SQLite file"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
        echo=False,
        poolclass=NullPool,
    )
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and inspecting results"""
    async with session_factory() as session:
        yield session


@asynccontextmanager
async def serve(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the given store injected"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async with serve(session_factory) as ac:
        yield ac


@dataclass
class Ledger:
    """Ids of the baseline fixture rows"""
    client_id: int
    contractor_id: int
    contract_id: int
    job_id: int


async def add_profile(
    session: AsyncSession,
    type: str,
    balance: str,
    profession: str = "",
    first_name: str = "Test",
    last_name: str = "User",
) -> Profile:
    profile = Profile(
        first_name=first_name,
        last_name=last_name,
        profession=profession,
        balance=Decimal(balance),
        type=type,
    )
    session.add(profile)
    await session.flush()
    return profile


async def add_contract(
    session: AsyncSession,
    client_id: int,
    contractor_id: int,
    status: str = CONTRACT_IN_PROGRESS,
) -> Contract:
    contract = Contract(
        terms="bla bla bla",
        status=status,
        client_id=client_id,
        contractor_id=contractor_id,
    )
    session.add(contract)
    await session.flush()
    return contract


async def add_job(
    session: AsyncSession,
    contract_id: int,
    price: str,
    paid: bool | None = None,
    payment_date: datetime | None = None,
) -> Job:
    job = Job(
        description="work",
        price=Decimal(price),
        paid=paid,
        payment_date=payment_date,
        contract_id=contract_id,
    )
    session.add(job)
    await session.flush()
    return job


async def balance_of(session_factory, profile_id: int) -> Decimal:
    """Committed balance, read through a fresh session"""
    async with session_factory() as session:
        profile = await session.get(Profile, profile_id)
        return Decimal(profile.balance)


@pytest.fixture
async def ledger(async_session: AsyncSession) -> Ledger:
    """
    Client (balance 500) with an in-progress contract with a contractor
    (balance 100) and one unpaid job priced 200
    """
    client_profile = await add_profile(async_session, PROFILE_CLIENT, "500", first_name="Harry", last_name="Potter")
    contractor = await add_profile(async_session, PROFILE_CONTRACTOR, "100", profession="Wizard",
                                   first_name="John", last_name="Lenon")
    contract = await add_contract(async_session, client_profile.id, contractor.id)
    job = await add_job(async_session, contract.id, "200")
    await async_session.commit()

    return Ledger(
        client_id=client_profile.id,
        contractor_id=contractor.id,
        contract_id=contract.id,
        job_id=job.id,
    )


def as_profile(profile_id: int) -> dict:
    """Headers identifying the caller"""
    return {"profile_id": str(profile_id)}
