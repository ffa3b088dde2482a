"""
Deposit guard tests
"""
from decimal import Decimal

import pytest

from ledger.app.core.exceptions import (
    ForbiddenError,
    InvalidAmountError,
    DepositLimitExceededError,
)
from ledger.app.models.contract import CONTRACT_TERMINATED
from ledger.app.models.profile import PROFILE_CLIENT
from ledger.app.services.deposit_guard import DepositGuard, parse_amount

from conftest import add_profile, add_contract, add_job, balance_of


@pytest.fixture
def guard(session_factory) -> DepositGuard:
    return DepositGuard(session_factory)


@pytest.fixture
async def pending_600(async_session, ledger):
    """Two more unpaid jobs priced 100 and 300 next to the baseline job, 600 pending in total"""
    contract = await add_contract(async_session, ledger.client_id, ledger.contractor_id)
    await add_job(async_session, contract.id, "100")
    await add_job(async_session, contract.id, "300")
    await async_session.commit()
    return ledger


class TestParseAmount:
    """Monetary amount parsing"""

    @pytest.mark.parametrize("raw, expected", [
        ("100", Decimal("100")),
        ("0.01", Decimal("0.01")),
        (" 12.50 ", Decimal("12.50")),
        (Decimal("7"), Decimal("7")),
    ])
    def test_valid_amounts(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["0", "-5", "abc", "", "NaN", "Infinity", "1.001", "1e40"])
    def test_invalid_amounts(self, raw):
        with pytest.raises(InvalidAmountError):
            parse_amount(raw)


@pytest.mark.asyncio
class TestDeposit:
    """Deposit limit and ownership rules"""

    async def test_deposit_at_limit(self, guard, session_factory, pending_600):
        """
        Given: pending jobs worth 200 (baseline) + 100 + 300 = 600, limit 150
        When: the client deposits exactly 150
        Then: the deposit is accepted and the balance grows by 150
        """
        accepted = await guard.deposit(pending_600.client_id, pending_600.client_id, "150")

        assert accepted == Decimal("150")
        assert await balance_of(session_factory, pending_600.client_id) == Decimal("650")

    async def test_deposit_over_limit(self, guard, session_factory, pending_600):
        with pytest.raises(DepositLimitExceededError) as exc_info:
            await guard.deposit(pending_600.client_id, pending_600.client_id, "150.01")

        assert exc_info.value.max_deposit == Decimal("150.00")
        assert await balance_of(session_factory, pending_600.client_id) == Decimal("500")

    async def test_two_jobs_100_and_300(self, guard, session_factory, async_session):
        """
        Given: a client whose only unpaid jobs are priced 100 and 300
        When: depositing 100, then 101
        Then: 100 is accepted, 101 is refused
        """
        client_profile = await add_profile(async_session, PROFILE_CLIENT, "0")
        contractor = await add_profile(async_session, "contractor", "0", profession="Painter")
        contract = await add_contract(async_session, client_profile.id, contractor.id)
        await add_job(async_session, contract.id, "100")
        await add_job(async_session, contract.id, "300")
        await async_session.commit()

        await guard.deposit(client_profile.id, client_profile.id, "100")
        with pytest.raises(DepositLimitExceededError):
            await guard.deposit(client_profile.id, client_profile.id, "101")

        assert await balance_of(session_factory, client_profile.id) == Decimal("100")

    async def test_no_pending_jobs_rejects_every_deposit(self, guard, async_session):
        client_profile = await add_profile(async_session, PROFILE_CLIENT, "10")
        await async_session.commit()

        with pytest.raises(DepositLimitExceededError):
            await guard.deposit(client_profile.id, client_profile.id, "0.01")

    async def test_paid_jobs_do_not_count(self, guard, async_session, ledger):
        contract = await add_contract(async_session, ledger.client_id, ledger.contractor_id)
        await add_job(async_session, contract.id, "4000", paid=True)
        await async_session.commit()

        # only the baseline unpaid job (200) counts: limit 50
        with pytest.raises(DepositLimitExceededError):
            await guard.deposit(ledger.client_id, ledger.client_id, "51")

    async def test_terminated_contracts_still_count(self, guard, session_factory, async_session, ledger):
        contract = await add_contract(async_session, ledger.client_id, ledger.contractor_id,
                                      status=CONTRACT_TERMINATED)
        await add_job(async_session, contract.id, "200")
        await async_session.commit()

        await guard.deposit(ledger.client_id, ledger.client_id, "100")

        assert await balance_of(session_factory, ledger.client_id) == Decimal("600")

    @pytest.mark.parametrize("amount", ["1", "0", "-1", "abc"])
    async def test_other_profile_is_forbidden(self, guard, session_factory, ledger, amount):
        """
        Given: a caller depositing into another profile
        When: any amount is requested
        Then: Forbidden, before the amount is even looked at
        """
        with pytest.raises(ForbiddenError):
            await guard.deposit(ledger.client_id, ledger.contractor_id, amount)

        assert await balance_of(session_factory, ledger.client_id) == Decimal("500")

    async def test_invalid_amount(self, guard, ledger):
        with pytest.raises(InvalidAmountError):
            await guard.deposit(ledger.client_id, ledger.client_id, "-10")

    async def test_custom_limit_ratio(self, session_factory, ledger):
        guard = DepositGuard(session_factory, limit_ratio=Decimal("0.5"))

        await guard.deposit(ledger.client_id, ledger.client_id, "100")

        assert await balance_of(session_factory, ledger.client_id) == Decimal("600")
