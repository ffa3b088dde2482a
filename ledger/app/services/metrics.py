"""
Prometheus metrics
Ledger business metrics and the ASGI exposition app.
"""
import logging
from decimal import Decimal
from prometheus_client import Counter, Histogram, Info
from prometheus_client import make_asgi_app

logger = logging.getLogger(__name__)

app_info = Info('ledger_info', 'Marketplace Ledger Information')
app_info.info({
    'version': '1.0.0',
    'name': 'Marketplace Ledger'
})

# Payments
payments_total = Counter(
    'ledger_payments_total',
    'Job payment attempts by outcome',
    ['outcome']
)

transferred_amount = Counter(
    'ledger_transferred_amount_total',
    'Total amount moved from clients to contractors'
)

# Deposits
deposits_total = Counter(
    'ledger_deposits_total',
    'Deposit attempts by outcome',
    ['outcome']
)

deposited_amount = Counter(
    'ledger_deposited_amount_total',
    'Total amount deposited by clients'
)

# Reports
report_duration_seconds = Histogram(
    'ledger_report_duration_seconds',
    'Earnings report query duration in seconds',
    ['report']
)


def record_payment(outcome: str, amount: Decimal | None = None) -> None:
    """
    Record a payment attempt

    Args:
        outcome: ok, not_payable, insufficient_funds, transfer_failed
        amount: Transferred amount (successful payments only)
    """
    payments_total.labels(outcome=outcome).inc()
    if amount is not None:
        transferred_amount.inc(float(amount))


def record_deposit(outcome: str, amount: Decimal | None = None) -> None:
    """Record a deposit attempt"""
    deposits_total.labels(outcome=outcome).inc()
    if amount is not None:
        deposited_amount.inc(float(amount))


metrics_app = make_asgi_app()
