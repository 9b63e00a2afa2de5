"""Account statements and the lifetime customer ledger.

Two different questions are answered here:

* ``build_statements`` / ``build_report``: what was billed and paid within a
  filtered period, per customer. The pending figure is ``billed - paid`` for
  that window only and can be negative.
* ``running_balance``: the full history of one customer folded into a
  running balance, with no date filter.
"""
import calendar
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from milkledger.core.config import settings
from milkledger.core.errors import ValidationFailure
from milkledger.ledger.balance import ZERO
from milkledger.ledger.filters import end_of_day, get_filtered_orders, get_filtered_payments, start_of_day
from milkledger.schemas import (
    CustomerStatement,
    LedgerEntry,
    LedgerFilter,
    Order,
    StatementReport,
    Transaction,
)
from milkledger.store import RecordStore

PAYMENT_LABEL = "Payment received"
LEDGER_PAYMENT_LABEL = "Payment Received"
PERIODS = ("today", "week", "month")


def describe_order(order: Order) -> str:
    return "Order: " + ", ".join(f"{it.quantity}x {it.product_name}" for it in order.items)


def period_range(period: str, today: Optional[date] = None) -> Tuple[datetime, datetime]:
    """Inclusive bounds of a quick period: ``today``, ``week`` (Sunday to Saturday) or ``month``."""
    today = today or date.today()
    if period == "today":
        first = last = today
    elif period == "week":
        # weekday(): Monday == 0, weeks start on Sunday
        first = today - timedelta(days=(today.weekday() + 1) % 7)
        last = first + timedelta(days=6)
    elif period == "month":
        first = today.replace(day=1)
        last = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    else:
        raise ValidationFailure(f"Unknown period {period!r}; expected one of {', '.join(PERIODS)}")
    return start_of_day(first), end_of_day(last)


def build_statements(store: RecordStore, flt: Optional[LedgerFilter] = None) -> List[CustomerStatement]:
    flt = flt or LedgerFilter()
    buckets: Dict[str, CustomerStatement] = {}

    def bucket(customer_id: str, customer_name: str) -> CustomerStatement:
        if customer_id not in buckets:
            buckets[customer_id] = CustomerStatement(customer_id=customer_id, customer_name=customer_name)
        return buckets[customer_id]

    for order in get_filtered_orders(store, flt):
        st = bucket(order.customer_id, order.customer_name)
        st.transactions.append(Transaction(
            date=order.order_date,
            kind="order",
            description=describe_order(order),
            billed=order.total_amount,
            paid=ZERO,
            customer_name=order.customer_name,
        ))
        st.total_billed += order.total_amount

    for payment in get_filtered_payments(store, flt):
        st = bucket(payment.customer_id, payment.customer_name)
        st.transactions.append(Transaction(
            date=payment.payment_date,
            kind="payment",
            description=PAYMENT_LABEL,
            billed=ZERO,
            paid=payment.amount,
            customer_name=payment.customer_name,
        ))
        st.total_paid += payment.amount

    for st in buckets.values():
        # sort() is stable: same-date entries keep their insertion order
        st.transactions.sort(key=lambda tx: tx.date)

    # Ordinal (case-sensitive) name order, id breaks ties between namesakes
    return sorted(buckets.values(), key=lambda st: (st.customer_name, st.customer_id))


def build_report(store: RecordStore, flt: Optional[LedgerFilter] = None) -> StatementReport:
    flt = flt or LedgerFilter()
    statements = build_statements(store, flt)
    return StatementReport(
        business_name=settings.BUSINESS_NAME,
        date_from=flt.date_from,
        date_to=flt.date_to,
        statements=statements,
        total_billed=sum((st.total_billed for st in statements), ZERO),
        total_paid=sum((st.total_paid for st in statements), ZERO),
    )


def running_balance(store: RecordStore, customer_id: str) -> List[LedgerEntry]:
    """Every order and payment of a customer, oldest first, with the balance after each."""
    store.get_customer(customer_id)
    combined = [
        (o.order_date, o.id, "order", f"Order on {o.order_date:%b %d, %Y}", o.items, o.total_amount)
        for o in store.orders if o.customer_id == customer_id
    ] + [
        (p.payment_date, p.id, "payment", LEDGER_PAYMENT_LABEL, None, -p.amount)
        for p in store.payments if p.customer_id == customer_id
    ]
    combined.sort(key=lambda row: row[0])

    balance = ZERO
    entries = []
    for when, record_id, kind, description, items, change in combined:
        balance += change
        entries.append(LedgerEntry(
            id=record_id, date=when, kind=kind, description=description,
            items=items, change=change, balance=balance,
        ))
    return entries
