"""Incremental upkeep of the customer aggregate fields.

Order creation and payment recording update ``total_orders``,
``total_amount``, ``paid_amount`` and ``pending_balance`` in place instead of
recomputing them from history. Order edits and deletions do not pass through
here, so they leave the aggregates untouched; ``reconcile_customer`` rebuilds
them from the stored orders and payments when that drift matters.
"""
import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from milkledger.core.errors import ValidationFailure
from milkledger.ledger.filters import to_datetime
from milkledger.schemas import Customer, Payment
from milkledger.store import RecordStore

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def pending_for(total_amount: Decimal, paid_amount: Decimal) -> Decimal:
    return max(ZERO, total_amount - paid_amount)


def validate_amount(amount) -> Decimal:
    if isinstance(amount, bool):
        raise ValidationFailure("Please enter a valid positive amount.")
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise ValidationFailure("Please enter a valid positive amount.")
    if not value.is_finite() or value <= 0:
        raise ValidationFailure("Please enter a valid positive amount.")
    return value


def on_order_created(store: RecordStore, customer_id: str, order_total: Decimal) -> Customer:
    customer = store.get_customer(customer_id)
    total_amount = customer.total_amount + order_total
    updated = store.set_customer_totals(
        customer_id,
        total_orders=customer.total_orders + 1,
        total_amount=total_amount,
        paid_amount=customer.paid_amount,
        pending_balance=pending_for(total_amount, customer.paid_amount),
    )
    logger.debug("Customer %s billed %s, pending %s", customer_id, order_total, updated.pending_balance)
    return updated


def on_payment_recorded(store: RecordStore, customer_id: str, amount: Decimal, payment_date) -> Payment:
    customer = store.get_customer(customer_id)
    paid_amount = customer.paid_amount + amount
    payment = Payment(
        customer_id=customer_id,
        customer_name=customer.name,
        amount=amount,
        payment_date=payment_date,
    )
    store.set_customer_totals(
        customer_id,
        total_orders=customer.total_orders,
        total_amount=customer.total_amount,
        paid_amount=paid_amount,
        pending_balance=pending_for(customer.total_amount, paid_amount),
    )
    return store.insert_payment(payment)


def make_payment(store: RecordStore, customer_id: str, amount, payment_date=None) -> Payment:
    """Record a payment against a customer and update their balance.

    ``amount`` must be a finite positive number and ``payment_date`` a valid
    date (today when omitted). The customer must exist. All checks run before
    anything is written.
    """
    value = validate_amount(amount)
    when = to_datetime(payment_date if payment_date is not None else date.today())
    store.get_customer(customer_id)
    payment = on_payment_recorded(store, customer_id, value, when)
    logger.info("Recorded payment %s of %s from customer %s", payment.id, value, customer_id)
    return payment


def reconcile_customer(store: RecordStore, customer_id: str) -> Customer:
    """Rebuild a customer's aggregates from every stored order and payment."""
    store.get_customer(customer_id)
    orders = [o for o in store.orders if o.customer_id == customer_id]
    payments = [p for p in store.payments if p.customer_id == customer_id]
    total_amount = sum((o.total_amount for o in orders), ZERO)
    paid_amount = sum((p.amount for p in payments), ZERO)
    customer = store.set_customer_totals(
        customer_id,
        total_orders=len(orders),
        total_amount=total_amount,
        paid_amount=paid_amount,
        pending_balance=pending_for(total_amount, paid_amount),
    )
    logger.info("Reconciled customer %s: billed %s, paid %s", customer_id, total_amount, paid_amount)
    return customer
