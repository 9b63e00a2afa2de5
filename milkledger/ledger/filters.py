from datetime import datetime, time
from typing import List, Optional, Tuple

from milkledger.core.errors import ValidationFailure
from milkledger.schemas import LedgerFilter, Order, Payment, parse_datetime
from milkledger.store import RecordStore


def to_datetime(value) -> datetime:
    try:
        result = parse_datetime(value)
    except (TypeError, ValueError) as e:
        raise ValidationFailure(f"Invalid date: {value!r}") from e
    if not isinstance(result, datetime):
        raise ValidationFailure(f"Invalid date: {value!r}")
    return result

def start_of_day(value) -> datetime:
    return datetime.combine(to_datetime(value).date(), time.min)

def end_of_day(value) -> datetime:
    return datetime.combine(to_datetime(value).date(), time.max)

def day_window(value=None) -> Tuple[datetime, datetime]:
    """Inclusive ``[00:00:00, 23:59:59.999999]`` window of a calendar day (today by default)."""
    value = datetime.now() if value is None else value
    return start_of_day(value), end_of_day(value)


def _in_range(when: datetime, flt: LedgerFilter) -> bool:
    if flt.date_from is not None and when < flt.date_from:
        return False
    if flt.date_to is not None and when > flt.date_to:
        return False
    return True

def order_matches(order: Order, flt: LedgerFilter) -> bool:
    if not _in_range(order.order_date, flt):
        return False
    if flt.customer_id and order.customer_id != flt.customer_id:
        return False
    if flt.status is not None and order.status != flt.status:
        return False
    if flt.product_id and not any(it.product_id == flt.product_id for it in order.items):
        return False
    return True

def payment_matches(payment: Payment, flt: LedgerFilter) -> bool:
    # status and product_id only constrain orders
    if not _in_range(payment.payment_date, flt):
        return False
    if flt.customer_id and payment.customer_id != flt.customer_id:
        return False
    return True


def get_filtered_orders(store: RecordStore, flt: Optional[LedgerFilter] = None) -> List[Order]:
    """Matching orders, most recent first."""
    flt = flt or LedgerFilter()
    matched = [o for o in store.orders if order_matches(o, flt)]
    return sorted(matched, key=lambda o: o.order_date, reverse=True)

def get_filtered_payments(store: RecordStore, flt: Optional[LedgerFilter] = None) -> List[Payment]:
    """Matching payments, most recent first."""
    flt = flt or LedgerFilter()
    matched = [p for p in store.payments if payment_matches(p, flt)]
    return sorted(matched, key=lambda p: p.payment_date, reverse=True)


def day_filter(value=None) -> LedgerFilter:
    start, end = day_window(value)
    return LedgerFilter(date_from=start, date_to=end)