from fastapi import APIRouter, Depends
from typing import List, Optional

from milkledger.api.deps import get_store, ledger_filter
from milkledger.ledger import (
    build_report,
    get_daily_product_sales,
    get_dashboard_stats,
    get_filtered_payments,
    period_range,
)
from milkledger.schemas import DashboardStats, LedgerFilter, Payment, ProductSale, StatementReport
from milkledger.store import RecordStore

router = APIRouter()

@router.get('/payments', response_model=List[Payment])
def list_payments(flt: LedgerFilter = Depends(ledger_filter), store: RecordStore = Depends(get_store)):
    return get_filtered_payments(store, flt)

@router.get('/dashboard', response_model=DashboardStats)
def dashboard(date: Optional[str] = None, store: RecordStore = Depends(get_store)):
    return get_dashboard_stats(store, date or None)

@router.get('/dashboard/product-sales', response_model=List[ProductSale])
def product_sales(date: Optional[str] = None, store: RecordStore = Depends(get_store)):
    return get_daily_product_sales(store, date or None)

@router.get('/statements', response_model=StatementReport)
def statements(
    period: str = "month",
    flt: LedgerFilter = Depends(ledger_filter),
    store: RecordStore = Depends(get_store),
):
    # A quick period only applies when no explicit range was given; "all" means no bounds
    if period != "all" and flt.date_from is None and flt.date_to is None:
        date_from, date_to = period_range(period)
        flt = flt.model_copy(update={"date_from": date_from, "date_to": date_to})
    # Statements cover orders of every status and product
    flt = flt.model_copy(update={"status": None, "product_id": None})
    return build_report(store, flt)
