from fastapi import Depends, HTTPException
from typing import Optional
from pydantic import ValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from milkledger.core.errors import ValidationFailure
from milkledger.schemas import LedgerFilter
from milkledger.security.utils import decode_token
from milkledger.store import RecordStore, backend_from_settings

security = HTTPBearer(auto_error=False)

_store = None

def get_store() -> RecordStore:
    global _store
    if _store is None:
        _store = RecordStore(backend_from_settings())
    return _store

def get_current_identity(creds: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    if not creds:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = decode_token(creds.credentials)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid token")
    if payload.get("type") != "access":
        raise HTTPException(status_code=401, detail="Invalid access token")
    return payload  # contains sub (email), name

def ledger_filter(
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    customer_id: Optional[str] = None,
    product_id: Optional[str] = None,
    status: Optional[str] = None,
) -> LedgerFilter:
    try:
        return LedgerFilter(date_from=date_from or None, date_to=date_to or None, customer_id=customer_id or None,
                            product_id=product_id or None, status=status or None)
    except ValidationError as e:
        raise ValidationFailure(f"Invalid filter: {e.errors()[0]['msg']}") from e
