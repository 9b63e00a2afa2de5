import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from milkledger.version import VERSION
from milkledger.api import auth, customers, orders, products, reports
from milkledger.api.deps import get_current_identity
from milkledger.core.config import settings
from milkledger.core.errors import LedgerError

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Create instrumentator first
instrumentator = Instrumentator()

app = FastAPI(title="Milk Ledger", version=VERSION)

# Instrument the app BEFORE adding routes or middleware
instrumentator.instrument(app).expose(
    app,
    include_in_schema=False,
    endpoint="/ledger/metrics",
    should_gzip=True,
)

@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

# Health endpoints
@app.get("/health")
def health():
    return {"status": "ok"}

@app.get("/v1/_info")
def info():
    return {"service": "ledger", "business": settings.BUSINESS_NAME, "version": VERSION}

@app.on_event("startup")
async def startup_event():
    # Print all routes for debugging
    for route in app.routes:
        if hasattr(route, "methods") and hasattr(route, "path"):
            print(f"{route.methods} {route.path}")

# Include routers
protected = [Depends(get_current_identity)]
app.include_router(auth.router, prefix='/auth', tags=['auth'])
app.include_router(products.router, prefix='/v1/products', tags=['products'], dependencies=protected)
app.include_router(customers.router, prefix='/v1/customers', tags=['customers'], dependencies=protected)
app.include_router(orders.router, prefix='/v1/orders', tags=['orders'], dependencies=protected)
app.include_router(reports.router, prefix='/v1', tags=['reports'], dependencies=protected)
