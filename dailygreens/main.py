import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from dailygreens.version import VERSION
from dailygreens.api import carts, fees, histories, transactions
from dailygreens.core.config import settings
from dailygreens.core.errors import CheckoutError
from dailygreens.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
log = logging.getLogger(__name__)

# Create instrumentator first
instrumentator = Instrumentator()

app = FastAPI(title='Daily Greens Backend', version=VERSION)

# Instrument the app BEFORE adding routes or middleware
instrumentator.instrument(app).expose(
    app,
    include_in_schema=False,
    endpoint="/metrics",
    should_gzip=True,
)

@app.exception_handler(CheckoutError)
async def checkout_error_handler(request: Request, exc: CheckoutError):
    body = {"success": False, "message": exc.message}
    if exc.error:
        body["error"] = exc.error
    return JSONResponse(status_code=exc.status_code, content=body)

@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.detail},
                        headers=getattr(exc, "headers", None))

@app.get('/health')
def health(): return {'status':'ok'}

@app.get('/v1/_info')
def info(): return {'service':'daily-greens','version':VERSION}

@app.on_event("startup")
async def startup_event():
    for route in app.routes:
        if hasattr(route, "methods") and hasattr(route, "path"):
            log.debug("%s %s", sorted(route.methods), route.path)

app.include_router(fees.router, tags=['fees'])
app.include_router(carts.router, prefix='/carts', tags=['carts'])
app.include_router(transactions.router, prefix='/transactions', tags=['transactions'])
app.include_router(histories.router, prefix='/histories', tags=['histories'])
app.include_router(transactions.admin_router, prefix='/admin/transactions', tags=['admin/transactions'])
