import logging
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from database import check_connection
from routers import invoices_router, payments_router
from services.errors import (
    AuthorizationError,
    ConflictError,
    InvoiceServiceError,
    NotFoundError,
    OverpaymentError,
    ValidationError,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("invoicing")

# Error kind -> HTTP status
ERROR_STATUS = {
    ValidationError: 400,
    OverpaymentError: 400,
    AuthorizationError: 403,
    NotFoundError: 404,
    ConflictError: 409,
}

# App instance
app = FastAPI(title="Invoicing API", version=config.APP_VERSION)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvoiceServiceError)
async def invoice_service_error_handler(request: Request, exc: InvoiceServiceError):
    status_code = ERROR_STATUS.get(type(exc), 400)
    logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


@app.get("/health")
def health_check():
    database_ok = check_connection()
    return {
        "status": "ok" if database_ok else "degraded",
        "database": "ok" if database_ok else "unreachable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": config.APP_VERSION,
    }


app.include_router(invoices_router)
app.include_router(payments_router)


if __name__ == "__main__":
    from database import init_db

    init_db()
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=False)
