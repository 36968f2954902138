"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from ride_ledger.api.dependencies import error_detail, get_request_id
from ride_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from ride_ledger.api.v1 import auth, earnings, services, trips
from ride_ledger.infrastructure.observability.logging import setup_logging
from ride_ledger.config import settings

setup_logging(settings.log_level)


def invalid_fields(exc: RequestValidationError) -> list:
    """Names of the rejected fields, in the order pydantic reports them"""
    fields = []
    for error in exc.errors():
        loc = [part for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        if loc and str(loc[0]) not in fields:
            fields.append(str(loc[0]))
    return fields


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Ride Ledger",
        description="Earnings, maintenance and trip profitability for independent drivers",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added runs first
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = invalid_fields(exc)
        logging.warning(
            f"Rejected request body: {fields}",
            extra={"request_id": get_request_id(request), "path": request.url.path},
        )
        return JSONResponse(
            status_code=422,
            content={"detail": error_detail("Please check the highlighted fields", fields)},
        )

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(auth.router, prefix="/v1", tags=["auth"])
    app.include_router(earnings.router, prefix="/v1", tags=["earnings"])
    app.include_router(services.router, prefix="/v1", tags=["services"])
    app.include_router(trips.router, prefix="/v1", tags=["trips"])

    return app


app = create_app()
