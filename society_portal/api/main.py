"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response

from society_portal.api.middleware import RequestIDMiddleware, MetricsMiddleware
from society_portal.api.v1 import bills, expenses, members, notices, reports
from society_portal.config import settings
from society_portal.infrastructure.database.seed import init_demo_store
from society_portal.infrastructure.database.session import engine
from society_portal.infrastructure.observability.logging import setup_logging
from society_portal.infrastructure.observability.metrics import data_service_failures_counter

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.data_mode == "demo":
        init_demo_store(engine)
        logging.info("Running in demo mode with seeded in-memory store")
    yield


async def data_service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Store failures surface as 503, never as stale or demo data"""
    data_service_failures_counter.inc()
    logging.error(
        f"Data service error: {exc}",
        extra={"request_id": getattr(request.state, "request_id", "unknown")},
    )
    return JSONResponse(status_code=503, content={"detail": "Data service unavailable"})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Society Portal",
        description="Member directory, maintenance billing, expenses, notices and reports",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(SQLAlchemyError, data_service_error_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "data_mode": settings.data_mode}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(members.router, prefix="/v1", tags=["members"])
    app.include_router(bills.router, prefix="/v1", tags=["bills"])
    app.include_router(expenses.router, prefix="/v1", tags=["expenses"])
    app.include_router(notices.router, prefix="/v1", tags=["notices"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
