"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from ledger_balance.api.middleware import RequestIDMiddleware, MetricsMiddleware
from ledger_balance.api.v1 import balance, rule_sets
from ledger_balance.infrastructure.observability.logging import setup_logging
from ledger_balance.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Ledger Balance Service",
        description="Account balance, overdue fee, and collection escalation service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(balance.router, prefix="/v1", tags=["balances"])
    app.include_router(rule_sets.router, prefix="/v1", tags=["rule-sets"])

    return app


app = create_app()
