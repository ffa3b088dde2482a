"""
FastAPI application
REST API of the marketplace ledger.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ledger.app.core.config import settings
from ledger.app.core.exceptions import LedgerError
from ledger.app.api.api import api_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

if settings.SENTRY_ENABLED and settings.SENTRY_DSN:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration

    def before_send_filter(event, hint):
        """Mask caller identity headers"""
        if 'request' in event:
            headers = event['request'].get('headers', {})
            for key in ['Authorization', 'profile_id']:
                if key in headers:
                    headers[key] = '***MASKED***'
        return event

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        traces_sample_rate=0.1,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR
            ),
        ],
        before_send=before_send_filter,
        send_default_pii=False,
        attach_stacktrace=True,
    )
    logger.info(f"✅ Sentry initialized (environment: {settings.SENTRY_ENVIRONMENT})")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifecycle

    Startup: create tables.
    Shutdown: dispose of the store handle.
    """
    logger.info("🚀 Starting ledger API...")

    from ledger.app.db.init_db import init_db
    await init_db()

    logger.info("✅ Ledger API started")

    yield

    logger.info("🛑 Stopping ledger API...")

    from ledger.app.db.session import engine
    await engine.dispose()

    logger.info("✅ Ledger API stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(api_router)

if settings.PROMETHEUS_ENABLED:
    from ledger.app.services.metrics import metrics_app
    app.mount("/metrics", metrics_app)
    logger.info("✅ Prometheus metrics endpoint enabled: /metrics")


@app.get("/")
async def root() -> dict:
    return {
        "message": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/docs",
    }


@app.get("/health")
async def health_check() -> dict:
    return {
        "status": "healthy",
        "version": settings.VERSION,
    }


@app.exception_handler(LedgerError)
async def ledger_exception_handler(request: Request, exc: LedgerError):
    """Business-rule rejections and store failures"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "Error", "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed path, query or header values"""
    return JSONResponse(
        status_code=422,
        content={"status": "Error", "message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Unhandled errors"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    if settings.SENTRY_ENABLED:
        import sentry_sdk
        sentry_sdk.capture_exception(exc)

    return JSONResponse(
        status_code=500,
        content={"status": "Error", "message": "Internal server error"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ledger.app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.LOG_LEVEL.lower(),
    )
