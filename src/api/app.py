"""FastAPI application factory"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.api.error import ClientError, client_error_handler
from src.api.routes import transactions, users, reports
from src.depends import init_models, dispose_engine

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if config.ENABLE_SENTRY and config.DSN_SENTRY:
        import sentry_sdk

        sentry_sdk.init(dsn=config.DSN_SENTRY, environment=config.SENTRY_ENVIRONMENT)
        logger.info("Sentry enabled")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.AUTO_CREATE_TABLES:
            await init_models()
            logger.info("Database tables ensured")
        yield
        await dispose_engine()

    app = FastAPI(
        title="Payment Ledger Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.ENABLE_LOGGING_MIDDLEWARE:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.2f}ms)"
            )
            return response

    app.add_exception_handler(ClientError, client_error_handler)

    app.include_router(transactions.router, prefix=config.API_PREFIX)
    app.include_router(users.router, prefix=config.API_PREFIX)
    app.include_router(reports.router, prefix=config.API_PREFIX)

    @app.get(f"{config.API_PREFIX}/health", tags=["Health"])
    async def health():
        """Health check for load balancers and monitoring."""
        return {"status": "ok"}

    return app
