"""Payment Session Proxy - Main application entry point."""

import logging
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from paysession.api_gateway.routers import health, payments
from paysession.api_gateway.services.provider_client import (
    ProviderClient,
    ProviderError,
    ProviderRejection,
)
from paysession.api_gateway.services.token_manager import AuthRefreshError, TokenManager
from paysession.api_gateway.services.validation import PaymentValidationError
from paysession.shared.config import Settings
from paysession.shared.correlation import configure_logging
from paysession.shared.middleware import (
    ApiKeyMiddleware,
    CorrelationMiddleware,
    TimingMiddleware,
    UnexpectedErrorMiddleware,
)

logger = logging.getLogger("paysession")

AUTH_FAILED_MESSAGE = "Payment authentication failed - check server logs"


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(AuthRefreshError)
    async def auth_refresh_failed(request: Request, exc: AuthRefreshError):
        logger.error(f"Token refresh failed for {request.url.path}")
        return JSONResponse(status_code=401, content={"error": AUTH_FAILED_MESSAGE})

    @app.exception_handler(PaymentValidationError)
    async def validation_failed(request: Request, exc: PaymentValidationError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def malformed_body(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(ProviderRejection)
    async def provider_rejected(request: Request, exc: ProviderRejection):
        return JSONResponse(status_code=400, content={"error": exc.detail, "details": exc.payload})

    @app.exception_handler(ProviderError)
    async def provider_failed(request: Request, exc: ProviderError):
        logger.error(f"Provider error: {exc.detail}")
        return JSONResponse(status_code=500, content={"error": "Internal server error", "details": exc.detail})


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the proxy app. ``transport`` replaces the network for outbound calls."""
    if settings is None:
        settings = Settings()
    configure_logging(settings.log_level)

    missing = settings.missing_credentials()
    if missing:
        logger.warning(f"Provider credentials not configured: {', '.join(missing)}")

    app = FastAPI(
        title="Payment Session Proxy",
        version="1.0.0",
        description="Creates provider payment sessions with server-held credentials",
    )
    app.state.settings = settings
    app.state.token_manager = TokenManager(settings, transport=transport)
    app.state.provider_client = ProviderClient(settings, transport=transport)

    # Last added runs first; CORS is outermost.
    app.add_middleware(UnexpectedErrorMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(ApiKeyMiddleware, api_keys=settings.proxy_api_keys)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-Id"],
    )

    register_exception_handlers(app)

    app.include_router(payments.router, prefix="/api", tags=["Payments"])
    app.include_router(health.router, tags=["Health"])
    return app
