"""Shared middleware for correlation IDs, client API keys, and request timing."""

import hmac
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from paysession.shared.correlation import (
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger("paysession.http")


class CorrelationMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        cid = request.headers.get("X-Correlation-Id") or generate_correlation_id()
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)
        response.headers["X-Correlation-Id"] = cid
        return response


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Require X-API-Key on state-changing requests when keys are configured."""

    EXEMPT_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, api_keys: list[str]):
        super().__init__(app)
        self.api_keys = list(api_keys)

    async def dispatch(self, request: Request, call_next):
        if not self.api_keys or request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)
        if request.method not in ("POST", "PUT", "PATCH", "DELETE"):
            return await call_next(request)

        candidate = (request.headers.get("X-API-Key") or "").strip()
        if candidate and any(hmac.compare_digest(candidate, k) for k in self.api_keys):
            return await call_next(request)

        logger.warning(f"Rejected {request.method} {request.url.path}: bad or missing API key")
        return JSONResponse(status_code=401, content={"error": "Invalid or missing API key"})


class TimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {duration_ms}ms")
        return response


class UnexpectedErrorMiddleware(BaseHTTPMiddleware):
    """Turn exceptions no handler claimed into a 500 JSON body.

    Runs inside the correlation and CORS layers so the response still carries
    their headers.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "details": str(exc)},
            )
