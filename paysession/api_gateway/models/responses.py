"""API response models."""

from typing import Any, Optional

from pydantic import BaseModel


class PaymentSessionResponse(BaseModel):
    payments_session_id: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None


class PaymentConfigResponse(BaseModel):
    account_id: str
    api_key: Optional[str] = None


class TokenStatus(BaseModel):
    policy: str
    cached: bool
    expires_in_seconds: Optional[int] = None


class HealthResponse(BaseModel):
    status: str
    service: str
    token: TokenStatus
