"""HTTP client for creating payment sessions at the provider."""

import json
import logging
from typing import Any, Optional

import httpx

from paysession.api_gateway.models.requests import CreatePaymentSessionRequest
from paysession.api_gateway.services.validation import parse_amount
from paysession.shared.config import Settings

logger = logging.getLogger("paysession.provider_client")

AUTH_SCHEME = "Zoho-oauthtoken"
SESSIONS_PATH = "/api/v1/paymentsessions"


class ProviderError(Exception):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class ProviderRejection(ProviderError):
    """The provider answered with a non-zero business code."""

    def __init__(self, message: str, payload: dict):
        self.payload = payload
        super().__init__(message)


class ProviderResponseError(ProviderError):
    """The provider answered with something we cannot interpret."""


class ProviderTransportError(ProviderError):
    """The provider could not be reached or timed out."""


def format_amount(value) -> str:
    return str(parse_amount(value))


def build_session_payload(req: CreatePaymentSessionRequest) -> dict[str, Any]:
    """Map a validated request onto the provider's session-creation body."""
    payload: dict[str, Any] = {
        "amount": format_amount(req.amount),
        "currency": req.currency.strip().upper(),
        "description": req.description,
    }
    if req.invoice_number is not None:
        payload["invoice_number"] = req.invoice_number

    if req.reference_number:
        meta_data = [{"key": "reference", "value": req.reference_number}]
        if req.customer_name:
            meta_data.append({"key": "customer", "value": req.customer_name})
        payload["meta_data"] = meta_data

    return payload


def extract_session_id(data: Any) -> str:
    if not isinstance(data, dict):
        raise ProviderResponseError("Provider response is not a JSON object")

    if data.get("code") != 0:
        message = data.get("message") or "Payment session creation failed"
        raise ProviderRejection(message, data)

    session = data.get("payments_session")
    session_id = session.get("payments_session_id") if isinstance(session, dict) else None
    if not session_id:
        raise ProviderResponseError("Provider response is missing payments_session.payments_session_id")
    return str(session_id)


class ProviderClient:

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    @property
    def sessions_url(self) -> str:
        return f"{self.settings.payments_url}{SESSIONS_PATH}"

    async def create_payment_session(self, req: CreatePaymentSessionRequest, access_token: str) -> str:
        payload = build_session_payload(req)
        logger.debug(f"Provider request body: {json.dumps(payload)}")

        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=self.settings.provider_timeout_seconds,
            ) as client:
                resp = await client.post(
                    self.sessions_url,
                    params={"account_id": self.settings.account_id},
                    json=payload,
                    headers={"Authorization": f"{AUTH_SCHEME} {access_token}"},
                )
        except httpx.TimeoutException:
            raise ProviderTransportError("Payment provider timed out")
        except httpx.HTTPError as e:
            raise ProviderTransportError(f"Payment provider unreachable: {e}")

        logger.debug(f"Raw provider response (HTTP {resp.status_code}): {resp.text}")
        try:
            data = resp.json()
        except ValueError:
            raise ProviderResponseError(f"Provider returned a non-JSON body (HTTP {resp.status_code})")

        try:
            session_id = extract_session_id(data)
        except ProviderRejection as e:
            logger.warning(f"Provider rejected session creation: code={data.get('code')} message={e.detail}")
            raise

        logger.info(f"Created payment session {session_id}")
        return session_id
