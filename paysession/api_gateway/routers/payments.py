"""Payment session router - refresh credentials, validate, forward to provider."""

import logging

from fastapi import APIRouter, Request

from paysession.api_gateway.models.requests import CreatePaymentSessionRequest
from paysession.api_gateway.models.responses import (
    ErrorResponse,
    PaymentConfigResponse,
    PaymentSessionResponse,
)
from paysession.api_gateway.services.validation import validate_session_request

logger = logging.getLogger("paysession.payments")
router = APIRouter()


@router.post(
    "/create-payment-session",
    response_model=PaymentSessionResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_payment_session(req: CreatePaymentSessionRequest, request: Request):
    # Credentials are refreshed before the body is checked.
    access_token = await request.app.state.token_manager.get_access_token()

    validate_session_request(req)

    session_id = await request.app.state.provider_client.create_payment_session(req, access_token)
    return PaymentSessionResponse(payments_session_id=session_id)


@router.get("/payment-config", response_model=PaymentConfigResponse)
async def payment_config(request: Request):
    settings = request.app.state.settings
    return PaymentConfigResponse(account_id=settings.account_id, api_key=settings.api_key)
