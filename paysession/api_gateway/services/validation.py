"""Inbound payment-session request validation."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from paysession.api_gateway.models.requests import CreatePaymentSessionRequest

CENTS = Decimal("0.01")
MISSING_FIELDS_MESSAGE = "Missing required fields: amount, currency, or description"


class PaymentValidationError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def parse_amount(value) -> Decimal:
    """Parse a number or numeric string into a positive amount rounded to cents.

    Amounts that round to zero, or that need more digits than the decimal
    context holds, are rejected.
    """
    if isinstance(value, bool):
        raise PaymentValidationError("Invalid amount")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise PaymentValidationError("Invalid amount")
    if not amount.is_finite() or amount <= 0:
        raise PaymentValidationError("Invalid amount")
    try:
        amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise PaymentValidationError("Invalid amount")
    if amount <= 0:
        raise PaymentValidationError("Invalid amount")
    return amount


def validate_session_request(req: CreatePaymentSessionRequest) -> None:
    # Falsy values (None, "", 0) count as missing.
    if not req.amount or not req.currency or not req.description:
        raise PaymentValidationError(MISSING_FIELDS_MESSAGE)

    parse_amount(req.amount)

    currency = req.currency.strip()
    if len(currency) != 3 or not (currency.isascii() and currency.isalpha()):
        raise PaymentValidationError("Invalid currency code")
