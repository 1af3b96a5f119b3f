"""API request models."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator


class CreatePaymentSessionRequest(BaseModel):
    # Presence checks happen in services.validation so that missing fields
    # produce a single 400 rather than per-field 422s.
    model_config = ConfigDict(extra="ignore")

    amount: Optional[Union[int, float, str]] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    invoice_number: Optional[str] = None
    reference_number: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None

    @field_validator("invoice_number", "reference_number", mode="before")
    @classmethod
    def _stringify_numbers(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
