"""Environment-driven settings for the payment session proxy.

Values come from environment variables or a `.env` file (see `.env.example`).
Empty variables fall back to the defaults below.
"""

from typing import Annotated, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

REFRESH_POLICIES = ("always", "expiry")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Typed view of runtime configuration."""

    account_id: str = Field("", validation_alias="ZOHO_ACCOUNT_ID")
    client_id: str = Field("", validation_alias="ZOHO_CLIENT_ID")
    client_secret: str = Field("", validation_alias="ZOHO_CLIENT_SECRET")
    refresh_token: str = Field("", validation_alias="ZOHO_REFRESH_TOKEN")
    api_key: Optional[str] = Field(None, validation_alias="ZOHO_API_KEY")
    oauth_token: Optional[str] = Field(None, validation_alias="ZOHO_OAUTH_TOKEN")

    accounts_url: str = Field("https://accounts.zoho.in", validation_alias="ZOHO_ACCOUNTS_URL")
    payments_url: str = Field("https://payments.zoho.in", validation_alias="ZOHO_PAYMENTS_URL")

    token_refresh_policy: str = "always"
    token_expiry_skew_seconds: float = 60.0
    provider_timeout_seconds: float = 10.0

    proxy_api_keys: Annotated[list[str], NoDecode] = Field(default_factory=list)
    log_level: str = "INFO"
    port: int = 4000

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_ignore_empty=True,
        populate_by_name=True,
    )

    @field_validator("accounts_url", "payments_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("token_refresh_policy")
    @classmethod
    def _check_policy(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in REFRESH_POLICIES:
            raise ValueError(f"TOKEN_REFRESH_POLICY must be one of {REFRESH_POLICIES}, got {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {LOG_LEVELS}, got {value!r}")
        return value

    @field_validator("proxy_api_keys", mode="before")
    @classmethod
    def _split_keys(cls, value):
        # PROXY_API_KEYS is a comma-separated list in the environment.
        if isinstance(value, str):
            return [k.strip() for k in value.split(",") if k.strip()]
        return value

    def missing_credentials(self) -> list[str]:
        required = {
            "ZOHO_ACCOUNT_ID": self.account_id,
            "ZOHO_CLIENT_ID": self.client_id,
            "ZOHO_CLIENT_SECRET": self.client_secret,
            "ZOHO_REFRESH_TOKEN": self.refresh_token,
        }
        return [name for name, value in required.items() if not value]

