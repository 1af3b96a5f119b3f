"""OAuth access-token cache and refresher for the payment provider."""

import asyncio
import logging
import math
import time
from typing import Callable, Optional

import httpx

from paysession.shared.config import Settings

logger = logging.getLogger("paysession.token_manager")


class AuthRefreshError(Exception):
    def __init__(self, detail: str = "Access token refresh failed"):
        self.detail = detail
        super().__init__(detail)


class TokenManager:
    """Owns the in-memory access token.

    Every refresh and every read-for-use happens under ``self._lock``, so a
    caller always gets the token its own critical section produced or checked.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings
        self.policy = settings.token_refresh_policy
        self.transport = transport
        self.clock = clock
        self._lock = asyncio.Lock()
        self._access_token: Optional[str] = settings.oauth_token
        # A seeded token has no known expiry.
        self._expires_at: Optional[float] = None

    @property
    def token_url(self) -> str:
        return f"{self.settings.accounts_url}/oauth/v2/token"

    async def refresh(self) -> bool:
        """Exchange the refresh token for a new access token.

        Returns False on any failure instead of raising; the reason is logged.
        """
        form = {
            "refresh_token": self.settings.refresh_token,
            "client_id": self.settings.client_id,
            "client_secret": self.settings.client_secret,
            "grant_type": "refresh_token",
        }
        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=self.settings.provider_timeout_seconds,
            ) as client:
                resp = await client.post(self.token_url, data=form)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Error refreshing token: {type(e).__name__}: {e}")
            return False

        try:
            data = resp.json()
        except ValueError:
            logger.error(f"Token refresh returned a non-JSON body (HTTP {resp.status_code})")
            return False

        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            reason = data.get("error", "no access_token in response") if isinstance(data, dict) else "unexpected body"
            logger.error(f"Token refresh failed (HTTP {resp.status_code}): {reason}")
            return False

        self._access_token = access_token
        self._expires_at = self._expiry_from(data.get("expires_in"))
        logger.info("Provider access token refreshed successfully")
        return True

    def _expiry_from(self, expires_in) -> Optional[float]:
        try:
            seconds = float(expires_in)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(seconds):
            return None
        return self.clock() + seconds

    def _is_fresh(self) -> bool:
        if not self._access_token or self._expires_at is None:
            return False
        return self.clock() < self._expires_at - self.settings.token_expiry_skew_seconds

    async def get_access_token(self) -> str:
        """Return a token usable for one outbound call, refreshing per policy."""
        async with self._lock:
            if self.policy == "expiry" and self._is_fresh():
                return self._access_token
            if not await self.refresh():
                raise AuthRefreshError()
            return self._access_token

    def status(self) -> dict:
        expires_in = None
        if self._access_token and self._expires_at is not None:
            expires_in = max(0, round(self._expires_at - self.clock()))
        return {
            "policy": self.policy,
            "cached": bool(self._access_token),
            "expires_in_seconds": expires_in,
        }
