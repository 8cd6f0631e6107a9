"""
UPS OAuth 2.0 Client (client-credentials flow)

Acquires, caches, and refreshes the bearer token for one UPS credential set.

Token slot states: Empty -> Valid -> Stale -> (refresh) -> Valid, or back
to Empty via clear_cache().

Single-flight: while a refresh is in progress every caller awaits the same
fetch task; no second token request is issued until that task settles.
The "check cache, else start fetch" decision contains no await, so it is
atomic under asyncio. Sharing one instance across threads would need a lock
around that decision.
"""
import asyncio
import base64
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from carrier_rates.core.exceptions import CarrierIntegrationError
from carrier_rates.core.http_client import CarrierHTTPClient

logger = logging.getLogger(__name__)

# Tokens are treated as stale this many seconds before they expire
REFRESH_BUFFER_SECONDS = 60

DEFAULT_EXPIRES_IN_SECONDS = 3600


@dataclass(frozen=True)
class UPSOAuthConfig:
    """Client credentials and token endpoint (absolute URL or path)."""
    client_id: str
    client_secret: str
    token_url: str
    timeout: Optional[float] = None

    def __repr__(self) -> str:
        return f"UPSOAuthConfig(client_id={self.client_id!r}, token_url={self.token_url!r})"


@dataclass(frozen=True)
class CachedToken:
    access_token: str
    expires_at: float  # epoch seconds


class UPSOAuthClient:
    """
    Token cache for a credentialed carrier.

    Owned by the adapter that uses it; not shared process-wide.
    """

    def __init__(
        self,
        config: UPSOAuthConfig,
        http_client: CarrierHTTPClient,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self._http = http_client
        self._clock = clock
        self._cache: Optional[CachedToken] = None
        self._inflight: Optional["asyncio.Task[str]"] = None

    @property
    def cached_token(self) -> Optional[CachedToken]:
        return self._cache

    def _is_token_valid(self) -> bool:
        if self._cache is None:
            return False
        return self._clock() < self._cache.expires_at - REFRESH_BUFFER_SECONDS

    async def get_access_token(self) -> str:
        """
        Return a valid access token, fetching and caching as needed.

        Refreshes when the token is absent, expired, or inside the refresh
        buffer. Concurrent callers share a single in-flight fetch.

        Raises:
            CarrierIntegrationError: UNAVAILABLE on a malformed token response,
                or whatever the transport raised for the token request
        """
        if self._is_token_valid():
            return self._cache.access_token

        task = self._inflight
        if task is None:
            task = asyncio.ensure_future(self._fetch_token())
            task.add_done_callback(self._release_inflight)
            self._inflight = task

        # shield: a cancelled caller must not cancel the fetch other callers await
        return await asyncio.shield(task)

    def _release_inflight(self, task: "asyncio.Task[str]") -> None:
        if self._inflight is task:
            self._inflight = None
        if not task.cancelled():
            # Mark the exception retrieved even if every awaiting caller was cancelled
            task.exception()

    def _basic_auth_header(self) -> str:
        credentials = f"{self.config.client_id}:{self.config.client_secret}"
        return "Basic " + base64.b64encode(credentials.encode("utf-8")).decode("ascii")

    async def _fetch_token(self) -> str:
        logger.debug(f"[UPS_OAUTH] Requesting token from {self.config.token_url}")

        response = await self._http.request(
            "POST",
            self.config.token_url,
            body="grant_type=client_credentials",
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "Authorization": self._basic_auth_header(),
            },
            timeout=self.config.timeout,
        )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"[UPS_OAUTH] Token response is not JSON (status {response.status_code})")
            raise CarrierIntegrationError.unavailable(
                "Invalid token response: body is not JSON",
                {"status_code": response.status_code, "cause": str(e)},
            ) from e

        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            logger.error(f"[UPS_OAUTH] Token response missing access_token (status {response.status_code})")
            raise CarrierIntegrationError.unavailable(
                "Invalid token response: missing access_token",
                {"status_code": response.status_code},
            )

        expires_in = _parse_expires_in(data.get("expires_in"))
        self._cache = CachedToken(
            access_token=str(access_token),
            expires_at=self._clock() + expires_in,
        )

        logger.info(f"[UPS_OAUTH] Token obtained, expires in {expires_in}s")
        return self._cache.access_token

    def clear_cache(self) -> None:
        """
        Drop the cached token and forget any in-flight fetch.

        An in-flight request is not cancelled; if it succeeds it still
        populates the cache.
        """
        self._cache = None
        self._inflight = None


def _parse_expires_in(value) -> float:
    if value is None or isinstance(value, bool):
        return DEFAULT_EXPIRES_IN_SECONDS
    try:
        return float(value)
    except (TypeError, ValueError):
        return DEFAULT_EXPIRES_IN_SECONDS
