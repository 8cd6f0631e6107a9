"""
Carrier HTTP Client

Thin async transport for carrier APIs:
- Base URL resolution for relative paths (absolute URLs pass through)
- Default headers merged with per-call headers (per-call wins)
- Structured bodies serialized to JSON, raw strings sent as-is
- Total deadline per call (default 30s) enforced by cancellation
- Non-2xx and network failures normalized into CarrierIntegrationError

Exactly one outbound request per call. No retries at this layer.
"""
import asyncio
import json
import logging
from typing import Any, Dict, Optional, Union

import httpx

from carrier_rates.core.exceptions import CarrierIntegrationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

Body = Union[str, Dict[str, Any], list]


class CarrierHTTPClient:
    """
    Async HTTP client used by carrier adapters and their OAuth clients.

    Usage:
        async with CarrierHTTPClient("https://onlinetools.ups.com") as client:
            response = await client.post("/api/rating/v2409/Shop", body=payload)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        default_headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.default_headers = dict(default_headers or {})
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def init(self):
        """Initialize client without context manager. Must call close() when done."""
        if self._client is None:
            # Deadline is enforced per call in request(); disable httpx's own.
            self._client = httpx.AsyncClient(timeout=None, transport=self._transport)
        return self

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    def resolve_url(self, url_or_path: str) -> str:
        if url_or_path.startswith(("http://", "https://")):
            return url_or_path
        return f"{self.base_url}/{url_or_path.lstrip('/')}"

    def merge_headers(self, headers: Optional[Dict[str, str]] = None) -> httpx.Headers:
        merged = httpx.Headers(self.default_headers)
        for key, value in (headers or {}).items():
            merged[key] = value
        return merged

    @staticmethod
    def serialize_body(body: Optional[Body]) -> Optional[str]:
        if body is None or isinstance(body, str):
            return body
        return json.dumps(body)

    async def request(
        self,
        method: str,
        url: str,
        body: Optional[Body] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """
        Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Absolute URL or path relative to base_url
            body: Raw string, or a dict/list serialized as JSON
            headers: Per-call headers, override defaults on conflict
            timeout: Deadline in seconds for this call (defaults to client timeout)

        Returns:
            httpx.Response with a 2xx status

        Raises:
            CarrierIntegrationError: TIMEOUT on deadline, UNAVAILABLE on network
                failure or 5xx, VALIDATION on 4xx, RATE_FETCH_FAILED otherwise
        """
        if not self._client:
            await self.init()

        target = self.resolve_url(url)
        deadline = self.timeout if timeout is None else timeout

        logger.debug(f"[HTTP] {method} {target}")
        try:
            response = await asyncio.wait_for(
                self._client.request(
                    method,
                    target,
                    content=self.serialize_body(body),
                    headers=self.merge_headers(headers),
                ),
                timeout=deadline,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"[HTTP] {method} {target} timed out after {deadline}s")
            raise CarrierIntegrationError.timeout(
                "Request timed out",
                {"cause": str(e) or e.__class__.__name__},
            ) from e
        except httpx.RequestError as e:
            logger.warning(f"[HTTP] {method} {target} failed: {e}")
            raise CarrierIntegrationError.unavailable(
                "Network request failed",
                {"cause": str(e) or e.__class__.__name__},
            ) from e

        logger.debug(f"[HTTP] {method} {target} -> {response.status_code}")

        if not response.is_success:
            raise self._error_for_status(response)

        return response

    def _error_for_status(self, response: httpx.Response) -> CarrierIntegrationError:
        status = response.status_code
        details: Dict[str, Any] = {
            "status_code": status,
            "status_text": response.reason_phrase,
        }
        try:
            text = response.text
            if text:
                try:
                    details["response_body"] = json.loads(text)
                except ValueError:
                    details["response_body"] = text
        except Exception:
            # Body capture is diagnostics only
            pass

        if 400 <= status < 500:
            logger.warning(f"[HTTP] Carrier rejected request: {status} {response.reason_phrase}")
            return CarrierIntegrationError.validation(f"Request failed with status {status}", details)
        if status >= 500:
            logger.error(f"[HTTP] Carrier server error: {status} {response.reason_phrase}")
            return CarrierIntegrationError.unavailable(f"Carrier returned server error: {status}", details)
        logger.error(f"[HTTP] Unexpected carrier status: {status}")
        return CarrierIntegrationError.rate_fetch_failed(f"Request failed with status {status}", details)

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, body: Optional[Body] = None, **kwargs) -> httpx.Response:
        return await self.request("POST", url, body=body, **kwargs)
