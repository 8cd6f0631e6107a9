"""
UPS Carrier Implementation v1.0.0

- Implements BaseCarrier.get_rates()
- Validates the request, authenticates via UPSOAuthClient, calls the UPS
  Rating API and maps the response to normalized quotes
- Registered via @register_carrier decorator
"""
import logging
import uuid
from typing import Any, List, Optional

from carrier_rates.core.config import Settings
from carrier_rates.core.exceptions import CarrierErrorCode, CarrierIntegrationError
from carrier_rates.core.http_client import CarrierHTTPClient
from carrier_rates.modules.shipping.carriers import register_carrier
from carrier_rates.modules.shipping.carriers.base import BaseCarrier
from carrier_rates.modules.shipping.carriers.ups.oauth import UPSOAuthClient, UPSOAuthConfig
from carrier_rates.modules.shipping.carriers.ups.rate_request_mapper import map_rate_request_to_ups_payload
from carrier_rates.modules.shipping.carriers.ups.rate_response_mapper import (
    UPS_CARRIER_ID,
    map_ups_response_to_rate_quotes,
)
from carrier_rates.schemas.rates import RateQuote, RateRequest, parse_rate_request

logger = logging.getLogger(__name__)

DEFAULT_RATING_PATH = "/api/rating/v2409/Shop"
TRANSACTION_SOURCE = "carrier-rates"


@register_carrier(UPS_CARRIER_ID)
class UPSCarrier(BaseCarrier):
    """
    UPS shipping carrier implementation.

    Owns its OAuth client (one token cache per credential set) and the
    HTTP client both share.
    """

    def __init__(
        self,
        oauth_client: UPSOAuthClient,
        http_client: CarrierHTTPClient,
        rating_path: str = DEFAULT_RATING_PATH,
        account_number: str = "",
        timeout: Optional[float] = None,
    ):
        self.oauth_client = oauth_client
        self._http = http_client
        self.rating_path = rating_path
        self.account_number = account_number
        self.timeout = timeout

    @property
    def carrier_id(self) -> str:
        return UPS_CARRIER_ID

    @classmethod
    def is_configured(cls, settings: Settings) -> bool:
        return settings.ups_configured

    @classmethod
    def from_settings(cls, settings: Settings) -> "UPSCarrier":
        http_client = CarrierHTTPClient(
            base_url=settings.ups_base_url,
            timeout=settings.CARRIER_HTTP_TIMEOUT_SECONDS,
        )
        oauth_client = UPSOAuthClient(
            UPSOAuthConfig(
                client_id=settings.UPS_CLIENT_ID,
                client_secret=settings.UPS_CLIENT_SECRET,
                token_url=settings.UPS_TOKEN_PATH,
            ),
            http_client,
        )
        return cls(
            oauth_client=oauth_client,
            http_client=http_client,
            rating_path=settings.UPS_RATING_PATH,
            account_number=settings.UPS_ACCOUNT_NUMBER,
            timeout=settings.UPS_RATE_TIMEOUT_SECONDS,
        )

    async def get_rates(self, request: Any) -> List[RateQuote]:
        """Get shipping rates from UPS."""
        validated: RateRequest = parse_rate_request(request)
        payload = map_rate_request_to_ups_payload(validated, self.account_number)

        token = await self.oauth_client.get_access_token()

        try:
            response = await self._http.request(
                "POST",
                self.rating_path,
                body=payload,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                    "transId": uuid.uuid4().hex,
                    "transactionSrc": TRANSACTION_SOURCE,
                },
                timeout=self.timeout,
            )
        except CarrierIntegrationError as e:
            if e.kind == CarrierErrorCode.VALIDATION and e.status_code == 401:
                logger.warning("[UPS] Rating call rejected token (401), clearing token cache")
                self.oauth_client.clear_cache()
            raise

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"[UPS] Rating response is not valid JSON: {e}")
            raise CarrierIntegrationError.rate_fetch_failed(
                "Invalid response body",
                {"cause": str(e)},
            ) from e

        quotes = map_ups_response_to_rate_quotes(body, self.carrier_id)
        logger.info(f"[UPS] Got {len(quotes)} rates")
        return quotes

    async def close(self) -> None:
        await self._http.close()
