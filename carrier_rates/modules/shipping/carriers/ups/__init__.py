from carrier_rates.modules.shipping.carriers.ups.oauth import (
    UPSOAuthClient,
    UPSOAuthConfig,
    CachedToken,
)
from carrier_rates.modules.shipping.carriers.ups.rate_request_mapper import map_rate_request_to_ups_payload
from carrier_rates.modules.shipping.carriers.ups.rate_response_mapper import map_ups_response_to_rate_quotes
from carrier_rates.modules.shipping.carriers.ups.carrier import UPSCarrier

__all__ = [
    "UPSOAuthClient",
    "UPSOAuthConfig",
    "CachedToken",
    "UPSCarrier",
    "map_rate_request_to_ups_payload",
    "map_ups_response_to_rate_quotes",
]
