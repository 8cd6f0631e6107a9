from carrier_rates.schemas.rates import (
    Address,
    Weight,
    Dimensions,
    Package,
    RateRequest,
    RateQuote,
    RateListResponse,
    parse_rate_request,
)

__all__ = [
    "Address",
    "Weight",
    "Dimensions",
    "Package",
    "RateRequest",
    "RateQuote",
    "RateListResponse",
    "parse_rate_request",
]
