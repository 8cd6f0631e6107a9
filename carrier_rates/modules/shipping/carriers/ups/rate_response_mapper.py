"""
UPS Rate Response Mapper

Pure translation of a UPS Rating API response body into RateQuote values.
Malformed records are dropped rather than failing the whole response.
"""
import logging
import math
import re
from typing import Any, List, Optional

from pydantic import ValidationError

from carrier_rates.schemas.rates import RateQuote

logger = logging.getLogger(__name__)

UPS_CARRIER_ID = "ups"
DEFAULT_CURRENCY = "USD"

# Plain decimal only: no underscores, "inf"/"nan" or hex forms
NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def parse_amount(value: Any) -> Optional[float]:
    """Accept a finite int/float or a numeric string; anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not NUMERIC_RE.match(text):
            return None
        number = float(text)
    else:
        return None
    return number if math.isfinite(number) else None


def parse_transit_days(value: Any) -> Optional[int]:
    number = parse_amount(value)
    if number is None or number < 1 or not number.is_integer():
        return None
    return int(number)


def parse_currency_code(value: Any) -> str:
    if isinstance(value, str) and len(value) >= 3:
        return value[:3].upper()
    return DEFAULT_CURRENCY


def parse_service_level(rated: dict) -> Optional[str]:
    service = rated.get("Service")
    if not isinstance(service, dict):
        return None
    for key in ("Code", "Description"):
        value = service.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _get_dict(parent: dict, key: str) -> dict:
    value = parent.get(key)
    return value if isinstance(value, dict) else {}


def _transit_days_field(rated: dict) -> Any:
    days = _get_dict(rated, "TimeInTransit").get("BusinessTransitDays")
    if days is None:
        # Shop responses carry transit days under GuaranteedDelivery
        days = _get_dict(rated, "GuaranteedDelivery").get("BusinessDaysInTransit")
    return days


def map_rated_shipment_to_quote(rated: dict, carrier_id: str = UPS_CARRIER_ID) -> Optional[RateQuote]:
    charges = _get_dict(rated, "TotalCharges")

    amount = parse_amount(charges.get("MonetaryValue"))
    if amount is None or amount < 0:
        return None

    service_level = parse_service_level(rated)
    if not service_level:
        return None

    try:
        return RateQuote(
            carrier_id=carrier_id,
            service_level=service_level,
            amount=amount,
            currency=parse_currency_code(charges.get("CurrencyCode")),
            estimated_transit_days=parse_transit_days(_transit_days_field(rated)),
        )
    except ValidationError as e:
        logger.debug(f"[UPS] Dropping rated shipment that failed validation: {e.errors()}")
        return None


def to_rated_shipment_list(rated: Any) -> List[Any]:
    if rated is None:
        return []
    if isinstance(rated, list):
        return rated
    return [rated]


def map_ups_response_to_rate_quotes(body: Any, carrier_id: str = UPS_CARRIER_ID) -> List[RateQuote]:
    """
    Map a parsed UPS response to quotes, preserving UPS order.

    Returns an empty list for non-object input or a missing RatedShipment.
    """
    if not isinstance(body, dict):
        return []

    rated_shipments = to_rated_shipment_list(_get_dict(body, "RateResponse").get("RatedShipment"))

    quotes: List[RateQuote] = []
    for rated in rated_shipments:
        if not isinstance(rated, dict):
            continue
        quote = map_rated_shipment_to_quote(rated, carrier_id)
        if quote:
            quotes.append(quote)
        else:
            logger.debug(f"[UPS] Dropped unmappable rated shipment: {rated.get('Service')}")

    return quotes
