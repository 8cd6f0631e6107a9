"""
Shipping Module v1.0.0

- BaseCarrier interface for all carrier implementations
- CarrierFactory builds enabled carriers from settings
"""
from carrier_rates.modules.shipping.carriers import CarrierFactory, register_carrier
from carrier_rates.modules.shipping.carriers.base import BaseCarrier

__all__ = [
    "CarrierFactory",
    "register_carrier",
    "BaseCarrier",
]
