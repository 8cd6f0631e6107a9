"""
Carrier Registry and Factory v1.0.0

- CarrierFactory creates carrier instances from settings
- Only returns carriers listed in ENABLED_CARRIERS, in that order
- Carriers missing credentials are skipped with a warning
"""
from typing import Dict, List, Optional, Type
import logging

from carrier_rates.core.config import Settings
from carrier_rates.modules.shipping.carriers.base import BaseCarrier

logger = logging.getLogger(__name__)

# Registry of carrier implementations
_CARRIER_REGISTRY: Dict[str, Type[BaseCarrier]] = {}


def register_carrier(carrier_id: str):
    """
    Decorator to register a carrier implementation.

    Usage:
        @register_carrier("ups")
        class UPSCarrier(BaseCarrier):
            ...
    """
    def decorator(cls: Type[BaseCarrier]):
        _CARRIER_REGISTRY[carrier_id] = cls
        logger.debug(f"Registered carrier: {carrier_id} -> {cls.__name__}")
        return cls
    return decorator


class CarrierFactory:
    """Factory for creating carrier instances from settings."""

    @classmethod
    def get_carrier(cls, carrier_id: str, settings: Settings) -> Optional[BaseCarrier]:
        """
        Get a carrier instance if registered and configured.

        Returns:
            BaseCarrier instance or None if unknown/unconfigured
        """
        carrier_cls = _CARRIER_REGISTRY.get(carrier_id)
        if not carrier_cls:
            logger.warning(f"No implementation registered for carrier: {carrier_id}")
            return None

        if not carrier_cls.is_configured(settings):
            logger.warning(f"Carrier {carrier_id} is enabled but not configured, skipping")
            return None

        return carrier_cls.from_settings(settings)

    @classmethod
    def get_enabled_carriers(cls, settings: Settings) -> List[BaseCarrier]:
        """Get all enabled carrier instances in ENABLED_CARRIERS order."""
        carriers = []
        for carrier_id in settings.ENABLED_CARRIERS:
            carrier = cls.get_carrier(carrier_id, settings)
            if carrier:
                carriers.append(carrier)
        return carriers

    @classmethod
    def get_registered_carriers(cls) -> List[str]:
        """Get list of all registered carrier ids."""
        return list(_CARRIER_REGISTRY.keys())


# Import carriers to trigger registration
# These imports must be at the bottom to avoid circular imports
from carrier_rates.modules.shipping.carriers.ups import UPSCarrier  # noqa: E402, F401
