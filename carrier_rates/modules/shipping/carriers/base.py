"""
Base Carrier Interface v1.0.0

Every carrier adapter implements this interface. The rate service only
depends on get_rates(), so any adapter satisfying it can be registered.
"""
from abc import ABC, abstractmethod
from typing import Any, List

from carrier_rates.schemas.rates import RateQuote, RateRequest


class BaseCarrier(ABC):
    """
    Abstract base class for all shipping carriers.

    Adapters own their transport and credentials; close() releases them.
    """

    @property
    @abstractmethod
    def carrier_id(self) -> str:
        """Stable identifier stamped on every quote (e.g. "ups")."""
        pass

    @abstractmethod
    async def get_rates(self, request: RateRequest) -> List[RateQuote]:
        """
        Get shipping rates from the carrier.

        Args:
            request: Rate request (validated again by the adapter)

        Returns:
            Quotes in the carrier's response order, possibly empty

        Raises:
            pydantic.ValidationError: request failed validation
            CarrierIntegrationError: transport, auth, or parse failure
        """
        pass

    @classmethod
    def from_settings(cls, settings: Any) -> "BaseCarrier":
        """Build the adapter from application settings."""
        raise NotImplementedError(f"{cls.__name__} cannot be built from settings")

    @classmethod
    def is_configured(cls, settings: Any) -> bool:
        """Whether settings carry what from_settings() needs."""
        return True

    async def close(self) -> None:
        """Release transport resources. Default: nothing to release."""
        return None
