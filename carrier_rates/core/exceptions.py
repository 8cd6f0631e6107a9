"""
Carrier Rates Exception Taxonomy

All errors include code, message, and details for logging and for the
stable serialized shape returned to callers.

Carrier failures are a closed set of kinds carried by a single exception
class. Callers branch on ``err.kind`` rather than on subclass type:

    RateShopError
    └── CarrierIntegrationError (kind: CarrierErrorCode)
        ├── VALIDATION          malformed/rejected input, 4xx from carrier
        ├── UNAVAILABLE         outage, 5xx, malformed token response
        ├── RATE_FETCH_FAILED   unparseable body, unclassified non-2xx
        └── TIMEOUT             call exceeded its deadline
"""
from enum import Enum
from typing import Any, Dict, Optional


class CarrierErrorCode(str, Enum):
    VALIDATION = "CARRIER_VALIDATION"
    UNAVAILABLE = "CARRIER_UNAVAILABLE"
    RATE_FETCH_FAILED = "CARRIER_RATE_FETCH_FAILED"
    TIMEOUT = "CARRIER_TIMEOUT"


class RateShopError(Exception):
    """
    Base exception for all carrier-rates errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging
    """

    default_code: str = "RATE_SHOP_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details) if details else {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Stable serialized form: code, message and (when present) details."""
        data: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            data["details"] = dict(self.details)
        return data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CarrierIntegrationError(RateShopError):
    """
    Failure at a carrier boundary (transport, OAuth, or response parsing).

    ``kind`` is the discriminant; ``code`` is always ``kind.value``.
    """

    def __init__(
        self,
        kind: CarrierErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.kind = CarrierErrorCode(kind)
        super().__init__(message, code=self.kind.value, details=details)

    @classmethod
    def validation(cls, message: str, details: Optional[Dict[str, Any]] = None) -> "CarrierIntegrationError":
        return cls(CarrierErrorCode.VALIDATION, message, details)

    @classmethod
    def unavailable(
        cls,
        message: str = "Carrier is temporarily unavailable",
        details: Optional[Dict[str, Any]] = None,
    ) -> "CarrierIntegrationError":
        return cls(CarrierErrorCode.UNAVAILABLE, message, details)

    @classmethod
    def rate_fetch_failed(cls, message: str, details: Optional[Dict[str, Any]] = None) -> "CarrierIntegrationError":
        return cls(CarrierErrorCode.RATE_FETCH_FAILED, message, details)

    @classmethod
    def timeout(
        cls,
        message: str = "Carrier request timed out",
        details: Optional[Dict[str, Any]] = None,
    ) -> "CarrierIntegrationError":
        return cls(CarrierErrorCode.TIMEOUT, message, details)

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status of the carrier response, when the error came from one."""
        return self.details.get("status_code")

    def __repr__(self) -> str:
        return f"CarrierIntegrationError(kind={self.kind.name}, message={self.message!r})"


def is_carrier_integration_error(error: Any) -> bool:
    return isinstance(error, CarrierIntegrationError)
