"""
Rate Aggregation Service v1.0.0

- Fans one rate request out to every configured carrier concurrently
- Waits for all carriers to settle (not first-result-wins)
- A failing carrier contributes no quotes and never fails the whole call
- Quotes are concatenated in carrier configuration order, no re-sorting

Per-carrier outcomes are available through get_rate_results() and an
optional observer callback, so callers can see which carriers failed.

Usage:
    service = RateService(CarrierFactory.get_enabled_carriers(settings))
    quotes = await service.get_rates(request)
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from carrier_rates.core.exceptions import CarrierErrorCode, RateShopError, is_carrier_integration_error
from carrier_rates.modules.shipping.carriers.base import BaseCarrier
from carrier_rates.schemas.rates import RateQuote, RateRequest, parse_rate_request

logger = logging.getLogger(__name__)


@dataclass
class CarrierRateResult:
    """Outcome of one carrier's get_rates() call."""
    carrier_id: str
    quotes: List[RateQuote] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> Optional[CarrierErrorCode]:
        """Kind of a carrier integration failure; None on success or unexpected errors."""
        if is_carrier_integration_error(self.error):
            return self.error.kind
        return None

    def error_dict(self) -> Optional[Dict[str, Any]]:
        if self.error is None:
            return None
        if isinstance(self.error, RateShopError):
            return self.error.to_dict()
        return {"code": "UNEXPECTED_ERROR", "message": str(self.error) or self.error.__class__.__name__}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "carrier_id": self.carrier_id,
            "ok": self.ok,
            "quote_count": len(self.quotes),
            "error": self.error_dict(),
        }


RateObserver = Callable[[CarrierRateResult], None]


class RateService:
    """
    Aggregates rates from a fixed list of carrier adapters.
    """

    def __init__(
        self,
        carriers: Sequence[BaseCarrier],
        observer: Optional[RateObserver] = None,
    ):
        self.carriers: List[BaseCarrier] = list(carriers)
        self.observer = observer

    async def get_rates(self, request: Any) -> List[RateQuote]:
        """
        Get rates from every carrier and merge the successful results.

        Raises:
            pydantic.ValidationError: request is malformed (never caught here)
        """
        results = await self.get_rate_results(request)

        quotes: List[RateQuote] = []
        for result in results:
            quotes.extend(result.quotes)
        return quotes

    async def get_rate_results(self, request: Any) -> List[CarrierRateResult]:
        """
        Get per-carrier outcomes, in carrier configuration order.

        Raises:
            pydantic.ValidationError: request is malformed (never caught here)
        """
        validated: RateRequest = parse_rate_request(request)

        if not self.carriers:
            logger.warning("[RATES] No carriers configured for rate lookup")
            return []

        outcomes = await asyncio.gather(
            *(carrier.get_rates(validated) for carrier in self.carriers),
            return_exceptions=True,
        )

        results: List[CarrierRateResult] = []
        for carrier, outcome in zip(self.carriers, outcomes):
            if isinstance(outcome, BaseException):
                result = CarrierRateResult(carrier_id=carrier.carrier_id, error=outcome)
                logger.warning(f"[RATES] Carrier {carrier.carrier_id} failed: {result.error_dict()}")
            elif not isinstance(outcome, (list, tuple)):
                error = TypeError(
                    f"get_rates() returned {type(outcome).__name__}, expected a list of quotes"
                )
                result = CarrierRateResult(carrier_id=carrier.carrier_id, error=error)
                logger.warning(f"[RATES] Carrier {carrier.carrier_id} failed: {result.error_dict()}")
            else:
                result = CarrierRateResult(carrier_id=carrier.carrier_id, quotes=list(outcome))
                logger.info(f"[RATES] Got {len(result.quotes)} rates from {carrier.carrier_id}")

            self._notify(result)
            results.append(result)

        return results

    def _notify(self, result: CarrierRateResult) -> None:
        if self.observer is None:
            return
        try:
            self.observer(result)
        except Exception:
            logger.exception(f"[RATES] Rate observer failed for carrier {result.carrier_id}")

    async def close(self) -> None:
        """Close every carrier's transport."""
        for carrier in self.carriers:
            try:
                await carrier.close()
            except Exception as e:
                logger.error(f"[RATES] Error closing carrier {carrier.carrier_id}: {e}")
