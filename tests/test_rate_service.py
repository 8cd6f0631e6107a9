"""
Tests for the rate aggregation service.
"""
import asyncio
from typing import List

import pytest
from pydantic import ValidationError

from carrier_rates.core.exceptions import CarrierErrorCode, CarrierIntegrationError
from carrier_rates.modules.shipping.carriers.base import BaseCarrier
from carrier_rates.schemas.rates import RateQuote
from carrier_rates.services.rate_service import CarrierRateResult, RateService


def quote(carrier_id: str, service_level: str, amount: float) -> RateQuote:
    return RateQuote(carrier_id=carrier_id, service_level=service_level, amount=amount, currency="USD")


class StubCarrier(BaseCarrier):
    """Carrier double returning fixed quotes or raising a fixed error."""

    def __init__(self, carrier_id: str, quotes: List[RateQuote] = None, error: Exception = None, delay: float = 0.0):
        self._carrier_id = carrier_id
        self.quotes = quotes or []
        self.error = error
        self.delay = delay
        self.calls = []
        self.closed = False

    @property
    def carrier_id(self) -> str:
        return self._carrier_id

    async def get_rates(self, request):
        self.calls.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return list(self.quotes)

    async def close(self) -> None:
        self.closed = True


class TestGetRates:

    @pytest.mark.asyncio
    async def test_merges_quotes_in_carrier_order(self, sample_rate_request):
        # The slower first carrier still comes first in the result
        first = StubCarrier("alpha", [quote("alpha", "A1", 10), quote("alpha", "A2", 5)], delay=0.03)
        second = StubCarrier("beta", [quote("beta", "B1", 1)])
        service = RateService([first, second])

        quotes = await service.get_rates(sample_rate_request)

        assert [(q.carrier_id, q.service_level) for q in quotes] == [
            ("alpha", "A1"), ("alpha", "A2"), ("beta", "B1"),
        ]

    @pytest.mark.asyncio
    async def test_failed_carrier_contributes_nothing(self, sample_rate_request):
        failing = StubCarrier("alpha", error=CarrierIntegrationError.timeout())
        working = StubCarrier("beta", [quote("beta", "B1", 12.5)])
        service = RateService([failing, working])

        quotes = await service.get_rates(sample_rate_request)

        assert [q.carrier_id for q in quotes] == ["beta"]

    @pytest.mark.asyncio
    async def test_one_failure_among_three_keeps_configured_order(self, sample_rate_request):
        carriers = [
            StubCarrier("alpha", [quote("alpha", "A1", 7)], delay=0.02),
            StubCarrier("beta", error=CarrierIntegrationError.rate_fetch_failed("Invalid response body")),
            StubCarrier("gamma", [quote("gamma", "G1", 4), quote("gamma", "G2", 9)]),
        ]

        quotes = await RateService(carriers).get_rates(sample_rate_request)

        assert [(q.carrier_id, q.service_level) for q in quotes] == [
            ("alpha", "A1"), ("gamma", "G1"), ("gamma", "G2"),
        ]

    @pytest.mark.asyncio
    async def test_carrier_returning_non_list_is_isolated(self, sample_rate_request):
        class NoneCarrier(StubCarrier):
            async def get_rates(self, request):
                return None

        service = RateService([NoneCarrier("alpha"), StubCarrier("beta", [quote("beta", "B1", 3)])])

        results = await service.get_rate_results(sample_rate_request)

        assert [r.ok for r in results] == [False, True]
        assert isinstance(results[0].error, TypeError)
        assert results[0].error_dict()["code"] == "UNEXPECTED_ERROR"
        assert [q.carrier_id for q in await service.get_rates(sample_rate_request)] == ["beta"]

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_also_isolated(self, sample_rate_request):
        broken = StubCarrier("alpha", error=RuntimeError("boom"))
        working = StubCarrier("beta", [quote("beta", "B1", 3)])

        quotes = await RateService([broken, working]).get_rates(sample_rate_request)

        assert len(quotes) == 1

    @pytest.mark.asyncio
    async def test_all_carriers_failing_yields_empty_list(self, sample_rate_request):
        carriers = [
            StubCarrier("alpha", error=CarrierIntegrationError.unavailable()),
            StubCarrier("beta", error=CarrierIntegrationError.validation("Request failed with status 400")),
        ]

        assert await RateService(carriers).get_rates(sample_rate_request) == []

    @pytest.mark.asyncio
    async def test_no_carriers_yields_empty_list(self, sample_rate_request):
        assert await RateService([]).get_rates(sample_rate_request) == []

    @pytest.mark.asyncio
    async def test_carriers_are_called_concurrently(self, sample_rate_request):
        both_started = asyncio.Event()
        started = []

        class RendezvousCarrier(StubCarrier):
            async def get_rates(self, request):
                started.append(self.carrier_id)
                if len(started) == 2:
                    both_started.set()
                await both_started.wait()
                return [quote(self.carrier_id, "S", 1)]

        service = RateService([RendezvousCarrier("alpha"), RendezvousCarrier("beta")])

        # Sequential calls would never both start and would hang here
        quotes = await asyncio.wait_for(service.get_rates(sample_rate_request), timeout=1.0)

        assert [q.carrier_id for q in quotes] == ["alpha", "beta"]

    @pytest.mark.asyncio
    async def test_invalid_request_raises_before_any_carrier_call(self, sample_rate_request):
        carrier = StubCarrier("alpha", [quote("alpha", "A1", 1)])
        sample_rate_request["origin"]["country_code"] = "USA"

        with pytest.raises(ValidationError):
            await RateService([carrier]).get_rates(sample_rate_request)

        assert carrier.calls == []

    @pytest.mark.asyncio
    async def test_invalid_request_raises_even_without_carriers(self):
        with pytest.raises(ValidationError):
            await RateService([]).get_rates({"origin": {}})

    @pytest.mark.asyncio
    async def test_carriers_receive_validated_request(self, sample_rate_request):
        carrier = StubCarrier("alpha")

        await RateService([carrier]).get_rates(sample_rate_request)

        assert carrier.calls[0].destination.country_code == "US"


class TestRateResults:

    @pytest.mark.asyncio
    async def test_results_report_each_carrier_outcome(self, sample_rate_request):
        error = CarrierIntegrationError.timeout()
        service = RateService([
            StubCarrier("alpha", error=error),
            StubCarrier("beta", [quote("beta", "B1", 2)]),
            StubCarrier("gamma", error=ValueError("bad state")),
        ])

        results = await service.get_rate_results(sample_rate_request)

        assert [r.carrier_id for r in results] == ["alpha", "beta", "gamma"]
        assert [r.ok for r in results] == [False, True, False]
        assert results[0].error is error
        assert results[0].to_dict() == {
            "carrier_id": "alpha",
            "ok": False,
            "quote_count": 0,
            "error": {"code": "CARRIER_TIMEOUT", "message": "Carrier request timed out"},
        }
        assert results[1].to_dict()["quote_count"] == 1
        assert results[2].error_dict() == {"code": "UNEXPECTED_ERROR", "message": "bad state"}
        assert [r.error_kind for r in results] == [CarrierErrorCode.TIMEOUT, None, None]

    @pytest.mark.asyncio
    async def test_observer_sees_every_result(self, sample_rate_request):
        seen: List[CarrierRateResult] = []
        service = RateService(
            [StubCarrier("alpha", error=CarrierIntegrationError.unavailable()), StubCarrier("beta")],
            observer=seen.append,
        )

        await service.get_rates(sample_rate_request)

        assert [(r.carrier_id, r.ok) for r in seen] == [("alpha", False), ("beta", True)]
        assert seen[0].error.kind == CarrierErrorCode.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_failing_observer_does_not_break_aggregation(self, sample_rate_request):
        def observer(result):
            raise RuntimeError("observer down")

        service = RateService([StubCarrier("alpha", [quote("alpha", "A1", 1)])], observer=observer)

        quotes = await service.get_rates(sample_rate_request)

        assert len(quotes) == 1


class TestClose:

    @pytest.mark.asyncio
    async def test_closes_every_carrier(self):
        class FailingClose(StubCarrier):
            async def close(self):
                raise RuntimeError("already closed")

        carriers = [StubCarrier("alpha"), FailingClose("beta"), StubCarrier("gamma")]

        await RateService(carriers).close()

        assert carriers[0].closed
        assert carriers[2].closed
