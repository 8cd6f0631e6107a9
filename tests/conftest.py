"""
Pytest configuration and fixtures for carrier-rates tests.
"""
import os
from typing import Callable, Optional

import httpx
import pytest

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ.setdefault("ENABLED_CARRIERS", "ups")

from carrier_rates.core.http_client import CarrierHTTPClient
from carrier_rates.modules.shipping.carriers.ups import UPSCarrier, UPSOAuthClient, UPSOAuthConfig

TEST_BASE_URL = "https://ups.test"
TOKEN_PATH = "/security/v1/oauth/token"


class FakeClock:
    """Manually advanced clock for token expiry tests."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_http_client(handler: Callable, timeout: float = 5.0) -> CarrierHTTPClient:
    return CarrierHTTPClient(
        base_url=TEST_BASE_URL,
        timeout=timeout,
        transport=httpx.MockTransport(handler),
    )


def make_oauth_client(http_client: CarrierHTTPClient, clock: Optional[FakeClock] = None) -> UPSOAuthClient:
    config = UPSOAuthConfig(
        client_id="test-client",
        client_secret="test-secret",
        token_url=TOKEN_PATH,
    )
    if clock is None:
        return UPSOAuthClient(config, http_client)
    return UPSOAuthClient(config, http_client, clock=clock)


def make_ups_carrier(handler: Callable, timeout: float = 5.0, **kwargs) -> UPSCarrier:
    http_client = make_http_client(handler, timeout=timeout)
    return UPSCarrier(make_oauth_client(http_client), http_client, **kwargs)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_rate_request() -> dict:
    """NY -> LA, one 5 lb package with 10x8x6 in dimensions."""
    return {
        "origin": {
            "address_line1": "123 Origin St",
            "city": "New York",
            "state_or_province_code": "NY",
            "postal_code": "10001",
            "country_code": "US",
        },
        "destination": {
            "address_line1": "456 Dest Ave",
            "city": "Los Angeles",
            "state_or_province_code": "CA",
            "postal_code": "90001",
            "country_code": "us",
        },
        "packages": [
            {
                "weight": {"value": 5, "unit": "lb"},
                "dimensions": {"length": 10, "width": 8, "height": 6, "unit": "in"},
            }
        ],
    }


@pytest.fixture
def ups_rate_response() -> dict:
    """Two rated shipments: Ground $15.99 (string), Next Day Air $42.50 (number)."""
    return {
        "RateResponse": {
            "RatedShipment": [
                {
                    "Service": {"Code": "03", "Description": "Ground"},
                    "TotalCharges": {"MonetaryValue": "15.99", "CurrencyCode": "USD"},
                    "TimeInTransit": {"BusinessTransitDays": 3},
                },
                {
                    "Service": {"Code": "01", "Description": "Next Day Air"},
                    "TotalCharges": {"MonetaryValue": 42.50, "CurrencyCode": "USD"},
                    "TimeInTransit": {"BusinessTransitDays": 1},
                },
            ]
        }
    }


@pytest.fixture
def http_client_factory() -> Callable[..., CarrierHTTPClient]:
    return make_http_client


@pytest.fixture
def oauth_client_factory() -> Callable[..., UPSOAuthClient]:
    return make_oauth_client


@pytest.fixture
def ups_carrier_factory() -> Callable[..., UPSCarrier]:
    return make_ups_carrier
