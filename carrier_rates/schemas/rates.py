"""
Rate Schemas

Carrier-agnostic domain models for rate quoting. All models are immutable.
parse_rate_request() is the validation entry point: everything downstream
trusts its output.
"""
import math
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Address(BaseModel):
    """Postal address for an origin or destination."""
    model_config = ConfigDict(frozen=True)

    address_line1: str = Field(..., min_length=1, description="Address line 1 is required")
    address_line2: Optional[str] = None
    city: str = Field(..., min_length=1)
    state_or_province_code: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    country_code: str = Field(..., min_length=2, max_length=2, description="2-letter ISO code")

    @field_validator("country_code")
    @classmethod
    def validate_country_code(cls, v):
        if not v.isalpha():
            raise ValueError("Country code must be a 2-letter ISO code")
        return v.upper()


class Weight(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float = Field(..., gt=0, strict=True, description="Weight must be a positive number")
    unit: Literal["kg", "lb"]


class Dimensions(BaseModel):
    model_config = ConfigDict(frozen=True)

    length: float = Field(..., ge=0, strict=True)
    width: float = Field(..., ge=0, strict=True)
    height: float = Field(..., ge=0, strict=True)
    unit: Literal["cm", "in"]


class Package(BaseModel):
    """Package weight and optional dimensions."""
    model_config = ConfigDict(frozen=True)

    weight: Weight
    dimensions: Optional[Dimensions] = None


class RateRequest(BaseModel):
    """Request rates for shipping packages from origin to destination."""
    model_config = ConfigDict(frozen=True)

    origin: Address
    destination: Address
    packages: List[Package] = Field(..., min_length=1, description="At least one package is required")
    service_level: Optional[str] = Field(None, description="Carrier-specific service code (optional)")


class RateQuote(BaseModel):
    """A single normalized rate from one carrier."""
    model_config = ConfigDict(frozen=True)

    carrier_id: str = Field(..., min_length=1)
    service_level: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    currency: str = Field(..., min_length=3, max_length=3)
    estimated_transit_days: Optional[int] = Field(None, gt=0)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        if not math.isfinite(v):
            raise ValueError("Amount must be a finite number")
        return v

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        return v.upper()


class RateListResponse(BaseModel):
    """Aggregated quotes returned by the rates endpoint."""
    quotes: List[RateQuote]


def parse_rate_request(data: Union[RateRequest, Any]) -> RateRequest:
    """
    Validate untrusted input into a RateRequest.

    Raises:
        pydantic.ValidationError with field-level diagnostics
    """
    if isinstance(data, RateRequest):
        return data
    return RateRequest.model_validate(data)
