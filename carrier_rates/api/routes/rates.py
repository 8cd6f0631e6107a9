"""
Rate API Routes

Thin transport over RateService. Request validation happens in the
RateRequest schema before the service is called.
"""
import logging

from fastapi import APIRouter, Depends

from carrier_rates.api.deps import get_rate_service
from carrier_rates.schemas.rates import RateListResponse, RateRequest
from carrier_rates.services.rate_service import RateService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rates", tags=["rates"])


@router.post("", response_model=RateListResponse)
async def get_rates(
    rate_request: RateRequest,
    rate_service: RateService = Depends(get_rate_service),
):
    """
    Get rate quotes from every enabled carrier.

    Carriers that fail are left out of the result; the call itself only
    fails on malformed input (422).
    """
    quotes = await rate_service.get_rates(rate_request)
    return RateListResponse(quotes=quotes)
