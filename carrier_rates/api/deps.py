"""
API dependencies
"""
from fastapi import HTTPException, Request, status

from carrier_rates.services.rate_service import RateService


def get_rate_service(request: Request) -> RateService:
    """Rate service built by the application lifespan."""
    service = getattr(request.app.state, "rate_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Rate service is not initialized",
        )
    return service
