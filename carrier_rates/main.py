"""
Carrier Rates API
FastAPI application entry point

- Lifespan builds the RateService from settings and closes carrier
  HTTP clients on shutdown
- CarrierIntegrationError is rendered in its stable {code, message, details} shape
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from carrier_rates import __version__
from carrier_rates.api.routes import rates
from carrier_rates.core.config import get_settings
from carrier_rates.core.exceptions import CarrierErrorCode, CarrierIntegrationError
from carrier_rates.modules.shipping.carriers import CarrierFactory
from carrier_rates.services.rate_service import RateService

logger = logging.getLogger(__name__)

ERROR_STATUS_BY_KIND = {
    CarrierErrorCode.VALIDATION: 400,
    CarrierErrorCode.UNAVAILABLE: 503,
    CarrierErrorCode.RATE_FETCH_FAILED: 502,
    CarrierErrorCode.TIMEOUT: 504,
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build carriers and the rate service on startup, close them on shutdown."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    if getattr(app.state, "rate_service", None) is None:
        carriers = CarrierFactory.get_enabled_carriers(settings)
        app.state.rate_service = RateService(carriers)
        logger.info(f"Rate service started with carriers: {[c.carrier_id for c in carriers]}")

    yield

    await app.state.rate_service.close()
    app.state.rate_service = None
    logger.info("Carrier HTTP clients closed")


app = FastAPI(
    lifespan=lifespan,
    title="Carrier Rates API",
    version=__version__,
)


@app.exception_handler(CarrierIntegrationError)
async def carrier_error_handler(request: Request, exc: CarrierIntegrationError):
    logger.error(f"Carrier error on {request.url.path}: {exc.to_dict()}")
    return JSONResponse(
        status_code=ERROR_STATUS_BY_KIND.get(exc.kind, 502),
        content=exc.to_dict(),
    )


app.include_router(rates.router, prefix="/api", tags=["Rates"])


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok", "service": get_settings().APP_NAME}
