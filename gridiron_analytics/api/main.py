"""
Main FastAPI application for the film analytics engine.

Serves the tier-gated analytics over HTTP. Engine exceptions are mapped to
status codes in one place (the exception handlers below) so the routers stay
thin:

- TierFeatureDisabledError    -> 403 (client renders an upgrade prompt)
- AuthenticationRequiredError -> 401
- InvalidTierError            -> 422
- PlayerNotFoundError         -> 404
- DataServiceError            -> 502 (client shows generic retry messaging)

Interactive docs are generated at /docs and /redoc.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config.settings import settings
from ..core.exceptions import (
    AuthenticationRequiredError,
    DataServiceError,
    InvalidTierError,
    PlayerNotFoundError,
    TierFeatureDisabledError,
)
from .routers import analytics
from .schemas import ErrorResponse, HealthResponse, TierFeatureDisabledResponse

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Gridiron Film Analytics API",
    description="Tier-gated drive, player, offensive line and defensive analytics from tagged film",
    version=__version__,
)

# CORS: the coaching UI is served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict to the UI origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ========== ERROR MAPPING ==========


def _error(exc: Exception, error: str) -> dict:
    return ErrorResponse(detail=str(exc), error=error).model_dump()


@app.exception_handler(TierFeatureDisabledError)
async def tier_feature_disabled_handler(request: Request, exc: TierFeatureDisabledError):
    return JSONResponse(
        status_code=403,
        content=TierFeatureDisabledResponse(detail=str(exc), feature=exc.feature, tier=exc.tier).model_dump(),
    )


@app.exception_handler(AuthenticationRequiredError)
async def authentication_required_handler(request: Request, exc: AuthenticationRequiredError):
    return JSONResponse(status_code=401, content=_error(exc, "not_authenticated"))


@app.exception_handler(InvalidTierError)
async def invalid_tier_handler(request: Request, exc: InvalidTierError):
    return JSONResponse(status_code=422, content=_error(exc, "invalid_tier"))


@app.exception_handler(PlayerNotFoundError)
async def player_not_found_handler(request: Request, exc: PlayerNotFoundError):
    return JSONResponse(status_code=404, content=_error(exc, "player_not_found"))


@app.exception_handler(DataServiceError)
async def data_service_error_handler(request: Request, exc: DataServiceError):
    logger.exception(f"Data store failure on {request.method} {request.url.path}")
    return JSONResponse(status_code=502, content=_error(exc, "data_service_error"))


# ========== SYSTEM ENDPOINTS ==========


@app.get("/")
async def root():
    """Basic API information and a link to the docs."""
    return {
        "message": "Gridiron Film Analytics API",
        "version": __version__,
        "docs": f"http://{settings.api_host}:{settings.api_port}/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check for load balancers and monitoring."""
    return HealthResponse(status="healthy", service="gridiron-analytics", version=__version__)


# ========== ROUTERS ==========

app.include_router(analytics.router, prefix="/api")
app.include_router(analytics.capabilities_router, prefix="/api")
app.include_router(analytics.players_router, prefix="/api")
