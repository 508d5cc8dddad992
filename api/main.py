"""
Safe Route API - FastAPI Main Application

A RESTful API for safety-weighted walking routes around recorded incidents.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from api.routes.routing import router as routing_router
from api.schemas.routing import ErrorResponse
from api.services.routing_service import API_VERSION, SafeRoutingService, get_routing_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - startup and shutdown events.
    """
    logger.info("Starting Safe Route API...")

    # Load incident data up front instead of on the first request
    health = get_routing_service().get_health_status()
    if health.incident_data_loaded:
        logger.info(f"Routing service ready with {health.incident_count} incidents")
    else:
        logger.warning("Routing service running in degraded mode - no incident data loaded")

    yield

    logger.info("Shutting down Safe Route API...")


app = FastAPI(
    title="Safe Route API",
    description="""
    **Walking routes that keep their distance from recorded incidents**

    Routes are built from synthesized waypoints between the source and the
    destination. Every segment that passes within the penalty radius of a
    recorded incident becomes more expensive, and the cheapest route wins.

    ## Quick Start

    1. Check service status: `GET /api/test`
    2. Calculate a route: `POST /api/route`
    3. Open the returned `mapLink` for turn-by-turn directions
    """,
    version=API_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, error: str, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, details=details)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Report malformed request bodies (wrong JSON types, out-of-range tuning fields).
    """
    logger.warning(f"Validation error for {request.url}: {exc}")
    return _error_response(422, "validation_error", "Request validation failed",
                           details=jsonable_encoder(exc.errors()))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Last resort for errors that escaped the planner's own fallbacks.
    """
    logger.error(f"Unexpected error for {request.url}: {exc}")
    return _error_response(500, "internal_server_error", "An unexpected error occurred")


app.include_router(routing_router)


@app.get("/", tags=["general"])
async def root():
    """
    API root endpoint with basic information.
    """
    return {
        "api": "Safe Route API",
        "version": API_VERSION,
        "status": "operational",
        "documentation": "/docs",
        "health_check": "/health"
    }


@app.get("/health", tags=["general"])
def api_health(service: SafeRoutingService = Depends(get_routing_service)):
    """
    Simple health check endpoint.
    """
    service_health = service.get_health_status()
    return {
        "api_status": "healthy",
        "service_status": service_health.status,
        "incident_count": service_health.incident_count
    }


if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
