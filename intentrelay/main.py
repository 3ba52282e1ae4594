"""
Main application for IntentRelay
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from intentrelay.core.config.settings import settings
from intentrelay.core.exceptions import (
    IntentRelayException,
    IntentStoreError,
    ValidationError,
)
from intentrelay.core.logging import get_logger
from intentrelay.core.redis import check_redis_health, close_redis_client
from intentrelay.core.dependencies import reset_attribution_service

from intentrelay.api.v1.links import router as links_router
from intentrelay.api.v1.deferred_deeplink import router as deferred_deeplink_router
from intentrelay.api.v1.health import router as health_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    await initialize_services()
    yield
    await cleanup_services()


async def initialize_services():
    """Check Redis at startup; requests fail individually if it stays down"""
    logger.info("Checking Redis connectivity...")
    redis_health = await check_redis_health()
    if redis_health.is_healthy:
        logger.info(
            "Redis connection verified",
            response_time_ms=round(redis_health.response_time_ms, 2),
        )
    else:
        logger.warning(
            "Redis connection check failed, attribution requests will error",
            error=redis_health.error_message,
        )


async def cleanup_services():
    """Close the shared Redis connection"""
    try:
        await close_redis_client()
        reset_attribution_service()
    except Exception as e:
        logger.error("Failed to cleanup services", error=str(e))


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Deferred deep-link attribution service",
    version=settings.VERSION,
    lifespan=lifespan,
)

# Include API routers
app.include_router(links_router)
app.include_router(deferred_deeplink_router)
app.include_router(health_router)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.warning("Rejected request", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Unparseable bodies and bad parameters get the same 400 shape as ValidationError"""
    message = "Invalid request"
    for error in exc.errors():
        location = tuple(error.get("loc", ()))
        if error.get("type") == "json_invalid" or location == ("body",):
            message = "deviceInfo is required"
            break
        if location[:1] == ("body",):
            message = "Invalid request body"

    logger.warning("Rejected request", path=request.url.path, error=message)
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(IntentStoreError)
async def intent_store_error_handler(request: Request, exc: IntentStoreError):
    logger.error(
        "Intent store unavailable",
        path=request.url.path,
        operation=exc.operation,
        error=str(exc),
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.exception_handler(IntentRelayException)
async def intentrelay_error_handler(request: Request, exc: IntentRelayException):
    logger.error(
        "Unhandled application error",
        path=request.url.path,
        error_code=exc.error_code,
        error=exc.message,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
