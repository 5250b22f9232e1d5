"""
Verification Service - Main Application
========================================

FastAPI application for solvency proof generation, verification and
entity proof status.

Version: 0.1.0
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from services.verification.routes import entities, proofs, verification
from zkreserves.config import settings
from zkreserves.core.hashing import get_field_hasher
from zkreserves.logging import get_logger, setup_logging
from zkreserves.models.common import ErrorResponse, HealthResponse
from zkreserves.registry import get_registry_client


# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="verification",
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "verification_service_starting",
        environment=settings.environment.value,
        port=settings.ports.verification,
    )

    # Startup
    try:
        hasher = get_field_hasher()
        logger.info("field_hasher_ready", hasher=hasher.name)

        registry = get_registry_client(settings.registry)
        await registry.connect()
        logger.info(
            "registry_connected",
            mode=registry.mode.value,
        )

    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    yield

    # Shutdown
    logger.info("verification_service_shutting_down")
    await get_registry_client().disconnect()


# Create FastAPI application
app = FastAPI(
    title="zkReserves Verification Service",
    description="Solvency proof generation, commitment verification and proof status",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and the registry.
    """
    components: dict[str, dict[str, Any]] = {}

    # Check registry
    components["registry"] = await get_registry_client().health_check()

    # Check hasher configuration
    hasher = get_field_hasher()
    components["hasher"] = {
        "status": "healthy",
        "algorithm": hasher.name,
        "modulus_bits": hasher.modulus.bit_length(),
    }

    # Determine overall status
    all_healthy = all(c.get("status") == "healthy" for c in components.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service="verification",
        version="0.1.0",
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "zkReserves Verification Service",
        "version": "0.1.0",
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    proofs.router,
    prefix="/api/v1/proofs",
    tags=["Proofs"],
)

app.include_router(
    verification.router,
    prefix="/api/v1/verify",
    tags=["Verification"],
)

app.include_router(
    entities.router,
    prefix="/api/v1/entities",
    tags=["Entities"],
)


# ============================================================================
# Error Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Any, exc: HTTPException) -> Any:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=str(exc.detail),
            status_code=exc.status_code,
        ).model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Any, exc: Exception) -> Any:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            status_code=500,
        ).model_dump(mode="json"),
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.verification.main:app",
        host="0.0.0.0",
        port=settings.ports.verification,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
