"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from capfetch.api.routers import batch_router, exports_router, imports_router
from capfetch.app_context import get_app_context
from capfetch.config.logging_config import setup_logging
from capfetch.config.settings import get_settings
from capfetch.core.exceptions import AppError

# Error codes that are not plain bad input
_STATUS_BY_CODE = {
    "INVALID_STATE": 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    yield
    # Shutdown
    get_app_context().close()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Batch historical market cap collection",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(batch_router)
app.include_router(exports_router)
app.include_router(imports_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=_STATUS_BY_CODE.get(exc.code, 400),
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Liveness plus the current batch status."""
    return {
        "status": "healthy",
        "batch": get_app_context().orchestrator.status.value,
    }


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "provider": get_app_context().settings.market_data_provider,
        "docs": "/docs",
    }
