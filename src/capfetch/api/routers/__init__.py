"""API routers package."""

from capfetch.api.routers.batch import router as batch_router
from capfetch.api.routers.exports import router as exports_router
from capfetch.api.routers.imports import router as imports_router

__all__ = [
    "batch_router",
    "exports_router",
    "imports_router",
]
