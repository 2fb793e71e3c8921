"""Service index."""

from fastapi import APIRouter

from src.core.config import settings

router = APIRouter(tags=["Root"])


@router.get("/")
async def root() -> dict[str, str | None]:
    """Name, version and where to go next."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.version,
        "docs": "/docs" if settings.debug else None,
        "health": "/health",
        "auth": "/api/auth",
        "api": "/api/v1",
        "metadata": "/api/v1/metadata/currencies",
    }
