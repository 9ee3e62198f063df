"""API routers."""

from uhi_app.routers.explorer import router as explorer_router

__all__ = ["explorer_router"]
