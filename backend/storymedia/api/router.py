"""Master API router — mounts all sub-routers."""

from fastapi import APIRouter

from storymedia.api.admin import router as admin_router

api_router = APIRouter(prefix="/api", redirect_slashes=False)

api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])
