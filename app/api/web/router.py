from fastapi import APIRouter

from .pages import router as pages_router
from .upload import router as upload_router

# Create HTML router
web_router = APIRouter()

# Include all routers
web_router.include_router(pages_router, tags=["Pages"])
web_router.include_router(upload_router, prefix="/upload", tags=["Upload"])
