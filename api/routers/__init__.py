"""
API routers for different endpoints.
"""

from .health import router as health_router
from .auth import router as auth_router
from .design_data import router as design_data_router
from .design_data import catalog_router
from .tokens import router as tokens_router
from .projects import router as projects_router
from .base_images import router as base_images_router
from .images import router as images_router
from .user import router as user_router
from .variants import router as variants_router
from .shares import router as shares_router
from .shares import public_router as public_shares_router

__all__ = [
    "health_router",
    "auth_router",
    "design_data_router",
    "catalog_router",
    "tokens_router",
    "projects_router",
    "base_images_router",
    "images_router",
    "user_router",
    "variants_router",
    "shares_router",
    "public_shares_router",
]
