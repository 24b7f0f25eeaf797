"""
Repository layer for database access.

Provides async CRUD operations for all models.
"""

from .catalog_repo import CatalogRepository
from .image_repo import ImageRepository
from .profile_repo import ProfileRepository
from .project_repo import ProjectRepository
from .share_repo import ShareRepository
from .token_repo import Balance, TokenRepository
from .transformation_repo import TransformationRepository

__all__ = [
    "Balance",
    "CatalogRepository",
    "ImageRepository",
    "ProfileRepository",
    "ProjectRepository",
    "ShareRepository",
    "TokenRepository",
    "TransformationRepository",
]
