"""
SQLAlchemy models for the Decollage API.
"""

from .base import Base, JSONType, TimestampMixin
from .catalog import ColorPalette, DesignStyle, RoomType, SeasonalTheme
from .image import Image, ImageType
from .profile import AuthMethod, Profile, ProfileRole
from .project import Project, ProjectStatus
from .share import ProjectShare, ShareVisibility
from .token import TokenTransaction, TransactionType
from .transformation import Transformation, TransformationStatus

__all__ = [
    # Base
    "Base",
    "JSONType",
    "TimestampMixin",
    # Models
    "Profile",
    "Project",
    "Image",
    "Transformation",
    "DesignStyle",
    "RoomType",
    "ColorPalette",
    "SeasonalTheme",
    "ProjectShare",
    "TokenTransaction",
    # Enums
    "AuthMethod",
    "ProfileRole",
    "ProjectStatus",
    "ImageType",
    "TransformationStatus",
    "ShareVisibility",
    "TransactionType",
]
