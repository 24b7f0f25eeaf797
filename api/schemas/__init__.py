"""
Pydantic schemas for API request/response models.
"""

from .common import (
    AIHealthResponse,
    ComponentHealth,
    ErrorResponse,
    HealthCheckResponse,
    HealthStatus,
    SuccessResponse,
)

from .auth import (
    CheckUserRequest,
    CheckUserResponse,
    CreateProfileRequest,
    CreateProfileResponse,
    ProfileInfo,
    ProfileResponse,
    SendMagicLinkRequest,
    PasswordStatusResponse,
    SendMagicLinkResponse,
    SetPasswordRequest,
    SetPasswordResponse,
    UpdateProfileRequest,
)

from .design import (
    ColorPaletteInfo,
    DesignDataResponse,
    DesignStyleInfo,
    RoomTypeInfo,
    RoomTypeListResponse,
    SeasonalThemeInfo,
    StyleListResponse,
)

from .tokens import (
    BalanceResponse,
    CreditTokensRequest,
    CreditTokensResponse,
    TokenHistoryResponse,
    TransactionInfo,
)

from .projects import (
    CreateProjectRequest,
    ImageDetailResponse,
    ImageInfo,
    ListImagesResponse,
    ListProjectsResponse,
    ProjectDetailResponse,
    ProjectInfo,
    ProjectResponse,
    UpdateProjectRequest,
    UploadImageResponse,
    UserImageInfo,
    UserImagesResponse,
)

from .variants import (
    Dimensions,
    FavoriteResponse,
    GenerateVariantRequest,
    GenerateVariantResponse,
    TransformationStatistics,
    UserTransformationsResponse,
    VariantInfo,
    VariantListResponse,
)

from .shares import (
    CreateShareRequest,
    CreateShareResponse,
    ListSharesResponse,
    PublicProjectInfo,
    PublicShareResponse,
    ShareDetailResponse,
    ShareInfo,
    UpdateShareRequest,
)
