from .user import (
    UserSummary,
    UserCreate,
    UserUpdate,
    UserResponse,
    UserDetailResponse,
    RoleAssign,
)
from .auth import (
    RegisterRequest,
    LoginRequest,
    TokenResponse,
    ProfileResponse,
)
from .category import (
    CategorySummary,
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
)
from .tag import (
    TagSummary,
    TagCreate,
    TagUpdate,
    TagResponse,
)
from .post import (
    PostCreate,
    PostUpdate,
    PostCategoryItem,
    PostResponse,
    PostListResponse,
)
from .event import (
    EventCreate,
    EventUpdate,
    EventResponse,
)
from .upload import UploadResponse
from .youtube import YouTubeVideo
