from typing import List

from pydantic_settings import BaseSettings


DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
]


class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str
    AUTO_CREATE_TABLES: bool = True

    # API
    API_TITLE: str = "Blog CMS API"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = ""

    # Security
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 120

    # Roles
    DEFAULT_USER_ROLE: str = "editor"
    DEFAULT_ROLES: str = "manager:Manager,editor:Editor"

    # Uploads (Cloudinary)
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_FOLDER: str = ""

    # YouTube Data API
    YOUTUBE_API_KEY: str = ""
    YOUTUBE_DEFAULT_CHANNEL_ID: str = ""
    YOUTUBE_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins(self) -> List[str]:
        origins = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        return origins or DEFAULT_CORS_ORIGINS

    @property
    def default_roles(self) -> List[tuple]:
        """Parse `name:Display Name` pairs used to seed the roles table."""
        roles = []
        for item in self.DEFAULT_ROLES.split(","):
            item = item.strip()
            if not item:
                continue
            name, _, display_name = item.partition(":")
            roles.append((name.strip().lower(), display_name.strip() or name.strip().title()))
        return roles


# Create settings instance
settings = Settings()
