import secrets
from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings."""

    # Database
    DATABASE_URL: str = "sqlite:///./amor.db"
    AUTO_CREATE_TABLES: bool = True

    # JWT Authentication (tokens are issued by the auth provider)
    SECRET_KEY: str = Field(default="", description="JWT secret shared with the auth provider")
    JWT_ALGORITHM: str = "HS256"

    # Object storage
    UPLOAD_DIR: str = "./storage"
    PUBLIC_URL: str = "http://localhost:8000"
    MAX_FILE_SIZE: int = 4 * 1024 * 1024  # 4MB
    MIN_IMAGES: int = 2
    MAX_IMAGES: int = 4
    ALLOWED_EXTENSIONS: set = {
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".webp",
    }

    # Group input limits
    MAX_NAME_LENGTH: int = 100
    MAX_TAGS: int = 10
    MAX_TAG_LENGTH: int = 32

    # Moderation
    REVIEW_COOLDOWN_HOURS: int = 24  # Minimum age of last_reviewed_at before re-display

    # Frontend origins allowed to call the API
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Development settings
    DEBUG: bool = False

    def model_post_init(self, __context) -> None:
        """Validate settings after initialization."""
        if not self.SECRET_KEY:
            print("WARNING: SECRET_KEY not set in .env file. Generating a temporary one.")
            print("Tokens from the auth provider will not validate until it is set.")
            self.SECRET_KEY = secrets.token_urlsafe(32)

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
