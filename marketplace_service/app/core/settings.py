"""
Marketplace Service configuration
"""

from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

SERVICE_DIR = Path(__file__).parent.parent.parent
# Load from marketplace_service/.env
ENV_FILE = SERVICE_DIR / ".env"


class MarketplaceServiceSettings(BaseSettings):
    # Application
    APP_NAME: str = "Marketplace Admin Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    SERVICE_NAME: str = "marketplace-service"
    PORT: int = 8000

    # Database
    MARKETPLACE_DATABASE_URL: str

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    AUTH_COOKIE_NAME: str = "token"
    AUTH_COOKIE_SECURE: bool = False
    AUTH_COOKIE_SAMESITE: str = "lax"

    # Image hosting (Cloudinary)
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_UPLOAD_URL: str = "https://api.cloudinary.com/v1_1"
    IMAGE_MAX_SIZE_BYTES: int = 5 * 1024 * 1024
    IMAGE_ALLOWED_FORMATS: List[str] = ["jpg", "jpeg", "png", "gif"]
    IMAGE_TIMEOUT_SECONDS: float = 30.0

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]
    CORS_CREDENTIALS: bool = True
    CORS_METHODS: List[str] = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    CORS_HEADERS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"
    ENABLE_ACCESS_LOGS: bool = True

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


# Create a singleton instance
_settings_instance: Optional[MarketplaceServiceSettings] = None


def get_settings() -> MarketplaceServiceSettings:
    """Get settings singleton instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = MarketplaceServiceSettings()  # type: ignore[call-arg]
    return _settings_instance
