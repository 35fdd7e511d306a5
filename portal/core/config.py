"""Application configuration"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings"""

    # Database
    database_url: str = "sqlite+aiosqlite:///./portal.db"
    database_url_sync: str = "sqlite:///./portal.db"

    # Security
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    min_password_length: int = 6

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    api_prefix: str = "/api"
    cors_origins: List[str] = ["*"]

    # Bootstrap administrator (used by `portal users create-admin`)
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None

    # Blog slugs
    max_slug_length: int = 120

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
