"""Configuration management."""

from typing import Optional, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    development: bool = Field(default=False, alias="DEVELOPMENT")

    # Episode source (only pages on this host are fetched)
    episode_source_domain: str = Field(default="thepitch.show", alias="EPISODE_SOURCE_DOMAIN")

    # Page fetching
    fetch_timeout: int = Field(default=15, alias="FETCH_TIMEOUT")  # seconds
    fetch_retries: int = Field(default=2, alias="FETCH_RETRIES")
    fetch_user_agent: str = Field(
        default="Mozilla/5.0 (compatible; The Pitch Fund Episode Extractor/1.0)",
        alias="FETCH_USER_AGENT"
    )

    # HTTP / CORS
    allowed_origins: Optional[str] = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        alias="ALLOWED_ORIGINS"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True

    @field_validator('log_file', mode='before')
    @classmethod
    def empty_str_to_none(cls, v):
        """Convert empty strings to None for optional path fields."""
        if v == '' or v is None:
            return None
        return v

    @field_validator('fetch_retries')
    @classmethod
    def non_negative_retries(cls, v):
        if v < 0:
            raise ValueError("FETCH_RETRIES must be >= 0")
        return v

    def get_allowed_origins_list(self) -> List[str]:
        """Return allowed origins as list."""
        if not self.allowed_origins:
            return []
        return [item.strip() for item in str(self.allowed_origins).split(',') if item.strip()]


settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance."""
    return settings
