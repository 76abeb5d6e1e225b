"""Application configuration settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PHONE_DIRECTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage configuration
    data_file: str = Field(default="phonebook.json", description="Snapshot file path")
    backup_dir: str = Field(default="backups", description="Directory for relative backup targets")

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or text


# Global settings instance
settings = Settings()
