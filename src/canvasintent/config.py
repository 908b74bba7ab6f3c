"""Configuration from environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from canvasintent.models import ImageLoadConfig


class Settings(BaseSettings):
    # Image loading
    image_compression_quality: int = Field(default=80, ge=0, le=100)
    image_max_size: int = Field(default=2048, ge=1)

    # Payload limits
    max_reference_images: int = Field(default=14, ge=1)
    max_role_length: int = Field(default=50, ge=4)

    # Neighborhood traversal for in-place edits
    max_upstream_nodes: int = Field(default=10, ge=0)
    max_downstream_nodes: int = Field(default=5, ge=0)

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="CANVASINTENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def image_load_config(self) -> ImageLoadConfig:
        return ImageLoadConfig(
            quality=self.image_compression_quality,
            max_dimension=self.image_max_size,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
