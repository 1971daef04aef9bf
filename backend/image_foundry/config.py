"""Configuration management for Image Foundry."""
import json
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CORS_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]


def _split_list(value: str, default: list[str]) -> list[str]:
    """Parse a comma-separated string or JSON list."""
    if not value.strip():
        return list(default)
    if value.strip().startswith("["):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI (text description + optional image provider)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    openai_image_model: str = "dall-e-3"
    openai_images_enabled: bool = True

    # Hugging Face Inference (image providers, tried first, in order)
    huggingface_api_key: str = ""
    huggingface_base_url: str = "https://api-inference.huggingface.co/models"
    huggingface_image_models_str: str = Field(
        default="stabilityai/stable-diffusion-3.5-large",
        alias="HUGGINGFACE_IMAGE_MODELS",
    )

    # Pipeline tuning
    description_temperature: float = 0.7
    refinement_temperature: float = 0.4
    text_timeout: int = 60
    image_timeout: int = 120
    refinement_min_length: int = 50
    model_loading_cooldown: float = 20.0

    # Database (in-memory SQLite unless overridden)
    database_url: str = "sqlite://"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # CORS - stored as string, accessed as list via property
    cors_origins_str: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        alias="CORS_ORIGINS"
    )

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string or JSON list."""
        return _split_list(self.cors_origins_str, DEFAULT_CORS_ORIGINS)

    @property
    def huggingface_image_models(self) -> list[str]:
        """Ordered Hugging Face model ids to try for image generation."""
        return _split_list(self.huggingface_image_models_str, [])


settings = Settings()
