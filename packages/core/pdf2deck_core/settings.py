"""Process configuration loaded from the environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from pdf2deck_core.graph.config import DeckConfig


class Settings(BaseSettings):
    """Configuration loaded from environment variables or a ``.env`` file."""

    # LLM
    google_api_key: str | None = None
    model_name: str = "gemini-3-flash-preview"
    ai_timeout: float = 300.0
    # Model calls are not retried unless this is raised
    ai_max_attempts: int = 1
    narration_language: str = "English"

    # Rendering
    render_scale: float = 1.5
    jpeg_quality: int = 85
    max_render_concurrency: int = 1

    # Export
    filename_max_length: int = 50

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    def to_deck_config(self) -> DeckConfig:
        """Build the pipeline configuration from these settings."""
        return DeckConfig(
            render_scale=self.render_scale,
            jpeg_quality=self.jpeg_quality,
            max_render_concurrency=self.max_render_concurrency,
            filename_max_length=self.filename_max_length,
        )
