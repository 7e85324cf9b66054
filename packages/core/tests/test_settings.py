"""Tests for settings and pipeline configuration."""

import logging

import pytest

from pdf2deck_core.controller import DeckPipeline, PipelineStatus
from pdf2deck_core.errors import ConfigurationError
from pdf2deck_core.graph.config import DeckConfig
from pdf2deck_core.model_adapters import GoogleAdapter
from pdf2deck_core.settings import Settings


class TestDeckConfig:
    """Tests for DeckConfig."""

    def test_defaults(self) -> None:
        config = DeckConfig()

        assert config.render_dpi == 108
        assert config.slide_width_in / config.slide_height_in == pytest.approx(16 / 9)
        assert config.fallback_title(0) == "Page 1"

    def test_custom_title_template(self) -> None:
        config = DeckConfig(fallback_title_template="Slide {page_index}")

        assert config.fallback_title(4) == "Slide 4"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"render_scale": 0},
            {"jpeg_quality": 0},
            {"jpeg_quality": 101},
            {"max_render_concurrency": 0},
            {"fallback_notes": "  "},
        ],
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            DeckConfig(**kwargs)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.delenv("MODEL_NAME", raising=False)
        settings = Settings(_env_file=None)

        assert settings.google_api_key is None
        assert settings.model_name == "gemini-3-flash-preview"
        assert settings.ai_max_attempts == 1
        assert settings.narration_language == "English"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
        monkeypatch.setenv("RENDER_SCALE", "2.0")

        settings = Settings(_env_file=None)

        assert settings.google_api_key == "from-env"
        assert settings.render_scale == 2.0

    def test_to_deck_config(self) -> None:
        settings = Settings(
            _env_file=None,
            render_scale=2.0,
            jpeg_quality=70,
            max_render_concurrency=4,
            filename_max_length=20,
        )

        config = settings.to_deck_config()

        assert config.render_dpi == 144
        assert config.jpeg_quality == 70
        assert config.max_render_concurrency == 4
        assert config.filename_max_length == 20


class TestFromSettings:
    """Tests for DeckPipeline.from_settings."""

    def test_builds_idle_pipeline(self) -> None:
        settings = Settings(
            _env_file=None, google_api_key="key", jpeg_quality=60, log_level="WARNING"
        )

        pipeline = DeckPipeline.from_settings(settings)

        assert isinstance(pipeline.adapter, GoogleAdapter)
        assert pipeline.config.jpeg_quality == 60
        assert pipeline.rasterizer.jpeg_quality == 60
        assert pipeline.status == PipelineStatus.IDLE
        assert logging.getLogger("pdf2deck_core.controller").level == logging.WARNING

        # restore
        DeckPipeline.from_settings(
            Settings(_env_file=None, google_api_key="key", log_level="INFO")
        )

    def test_missing_key(self) -> None:
        with pytest.raises(ConfigurationError):
            DeckPipeline.from_settings(Settings(_env_file=None, google_api_key=""))
