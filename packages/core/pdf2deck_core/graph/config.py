"""Configuration values for the deck pipeline."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DeckConfig:
    """Knobs for rendering, reconciliation fallbacks and export."""

    # Rendering
    render_scale: float = 1.5  # 1.0 == 72 DPI
    jpeg_quality: int = 85
    max_render_concurrency: int = 1  # 1 renders pages strictly one after another

    # Reconciliation fallbacks
    fallback_title_template: str = "Page {page_number}"
    fallback_notes: str = (
        "No explanation could be generated for this page. "
        "Please review its content."
    )
    fallback_presentation_title: str | None = None  # None uses the document name

    # Export
    slide_width_in: float = 10.0
    slide_height_in: float = 5.625  # 16:9
    filename_max_length: int = 50
    default_filename: str = "presentation"

    def __post_init__(self) -> None:
        if self.render_scale <= 0:
            raise ValueError("render_scale must be positive")
        if not 1 <= self.jpeg_quality <= 95:
            raise ValueError("jpeg_quality must be between 1 and 95")
        if self.max_render_concurrency < 1:
            raise ValueError("max_render_concurrency must be at least 1")
        if not self.fallback_notes.strip():
            raise ValueError("fallback_notes must not be blank")

    @property
    def render_dpi(self) -> int:
        """DPI passed to the rasterizer for ``render_scale``."""
        return max(1, round(72 * self.render_scale))

    def fallback_title(self, page_index: int) -> str:
        """Placeholder title for a page the model did not describe."""
        return self.fallback_title_template.format(
            page_number=page_index + 1, page_index=page_index
        )
