"""Shared fixtures and fakes for the test suite."""

from io import BytesIO
from typing import Any

import pytest
from PIL import Image

from pdf2deck_core.errors import AIResponseError, RenderError
from pdf2deck_core.model_adapters.base import BaseModelAdapter
from pdf2deck_core.rasterizer import PdfRasterizer
from pdf2deck_core.schemas.analysis import RawAnalysis, RawSlide
from pdf2deck_core.schemas.document import RenderedPage


def make_jpeg(width: int = 160, height: int = 90, color: str = "white") -> bytes:
    """Encode a solid-color JPEG."""
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="JPEG")
    return buffer.getvalue()


def make_pdf(page_count: int = 3, size: tuple[int, int] = (320, 180)) -> bytes:
    """Build a real multi-page PDF with Pillow."""
    pages = [Image.new("RGB", size, "white") for _ in range(page_count)]
    buffer = BytesIO()
    pages[0].save(buffer, format="PDF", save_all=True, append_images=pages[1:])
    return buffer.getvalue()


def make_pages(count: int, width: int = 160, height: int = 90) -> list[RenderedPage]:
    """Rendered pages with distinct images."""
    colors = ["red", "green", "blue", "yellow", "white", "black"]
    return [
        RenderedPage(
            page_index=i,
            image_data=make_jpeg(width, height, colors[i % len(colors)]),
            width=width,
            height=height,
        )
        for i in range(count)
    ]


class FakeRasterizer(PdfRasterizer):
    """Rasterizer that never touches poppler."""

    def __init__(
        self,
        page_count: int = 3,
        fail_on_page: int | None = None,
        size: tuple[int, int] = (160, 90),
    ):
        super().__init__()
        self._page_count = page_count
        self.fail_on_page = fail_on_page
        self.size = size
        self.rendered: list[int] = []

    def page_count(self, pdf_data: bytes) -> int:
        return self._page_count

    def render_page(
        self, pdf_data: bytes, page_index: int, scale: float = 1.5
    ) -> RenderedPage:
        if page_index == self.fail_on_page:
            raise RenderError(
                f"Failed to render page {page_index + 1}: corrupt", page_index=page_index
            )
        self.rendered.append(page_index)
        width, height = self.size
        return RenderedPage(
            page_index=page_index,
            image_data=make_jpeg(width, height),
            width=width,
            height=height,
        )


class FakeAdapter(BaseModelAdapter):
    """Deterministic adapter returning a canned analysis."""

    def __init__(
        self,
        slides: list[dict[str, Any]] | None = None,
        presentation_title: str = "Test Deck",
        summary: str = "A summary",
        error: Exception | None = None,
    ):
        self.slides = slides or []
        self.presentation_title = presentation_title
        self.summary = summary
        self.error = error
        self.calls: list[tuple[int, int]] = []

    async def analyze_document(self, pdf_data: bytes, page_count: int) -> RawAnalysis:
        self.calls.append((len(pdf_data), page_count))
        if self.error is not None:
            raise self.error
        return RawAnalysis(
            presentation_title=self.presentation_title,
            summary=self.summary,
            slides=[RawSlide.model_validate(item) for item in self.slides],
        )


@pytest.fixture
def pdf_bytes() -> bytes:
    """A real three-page PDF."""
    return make_pdf(3)


@pytest.fixture
def empty_response_adapter() -> FakeAdapter:
    """Adapter whose model call fails with an empty response."""
    return FakeAdapter(error=AIResponseError("The model returned an empty response"))
