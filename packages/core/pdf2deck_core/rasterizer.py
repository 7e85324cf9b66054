"""Page rasterizer: PDF pages to JPEG images.

Pages are addressed 0-based. Page counting uses pdfplumber, rendering uses
pdf2image (poppler) and Pillow for encoding. Both calls block, so the async
pipeline runs them in worker threads.
"""

from io import BytesIO
from typing import Any

from pdf2deck_core.errors import LoadError, RenderError
from pdf2deck_core.schemas.document import RenderedPage
from pdf2deck_core.utils.logging import get_logger

logger = get_logger(__name__)

PAGE_MIME_TYPE = "image/jpeg"


class PdfRasterizer:
    """Adapter around the PDF rendering engine."""

    def __init__(self, jpeg_quality: int = 85):
        self.jpeg_quality = jpeg_quality

    def page_count(self, pdf_data: bytes) -> int:
        """Count the pages of a PDF.

        Raises:
            LoadError: If the data cannot be parsed as a PDF or has no pages
        """
        import pdfplumber

        try:
            with pdfplumber.open(BytesIO(pdf_data)) as pdf:
                count = len(pdf.pages)
        except Exception as e:
            raise LoadError(f"Could not open PDF: {e}") from e

        if count < 1:
            raise LoadError("PDF contains no pages")

        logger.debug(f"PDF has {count} pages")
        return count

    def render_page(
        self, pdf_data: bytes, page_index: int, scale: float = 1.5
    ) -> RenderedPage:
        """Render one page to a JPEG image.

        Args:
            pdf_data: Raw PDF bytes
            page_index: 0-based page number
            scale: Render scale, 1.0 being 72 DPI

        Raises:
            RenderError: If the page does not exist or fails to render
        """
        if page_index < 0:
            raise RenderError(f"Invalid page index {page_index}", page_index=page_index)

        dpi = max(1, round(72 * scale))
        image = self._rasterize(pdf_data, page_index, dpi)

        try:
            if image.mode != "RGB":
                image = image.convert("RGB")
            buffer = BytesIO()
            image.save(buffer, format="JPEG", quality=self.jpeg_quality)
        except (OSError, ValueError) as e:
            raise RenderError(
                f"Failed to encode page {page_index + 1}: {e}", page_index=page_index
            ) from e

        logger.debug(
            f"Rendered page {page_index + 1} at {dpi} DPI ({image.width}x{image.height})"
        )
        return RenderedPage(
            page_index=page_index,
            image_data=buffer.getvalue(),
            mime_type=PAGE_MIME_TYPE,
            width=image.width,
            height=image.height,
        )

    def _rasterize(self, pdf_data: bytes, page_index: int, dpi: int) -> Any:
        from pdf2image import convert_from_bytes

        page_number = page_index + 1
        try:
            images = convert_from_bytes(
                pdf_data,
                dpi=dpi,
                first_page=page_number,
                last_page=page_number,
            )
        except Exception as e:
            raise RenderError(
                f"Failed to render page {page_number}: {e}", page_index=page_index
            ) from e

        if not images:
            raise RenderError(
                f"Page {page_number} does not exist in this PDF", page_index=page_index
            )
        return images[0]
