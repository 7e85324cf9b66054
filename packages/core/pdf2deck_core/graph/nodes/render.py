"""Render node: rasterize every PDF page in page order."""

import asyncio
from collections.abc import Callable
from typing import Any

from pdf2deck_core.graph.config import DeckConfig
from pdf2deck_core.graph.progress import ProgressReporter
from pdf2deck_core.rasterizer import PdfRasterizer
from pdf2deck_core.schemas.document import Document, RenderedPage
from pdf2deck_core.utils.logging import get_logger, log_stage

logger = get_logger(__name__)

# Rendering covers this slice of the overall progress bar
PROGRESS_START = 10
PROGRESS_SPAN = 30


async def render_pages(
    rasterizer: PdfRasterizer,
    document: Document,
    config: DeckConfig,
    on_page_done: Callable[[int, int], None] | None = None,
) -> list[RenderedPage]:
    """Render all pages of ``document`` and return them in page order.

    With ``max_render_concurrency`` above 1 pages render in a bounded thread
    pool. ``on_page_done(completed, total)`` is called with a running count,
    so progress stays monotonic whatever order pages finish in.

    Raises:
        RenderError: If any page fails; remaining renders are cancelled
    """
    total = document.page_count
    pdf_data = document.pdf_data
    scale = config.render_scale
    pages: list[RenderedPage | None] = [None] * total

    if config.max_render_concurrency <= 1:
        for index in range(total):
            pages[index] = await asyncio.to_thread(
                rasterizer.render_page, pdf_data, index, scale
            )
            if on_page_done:
                on_page_done(index + 1, total)
        return [page for page in pages if page is not None]

    semaphore = asyncio.Semaphore(config.max_render_concurrency)
    completed = 0

    async def _render_one(index: int) -> None:
        nonlocal completed
        async with semaphore:
            page = await asyncio.to_thread(
                rasterizer.render_page, pdf_data, index, scale
            )
        pages[index] = page
        completed += 1
        if on_page_done:
            on_page_done(completed, total)

    tasks = [asyncio.create_task(_render_one(index)) for index in range(total)]
    try:
        await asyncio.gather(*tasks)
    except Exception:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    return sorted(
        (page for page in pages if page is not None),
        key=lambda page: page.page_index,
    )


def create_render_node(
    rasterizer: PdfRasterizer,
    config: DeckConfig | None = None,
    reporter: ProgressReporter | None = None,
) -> Callable[[dict[str, Any]], Any]:
    """Create a render node.

    Args:
        rasterizer: Page rasterizer
        config: Rendering configuration
        reporter: Run-scoped progress reporter

    Returns:
        Node function (async to avoid blocking the event loop)
    """
    resolved_config = config or DeckConfig()

    def _on_page_done(completed: int, total: int) -> None:
        if reporter:
            reporter.report(
                "render",
                PROGRESS_START + completed / total * PROGRESS_SPAN,
                f"Rendering pages... ({completed}/{total})",
            )

    async def render_node(state: dict[str, Any]) -> dict[str, Any]:
        """Render PDF pages to images.

        Raises:
            RenderError: If a page fails to render
        """
        document: Document = state["document"]
        if reporter:
            reporter.report(
                "render", PROGRESS_START, "Rendering each PDF page as an image..."
            )

        with log_stage(logger, "render"):
            pages = await render_pages(
                rasterizer, document, resolved_config, _on_page_done
            )

        logger.info(
            f"Rendered {len(pages)} pages at {resolved_config.render_dpi} DPI"
        )
        return {
            **state,
            "pages": pages,
            "current_step": "render",
            "progress": PROGRESS_START + PROGRESS_SPAN,
        }

    return render_node
