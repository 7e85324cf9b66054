"""Ingest node: validate the PDF and count its pages."""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pdf2deck_core.errors import LoadError
from pdf2deck_core.graph.progress import ProgressReporter
from pdf2deck_core.rasterizer import PdfRasterizer
from pdf2deck_core.schemas.document import Document
from pdf2deck_core.utils.logging import get_logger, log_stage
from pdf2deck_core.utils.pdf import get_pdf_version, validate_pdf

logger = get_logger(__name__)

DEFAULT_DECK_NAME = "Untitled Presentation"


def _load_pdf_data(state: dict[str, Any]) -> tuple[bytes, str | None]:
    """Return the PDF bytes and file name from either pdf_data or pdf_path."""
    pdf_data = state.get("pdf_data")
    filename = state.get("filename")
    pdf_path = state.get("pdf_path")

    if not pdf_data and pdf_path:
        path = Path(pdf_path)
        if not path.exists():
            raise LoadError(f"PDF not found: {pdf_path}")
        try:
            pdf_data = path.read_bytes()
        except OSError as e:
            raise LoadError(f"Failed to read PDF: {e}") from e
        logger.info(f"Read PDF from {pdf_path} ({len(pdf_data)} bytes)")
        filename = filename or path.name

    if not pdf_data:
        raise LoadError("No PDF data provided")
    return pdf_data, filename


def create_ingest_node(
    rasterizer: PdfRasterizer,
    reporter: ProgressReporter | None = None,
) -> Callable[[dict[str, Any]], Any]:
    """Create the ingest node.

    Args:
        rasterizer: Page rasterizer used to count pages
        reporter: Run-scoped progress reporter

    Returns:
        Node function (async, page counting runs in a thread)
    """

    async def ingest_node(state: dict[str, Any]) -> dict[str, Any]:
        """Load the PDF and create the document object.

        Raises:
            LoadError: If the input is missing, unreadable or not a PDF
        """
        if reporter:
            reporter.report("ingest", 5, "Loading PDF...")

        with log_stage(logger, "ingest"):
            pdf_data, filename = _load_pdf_data(state)
            validate_pdf(pdf_data)
            page_count = await asyncio.to_thread(rasterizer.page_count, pdf_data)

        deck_name = state.get("deck_name") or (
            Path(filename).stem if filename else DEFAULT_DECK_NAME
        )
        document = Document(
            name=deck_name,
            filename=filename,
            pdf_data=pdf_data,
            page_count=page_count,
        )
        logger.info(
            f"Loaded '{deck_name}': {page_count} pages, "
            f"PDF version {get_pdf_version(pdf_data) or 'unknown'}"
        )

        return {
            **state,
            "document": document,
            "current_step": "ingest",
            "progress": 5,
        }

    return ingest_node
