"""Analyze node: ask the model to narrate the document."""

from collections.abc import Callable
from typing import Any

from pdf2deck_core.graph.progress import ProgressReporter
from pdf2deck_core.model_adapters.base import BaseModelAdapter
from pdf2deck_core.schemas.document import Document
from pdf2deck_core.utils.logging import get_logger, log_stage

logger = get_logger(__name__)


def create_analyze_node(
    adapter: BaseModelAdapter,
    reporter: ProgressReporter | None = None,
) -> Callable[[dict[str, Any]], Any]:
    """Create an analyze node with the given model adapter.

    Args:
        adapter: Model adapter for the document call
        reporter: Run-scoped progress reporter

    Returns:
        Node function
    """

    async def analyze_node(state: dict[str, Any]) -> dict[str, Any]:
        """Send the PDF to the model and keep its raw answer.

        Raises:
            AIResponseError: If the model response is empty or unparseable
        """
        document: Document = state["document"]
        if reporter:
            reporter.report("analyze", 50, "AI is analyzing the document in detail...")

        with log_stage(logger, "analyze"):
            raw_analysis = await adapter.analyze_document(
                pdf_data=document.pdf_data,
                page_count=document.page_count,
            )

        return {
            **state,
            "raw_analysis": raw_analysis,
            "current_step": "analyze",
            "progress": 50,
        }

    return analyze_node
