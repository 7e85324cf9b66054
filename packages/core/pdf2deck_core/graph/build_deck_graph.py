"""Build the deck processing graph.

Pipeline Flow:
    ingest -> render -> analyze -> reconcile -> (output)

Stages run strictly in sequence; a stage raises on failure, which aborts the
remaining stages. The graph produces:
- document: the loaded PDF and its page count
- pages: rendered page images in page order
- raw_analysis: the untrusted model response
- result: the reconciled AnalysisResult ready for review and export
"""

from typing import TypedDict

from langgraph.graph import END, StateGraph

from pdf2deck_core.graph.config import DeckConfig
from pdf2deck_core.graph.nodes.analyze import create_analyze_node
from pdf2deck_core.graph.nodes.ingest import create_ingest_node
from pdf2deck_core.graph.nodes.reconcile import create_reconcile_node
from pdf2deck_core.graph.nodes.render import create_render_node
from pdf2deck_core.graph.progress import ProgressReporter
from pdf2deck_core.model_adapters.base import BaseModelAdapter
from pdf2deck_core.rasterizer import PdfRasterizer
from pdf2deck_core.schemas.analysis import AnalysisResult, RawAnalysis
from pdf2deck_core.schemas.document import Document, RenderedPage
from pdf2deck_core.utils.logging import get_logger

logger = get_logger(__name__)


class DeckPipelineState(TypedDict, total=False):
    """State passed through the deck pipeline."""

    # Input
    pdf_path: str
    pdf_data: bytes
    filename: str
    deck_name: str

    # Processing state
    document: Document
    pages: list[RenderedPage]
    raw_analysis: RawAnalysis

    # Output
    result: AnalysisResult

    # Metadata
    current_step: str
    progress: int


def build_deck_graph(
    adapter: BaseModelAdapter,
    rasterizer: PdfRasterizer | None = None,
    config: DeckConfig | None = None,
    reporter: ProgressReporter | None = None,
) -> StateGraph:
    """Build the PDF to narrated deck pipeline.

    Args:
        adapter: Model adapter for the analysis call
        rasterizer: Page rasterizer (defaults to the poppler-backed one)
        config: Optional pipeline configuration
        reporter: Progress reporter for this run

    Returns:
        Compiled StateGraph ready for invocation
    """
    resolved_config = config or DeckConfig()
    resolved_rasterizer = rasterizer or PdfRasterizer(
        jpeg_quality=resolved_config.jpeg_quality
    )
    logger.debug(
        f"Building deck pipeline (render_dpi={resolved_config.render_dpi}, "
        f"max_render_concurrency={resolved_config.max_render_concurrency})"
    )

    graph = StateGraph(DeckPipelineState)

    graph.add_node("ingest", create_ingest_node(resolved_rasterizer, reporter))
    graph.add_node(
        "render", create_render_node(resolved_rasterizer, resolved_config, reporter)
    )
    graph.add_node("analyze", create_analyze_node(adapter, reporter))
    graph.add_node("reconcile", create_reconcile_node(resolved_config, reporter))

    graph.set_entry_point("ingest")
    graph.add_edge("ingest", "render")
    graph.add_edge("render", "analyze")
    graph.add_edge("analyze", "reconcile")
    graph.add_edge("reconcile", END)

    return graph.compile()
