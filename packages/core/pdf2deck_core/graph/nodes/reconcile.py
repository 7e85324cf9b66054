"""Reconcile node: merge the model's page descriptions with the rendered pages.

The rendered pages are the ground truth: the output always holds exactly one
slide per rendered page, in page order. The model output only contributes
titles and notes, and every gap in it is filled with fallback text, so bad
model output degrades the deck instead of failing the run.
"""

from collections.abc import Callable, Sequence
from typing import Any

from pdf2deck_core.graph.config import DeckConfig
from pdf2deck_core.graph.progress import ProgressReporter
from pdf2deck_core.schemas.analysis import AnalysisResult, RawAnalysis, RawSlide, Slide
from pdf2deck_core.schemas.document import Document, RenderedPage
from pdf2deck_core.utils.logging import get_logger, log_stage

logger = get_logger(__name__)

DEFAULT_CONFIG = DeckConfig()


def detect_index_offset(raw_slides: Sequence[RawSlide]) -> int:
    """Guess whether the model numbered pages from 1.

    Heuristic: if the smallest index the model used is exactly 1, every index
    is treated as 1-based. Any other minimum (including 0 or none at all)
    means no shift. This is a guess about model behaviour, not a guarantee.
    """
    indices = [raw.page_index for raw in raw_slides if raw.page_index is not None]
    if indices and min(indices) == 1:
        return 1
    return 0


def _index_raw_slides(
    raw_slides: Sequence[RawSlide], page_count: int
) -> dict[int, RawSlide]:
    """Map normalized page index to the first raw slide that claims it."""
    offset = detect_index_offset(raw_slides)
    if offset:
        logger.info("Model used 1-based page indices, shifting down by one")

    by_index: dict[int, RawSlide] = {}
    dropped: list[int] = []
    for raw in raw_slides:
        if raw.page_index is None:
            continue
        index = raw.page_index - offset
        if not 0 <= index < page_count:
            dropped.append(raw.page_index)
            continue
        # First occurrence wins
        by_index.setdefault(index, raw)

    if dropped:
        logger.warning(f"Ignoring model entries with out-of-range page indices: {dropped}")
    return by_index


def _clean(text: str | None) -> str:
    return text.strip() if text else ""


def reconcile_slides(
    pages: Sequence[RenderedPage],
    raw_slides: Sequence[RawSlide],
    config: DeckConfig = DEFAULT_CONFIG,
) -> list[Slide]:
    """Build one trusted slide per rendered page.

    Args:
        pages: Rendered pages, one per PDF page
        raw_slides: Untrusted page descriptions from the model
        config: Supplies the fallback title and notes

    Returns:
        Slides ordered by page index, exactly one per rendered page
    """
    ordered_pages = sorted(pages, key=lambda page: page.page_index)
    by_index = _index_raw_slides(raw_slides, len(ordered_pages))

    slides: list[Slide] = []
    fallback_pages: list[int] = []
    for position, page in enumerate(ordered_pages):
        raw = by_index.get(position)
        title = _clean(raw.title) if raw else ""
        notes = _clean(raw.notes) if raw else ""
        if not title or not notes:
            fallback_pages.append(position)

        slides.append(
            Slide(
                page_index=position,
                title=title or config.fallback_title(position),
                notes=notes or config.fallback_notes,
                image_data=page.image_data,
                mime_type=page.mime_type,
            )
        )

    if fallback_pages:
        logger.warning(
            f"Used fallback text for {len(fallback_pages)} of {len(slides)} pages: "
            f"{[index + 1 for index in fallback_pages]}"
        )

    return sorted(slides, key=lambda slide: slide.page_index)


def reconcile_analysis(
    document: Document,
    pages: Sequence[RenderedPage],
    raw: RawAnalysis,
    config: DeckConfig = DEFAULT_CONFIG,
) -> AnalysisResult:
    """Reconcile a whole model response into an ``AnalysisResult``."""
    title = _clean(raw.presentation_title) or _clean(
        config.fallback_presentation_title
    ) or document.name
    return AnalysisResult(
        presentation_title=title,
        summary=_clean(raw.summary),
        slides=reconcile_slides(pages, raw.slides, config),
    )


def create_reconcile_node(
    config: DeckConfig | None = None,
    reporter: ProgressReporter | None = None,
) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Create the reconcile node.

    Args:
        config: Fallback configuration
        reporter: Run-scoped progress reporter

    Returns:
        Node function
    """
    resolved_config = config or DEFAULT_CONFIG

    def reconcile_node(state: dict[str, Any]) -> dict[str, Any]:
        """Turn the raw analysis into the reviewed result."""
        if reporter:
            reporter.report("reconcile", 90, "Organizing analysis results...")

        document: Document = state["document"]
        pages: list[RenderedPage] = state.get("pages", [])
        raw: RawAnalysis = state.get("raw_analysis") or RawAnalysis()

        with log_stage(logger, "reconcile"):
            result = reconcile_analysis(document, pages, raw, resolved_config)

        return {
            **state,
            "result": result,
            "current_step": "reconcile",
            "progress": 90,
        }

    return reconcile_node
