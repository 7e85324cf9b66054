"""pdf2deck-core: Turn a PDF into a narrated slide deck.

Every PDF page becomes a full-slide image and a Gemini model writes a title
and speaker notes per page, which are stored as presenter notes.

    >>> from pdf2deck_core import DeckPipeline
    >>> pipeline = DeckPipeline.from_settings()
    >>> pipeline.select_path("lecture.pdf")
    >>> result = await pipeline.run()
    >>> pipeline.export("out/")
"""

from pdf2deck_core.controller import DeckPipeline, PipelineStatus
from pdf2deck_core.errors import (
    AIResponseError,
    AssemblyError,
    LoadError,
    PipelineError,
    RenderError,
)
from pdf2deck_core.graph import DeckConfig, build_deck_graph
from pdf2deck_core.graph.nodes.reconcile import reconcile_slides
from pdf2deck_core.model_adapters import build_model_adapter
from pdf2deck_core.schemas import AnalysisResult, Slide
from pdf2deck_core.settings import Settings

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "DeckPipeline",
    "PipelineStatus",
    "DeckConfig",
    "Settings",
    "build_deck_graph",
    "build_model_adapter",
    "reconcile_slides",
    # Schemas
    "AnalysisResult",
    "Slide",
    # Errors
    "AIResponseError",
    "AssemblyError",
    "LoadError",
    "PipelineError",
    "RenderError",
]
