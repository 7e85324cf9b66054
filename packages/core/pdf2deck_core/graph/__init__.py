"""LangGraph pipeline components."""

from pdf2deck_core.graph.build_deck_graph import DeckPipelineState, build_deck_graph
from pdf2deck_core.graph.config import DeckConfig
from pdf2deck_core.graph.progress import ProgressReporter, ProgressUpdate

__all__ = [
    "DeckConfig",
    "DeckPipelineState",
    "ProgressReporter",
    "ProgressUpdate",
    "build_deck_graph",
]
