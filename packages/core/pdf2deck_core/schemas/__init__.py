"""Data schemas for the pipeline."""

from pdf2deck_core.schemas.analysis import AnalysisResult, RawAnalysis, RawSlide, Slide
from pdf2deck_core.schemas.document import Document, RenderedPage

__all__ = [
    # Input
    "Document",
    "RenderedPage",
    # Untrusted model output
    "RawAnalysis",
    "RawSlide",
    # Reconciled output
    "AnalysisResult",
    "Slide",
]
