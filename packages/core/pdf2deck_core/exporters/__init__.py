"""Export formats for narrated decks."""

from pdf2deck_core.exporters.pptx import build_presentation, export_pptx

__all__ = ["build_presentation", "export_pptx"]
