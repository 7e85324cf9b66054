"""Model adapters for the document analysis call.

Supported providers:
- Google: Gemini models that accept whole PDFs inline
"""

from pdf2deck_core.model_adapters.base import BaseModelAdapter
from pdf2deck_core.model_adapters.factory import build_model_adapter
from pdf2deck_core.model_adapters.google import GoogleAdapter

__all__ = ["BaseModelAdapter", "GoogleAdapter", "build_model_adapter"]
