"""Pipeline nodes.

    - ingest: PDF validation and page count
    - render: PDF pages to images
    - analyze: whole-document narration by the model
    - reconcile: merge model output with the rendered pages
"""

from pdf2deck_core.graph.nodes import analyze, ingest, reconcile, render

__all__ = ["analyze", "ingest", "reconcile", "render"]
