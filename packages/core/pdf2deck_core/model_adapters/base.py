"""Base model adapter interface."""

import json
from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError

from pdf2deck_core.errors import AIResponseError
from pdf2deck_core.schemas.analysis import RawAnalysis, RawSlide
from pdf2deck_core.utils.logging import get_logger

logger = get_logger(__name__)

ANALYSIS_PROMPT = """Analyze this PDF document page by page in detail.

REQUIRED CONDITIONS:
1. The PDF has exactly {page_count} pages. Analyze every one of them without exception.
2. The "slides" array in your output must contain exactly {page_count} elements, one per page.
3. Assign "pageIndex" sequentially starting at 0 (the first page) up to {last_index}. Use 0-based numbering, not printed page numbers.
4. Do not merge pages and do not skip pages.
5. For each page, write a title based on that page's content and detailed speaker notes that a presenter could read aloud as-is.
6. Write titles and speaker notes in {language}, in a clear and courteous register the audience can easily follow.

Respond with a JSON object in this format:
{{
  "presentationTitle": "A comprehensive title for the whole document",
  "summary": "A concise summary of the whole content",
  "slides": [
    {{
      "pageIndex": 0,
      "title": "Title summarizing page 1",
      "notes": "Detailed script the presenter reads for this page"
    }}
  ]
}}
"""

# OpenAPI-style schema understood by structured-output model APIs
ANALYSIS_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "presentationTitle": {"type": "STRING"},
        "summary": {"type": "STRING"},
        "slides": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "pageIndex": {
                        "type": "INTEGER",
                        "description": "0-based index of the page",
                    },
                    "title": {"type": "STRING"},
                    "notes": {"type": "STRING", "description": "Detailed speaker notes"},
                },
                "required": ["pageIndex", "title", "notes"],
            },
        },
    },
    "required": ["presentationTitle", "summary", "slides"],
}


def build_analysis_prompt(page_count: int, language: str = "English") -> str:
    """Build the instruction sent alongside the document."""
    if page_count < 1:
        raise ValueError("page_count must be at least 1")
    return ANALYSIS_PROMPT.format(
        page_count=page_count,
        last_index=page_count - 1,
        language=language,
    )


def _strip_code_fence(text: str) -> str:
    if not text.startswith("```"):
        return text
    lines = text.split("\n")
    if len(lines) >= 2 and lines[-1].strip() == "```":
        lines = lines[1:-1]
    else:
        lines = lines[1:]
    return "\n".join(lines)


def parse_analysis_response(content: str | None) -> RawAnalysis:
    """Parse the model's JSON text into an untrusted ``RawAnalysis``.

    Entries of ``slides`` that are not objects or fail validation are dropped;
    page indices are left exactly as the model sent them.

    Raises:
        AIResponseError: If the content is empty, not JSON or not an object
    """
    if not content or not content.strip():
        raise AIResponseError("The model returned an empty response")

    text = _strip_code_fence(content.strip())
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON response: {e}. Content: {content[:200]}...")
        raise AIResponseError(f"The model returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise AIResponseError(
            f"Expected a JSON object from the model, got {type(data).__name__}"
        )

    raw_slides = data.get("slides")
    if raw_slides is None:
        raw_slides = []
    elif not isinstance(raw_slides, list):
        raise AIResponseError(
            f"Expected 'slides' to be a list, got {type(raw_slides).__name__}"
        )

    slides: list[RawSlide] = []
    for position, item in enumerate(raw_slides):
        if not isinstance(item, dict):
            logger.warning(f"Dropping slide entry {position}: not an object")
            continue
        try:
            slides.append(RawSlide.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Dropping slide entry {position}: {e.error_count()} invalid fields")

    return RawAnalysis(
        presentation_title=data.get("presentationTitle"),
        summary=data.get("summary"),
        slides=slides,
    )


class BaseModelAdapter(ABC):
    """Abstract base class for model adapters."""

    @abstractmethod
    async def analyze_document(
        self,
        pdf_data: bytes,
        page_count: int,
    ) -> RawAnalysis:
        """Ask the model for a title, summary and per-page narration.

        Args:
            pdf_data: Raw PDF bytes
            page_count: Number of pages the response must cover

        Returns:
            The untrusted analysis as returned by the model

        Raises:
            AIResponseError: If the model response is empty or unparseable
        """
        pass
