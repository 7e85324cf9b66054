"""Google Gemini model adapter."""

import asyncio
import base64
from typing import Any

from pdf2deck_core.errors import AIResponseError
from pdf2deck_core.model_adapters.base import (
    ANALYSIS_RESPONSE_SCHEMA,
    BaseModelAdapter,
    build_analysis_prompt,
    parse_analysis_response,
)
from pdf2deck_core.schemas.analysis import RawAnalysis
from pdf2deck_core.utils.logging import get_logger
from pdf2deck_core.utils.retry import RateLimitError, format_exception, with_retry

logger = get_logger(__name__)

DEFAULT_MODEL = "gemini-3-flash-preview"

# Whole-document analysis of long PDFs is slow
DEFAULT_TIMEOUT = 300.0


def _wrap_google_error(e: Exception) -> Exception:
    """Convert Google API errors to standard exceptions for retry handling.

    Args:
        e: Original exception from Google API

    Returns:
        Wrapped exception (RateLimitError for rate limits, original otherwise)
    """
    error_str = str(e).lower()
    error_type = type(e).__name__

    if any(
        indicator in error_str
        for indicator in [
            "resource exhausted",
            "quota",
            "rate limit",
            "429",
            "too many requests",
        ]
    ) or error_type in ("ResourceExhausted", "TooManyRequests"):
        return RateLimitError(f"Google API rate limit: {e}")

    if any(
        indicator in error_str
        for indicator in ["503", "500", "internal", "unavailable", "deadline"]
    ) or error_type in (
        "ServiceUnavailable",
        "InternalServerError",
        "DeadlineExceeded",
    ):
        return ConnectionError(f"Google API server error: {e}")

    return e


def _response_text(response: Any, operation_name: str) -> str:
    """Extract the text of the first candidate, or "" if there is none."""
    if not response.candidates:
        logger.warning(f"{operation_name}: No candidates in response")
        return ""
    candidate = response.candidates[0]
    # 1=STOP is the normal finish; MAX_TOKENS usually means truncated JSON
    finish_reason = getattr(candidate, "finish_reason", None)
    if finish_reason and finish_reason != 1:
        logger.warning(
            f"{operation_name}: Response finished with reason {finish_reason}"
        )
    if not candidate.content or not candidate.content.parts:
        logger.warning(
            f"{operation_name}: No content parts in response (finish_reason={finish_reason})"
        )
        return ""
    return "".join(
        part.text for part in candidate.content.parts if hasattr(part, "text")
    )


class GoogleAdapter(BaseModelAdapter):
    """Adapter for Google Gemini models."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 1,
        narration_language: str = "English",
    ):
        """Initialize the Google Gemini adapter.

        Args:
            api_key: Google AI API key
            model: Model that reads the PDF and writes the narration
            timeout: Request timeout in seconds
            max_retries: Total attempts for transient failures (1 = no retry)
            narration_language: Language of titles and speaker notes
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self.narration_language = narration_language

        self._client: Any = None
        logger.info(f"Initialized Google adapter (model={model})")

    @property
    def client(self) -> Any:
        """Lazy-load the Google Generative AI client."""
        if self._client is None:
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._client = genai
        return self._client

    async def _call_api(
        self,
        contents: list[Any],
        operation_name: str,
        response_schema: dict[str, Any] | None = None,
    ) -> str:
        """Call the Gemini API under the shared limiter and timeout."""
        generation_config: dict[str, Any] = {"response_mime_type": "application/json"}
        if response_schema is not None:
            generation_config["response_schema"] = response_schema

        async def _make_request() -> str:
            try:
                model_instance = self.client.GenerativeModel(
                    model_name=self.model,
                    generation_config=generation_config,
                )
                response = await asyncio.to_thread(
                    model_instance.generate_content,
                    contents,
                )
                return _response_text(response, operation_name)
            except Exception as e:
                raise _wrap_google_error(e) from e

        logger.debug(f"Starting {operation_name} with model {self.model}")
        result = await with_retry(
            _make_request,
            max_attempts=self.max_retries,
            timeout=self.timeout,
            operation_name=operation_name,
        )
        logger.debug(f"Completed {operation_name}")
        return result

    async def analyze_document(
        self,
        pdf_data: bytes,
        page_count: int,
    ) -> RawAnalysis:
        """Send the whole PDF to Gemini and parse the narration it returns."""
        logger.info(
            f"Analyzing document ({len(pdf_data)} bytes, {page_count} pages)"
        )

        document_part = {
            "mime_type": "application/pdf",
            "data": base64.b64encode(pdf_data).decode("utf-8"),
        }
        contents = [
            document_part,
            build_analysis_prompt(page_count, self.narration_language),
        ]

        try:
            content = await self._call_api(
                contents=contents,
                operation_name="analyze_document",
                response_schema=ANALYSIS_RESPONSE_SCHEMA,
            )
        except Exception as e:
            raise AIResponseError(
                f"Model request failed: {format_exception(e)}"
            ) from e

        analysis = parse_analysis_response(content)
        logger.info(
            f"Model described {len(analysis.slides)} of {page_count} pages"
        )
        return analysis
