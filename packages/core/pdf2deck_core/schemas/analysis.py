"""Model analysis schemas.

``RawSlide`` and ``RawAnalysis`` describe what the model sent back and are
never trusted: every field is optional and indices may be 0- or 1-based,
duplicated or missing. ``Slide`` and ``AnalysisResult`` are only produced by
reconciliation and always describe every rendered page.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _loose_text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


class RawSlide(BaseModel):
    """One page description as returned by the model."""

    page_index: int | None = Field(None, alias="pageIndex")
    title: str | None = None
    notes: str | None = None
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("page_index", mode="before")
    @classmethod
    def _coerce_index(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return None
        if isinstance(value, float):
            return int(value) if value.is_integer() else None
        if isinstance(value, str):
            value = value.strip()
            return int(value) if value.lstrip("-").isdigit() else None
        return value

    @field_validator("title", "notes", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _loose_text(value)


class RawAnalysis(BaseModel):
    """Top-level model response."""

    presentation_title: str = Field("", alias="presentationTitle")
    summary: str = ""
    slides: list[RawSlide] = Field(default_factory=list)
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("presentation_title", "summary", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _loose_text(value) or ""


class Slide(BaseModel):
    """A reconciled slide: one rendered page plus its narration."""

    page_index: int = Field(..., ge=0, description="0-based page index")
    title: str = Field(..., min_length=1)
    notes: str = Field(..., min_length=1, description="Presenter notes")
    image_data: bytes = Field(..., description="Encoded page image")
    mime_type: str = Field("image/jpeg")
    model_config = ConfigDict(frozen=True)


class AnalysisResult(BaseModel):
    """The reviewed and exportable state of one run."""

    presentation_title: str
    summary: str = ""
    slides: list[Slide] = Field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.slides)

    def ordered_slides(self) -> list[Slide]:
        """Return a new list of the slides sorted by page index."""
        return sorted(self.slides, key=lambda slide: slide.page_index)
