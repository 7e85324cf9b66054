"""Document and rendered page schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RenderedPage(BaseModel):
    """A single PDF page rasterized to an image."""

    page_index: int = Field(..., ge=0, description="0-based page index")
    image_data: bytes = Field(..., description="Encoded image bytes")
    mime_type: str = Field("image/jpeg", description="MIME type of image_data")
    width: int = Field(0, ge=0, description="Image width in pixels")
    height: int = Field(0, ge=0, description="Image height in pixels")
    model_config = ConfigDict(frozen=True)


class Document(BaseModel):
    """A PDF document selected for conversion."""

    name: str = Field(..., description="Display name, used when the model gives no title")
    filename: str | None = Field(None, description="Original file name")
    pdf_data: bytes = Field(..., description="Raw PDF bytes")
    page_count: int = Field(0, ge=0, description="Number of pages")
