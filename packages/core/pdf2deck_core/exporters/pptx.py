"""PPTX export for narrated decks.

Each slide shows only the page image, scaled to fit inside a 16:9 slide
without cropping or stretching and centered on it. The narration goes into
the presenter notes; nothing is written on the visible slide.
"""

from io import BytesIO
from pathlib import Path

from PIL import Image
from pptx import Presentation
from pptx.util import Emu, Inches

from pdf2deck_core.errors import AssemblyError
from pdf2deck_core.graph.config import DeckConfig
from pdf2deck_core.schemas.analysis import AnalysisResult, Slide
from pdf2deck_core.utils.filenames import safe_filename
from pdf2deck_core.utils.logging import get_logger

logger = get_logger(__name__)

# Index of the "Blank" layout in the default template
BLANK_LAYOUT_INDEX = 6


def contain_fit(
    image_width: int, image_height: int, box_width: int, box_height: int
) -> tuple[int, int, int, int]:
    """Fit an image inside a box, preserving its aspect ratio.

    Returns:
        (left, top, width, height) of the image, centered in the box
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError("Image dimensions must be positive")

    scale = min(box_width / image_width, box_height / image_height)
    width = min(box_width, round(image_width * scale))
    height = min(box_height, round(image_height * scale))
    left = (box_width - width) // 2
    top = (box_height - height) // 2
    return left, top, width, height


def _add_page_image(pptx_slide, slide: Slide, box_width: int, box_height: int) -> None:
    with Image.open(BytesIO(slide.image_data)) as image:
        image_width, image_height = image.size

    left, top, width, height = contain_fit(
        image_width, image_height, box_width, box_height
    )
    pptx_slide.shapes.add_picture(
        BytesIO(slide.image_data),
        Emu(left),
        Emu(top),
        width=Emu(width),
        height=Emu(height),
    )


def build_presentation(
    result: AnalysisResult,
    config: DeckConfig | None = None,
) -> bytes:
    """Assemble the presentation and return the .pptx bytes.

    Args:
        result: Reconciled analysis
        config: Slide size configuration

    Returns:
        The .pptx file content

    Raises:
        AssemblyError: If there are no slides or no page image could be placed
    """
    resolved_config = config or DeckConfig()
    # Slides may have been edited during review, so order again here
    slides = result.ordered_slides()
    if not slides:
        raise AssemblyError("No slides to export")

    prs = Presentation()
    prs.slide_width = Inches(resolved_config.slide_width_in)
    prs.slide_height = Inches(resolved_config.slide_height_in)
    box_width = int(prs.slide_width)
    box_height = int(prs.slide_height)
    layout = prs.slide_layouts[BLANK_LAYOUT_INDEX]

    failed_pages: list[int] = []
    for slide in slides:
        pptx_slide = prs.slides.add_slide(layout)
        try:
            _add_page_image(pptx_slide, slide, box_width, box_height)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not place image for page {slide.page_index + 1}: {e}")
            failed_pages.append(slide.page_index)

        pptx_slide.notes_slide.notes_text_frame.text = slide.notes

    if len(failed_pages) == len(slides):
        raise AssemblyError("No page image could be placed on any slide")

    buffer = BytesIO()
    prs.save(buffer)
    logger.info(
        f"Assembled {len(slides)} slides ({len(failed_pages)} without image)"
    )
    return buffer.getvalue()


def export_pptx(
    result: AnalysisResult,
    output_dir: str | Path,
    config: DeckConfig | None = None,
    filename: str | None = None,
) -> Path:
    """Write the presentation into ``output_dir``.

    Args:
        result: Reconciled analysis
        output_dir: Directory to write into (created if missing)
        config: Slide size and filename configuration
        filename: Explicit file name; derived from the title when omitted

    Returns:
        Path to the written .pptx file

    Raises:
        AssemblyError: If assembly or the file write fails
    """
    resolved_config = config or DeckConfig()
    content = build_presentation(result, resolved_config)

    name = filename or safe_filename(
        result.presentation_title,
        max_length=resolved_config.filename_max_length,
        default=resolved_config.default_filename,
    )
    path = Path(output_dir) / name
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    except OSError as e:
        raise AssemblyError(f"Failed to write {path}: {e}") from e

    logger.info(f"Exported presentation to {path}")
    return path
