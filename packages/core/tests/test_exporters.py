"""Tests for PPTX export."""

from io import BytesIO
from pathlib import Path

import pytest
from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE
from pptx.util import Inches

from conftest import make_jpeg
from pdf2deck_core.errors import AssemblyError
from pdf2deck_core.exporters.pptx import build_presentation, contain_fit, export_pptx
from pdf2deck_core.schemas.analysis import AnalysisResult, Slide
from pdf2deck_core.utils.filenames import safe_filename


def make_result(
    count: int = 3,
    title: str = "Quarterly Review",
    image: bytes | None = None,
) -> AnalysisResult:
    return AnalysisResult(
        presentation_title=title,
        summary="Summary",
        slides=[
            Slide(
                page_index=i,
                title=f"Title {i}",
                notes=f"Notes for page {i}",
                image_data=image if image is not None else make_jpeg(400, 300),
            )
            for i in range(count)
        ],
    )


class TestContainFit:
    """Tests for contain-fit geometry."""

    def test_wide_image_letterboxed(self) -> None:
        left, top, width, height = contain_fit(2000, 500, 1600, 900)

        assert (width, height) == (1600, 400)
        assert left == 0
        assert top == 250

    def test_tall_image_pillarboxed(self) -> None:
        left, top, width, height = contain_fit(300, 600, 1600, 900)

        assert (width, height) == (450, 900)
        assert left == 575
        assert top == 0

    def test_same_aspect_fills_box(self) -> None:
        assert contain_fit(160, 90, 1600, 900) == (0, 0, 1600, 900)

    def test_invalid_dimensions(self) -> None:
        with pytest.raises(ValueError):
            contain_fit(0, 10, 100, 100)


class TestSafeFilename:
    """Tests for filename sanitization."""

    def test_illegal_characters_replaced(self) -> None:
        assert safe_filename("Q3: Results/Plan") == "Q3- Results-Plan.pptx"

    def test_all_illegal_characters(self) -> None:
        assert safe_filename('a/b\\c?d%e*f:g|h"i<j>k') == "a-b-c-d-e-f-g-h-i-j-k.pptx"

    def test_length_capped(self) -> None:
        name = safe_filename("x" * 120)

        assert name == "x" * 50 + ".pptx"

    def test_custom_length(self) -> None:
        assert safe_filename("abcdef", max_length=3) == "abc.pptx"

    def test_empty_falls_back(self) -> None:
        assert safe_filename("") == "presentation.pptx"
        assert safe_filename(None) == "presentation.pptx"
        assert safe_filename("   ") == "presentation.pptx"

    def test_unicode_kept(self) -> None:
        assert safe_filename("発表資料") == "発表資料.pptx"


class TestBuildPresentation:
    """Tests for presentation assembly."""

    def test_one_slide_per_page_with_notes(self) -> None:
        content = build_presentation(make_result(3))
        prs = Presentation(BytesIO(content))

        assert len(prs.slides) == 3
        notes = [s.notes_slide.notes_text_frame.text for s in prs.slides]
        assert notes == ["Notes for page 0", "Notes for page 1", "Notes for page 2"]

    def test_slide_is_16_by_9(self) -> None:
        prs = Presentation(BytesIO(build_presentation(make_result(1))))

        assert prs.slide_width == Inches(10)
        assert prs.slide_height == Inches(5.625)

    def test_only_picture_on_slide(self) -> None:
        """Titles and notes never appear on the visible slide."""
        prs = Presentation(BytesIO(build_presentation(make_result(2))))

        for slide in prs.slides:
            shapes = list(slide.shapes)
            assert len(shapes) == 1
            assert shapes[0].shape_type == MSO_SHAPE_TYPE.PICTURE
            assert not shapes[0].has_text_frame

    def test_image_contain_fit_and_centered(self) -> None:
        # 4:3 image on a 16:9 slide is pillarboxed
        prs = Presentation(BytesIO(build_presentation(make_result(1))))
        picture = list(prs.slides[0].shapes)[0]

        assert picture.height == prs.slide_height
        assert picture.width < prs.slide_width
        assert picture.top == 0
        assert abs(picture.left * 2 + picture.width - prs.slide_width) <= 1
        assert abs(picture.width / picture.height - 4 / 3) < 0.01

    def test_slides_sorted_by_page_index(self) -> None:
        result = make_result(3)
        result.slides.reverse()

        prs = Presentation(BytesIO(build_presentation(result)))

        notes = [s.notes_slide.notes_text_frame.text for s in prs.slides]
        assert notes == ["Notes for page 0", "Notes for page 1", "Notes for page 2"]

    def test_no_slides_raises(self) -> None:
        with pytest.raises(AssemblyError, match="No slides"):
            build_presentation(make_result(0))

    def test_all_images_broken_raises(self) -> None:
        with pytest.raises(AssemblyError, match="No page image"):
            build_presentation(make_result(2, image=b"not an image"))

    def test_single_broken_image_keeps_notes(self) -> None:
        result = make_result(2)
        broken = result.slides[1].model_copy(update={"image_data": b"garbage"})
        result.slides[1] = broken

        prs = Presentation(BytesIO(build_presentation(result)))

        assert len(prs.slides) == 2
        assert len(list(prs.slides[1].shapes)) == 0
        assert prs.slides[1].notes_slide.notes_text_frame.text == "Notes for page 1"


class TestExportPptx:
    """Tests for writing the file."""

    def test_export_uses_sanitized_title(self, tmp_path: Path) -> None:
        path = export_pptx(make_result(1, title="Q3: Results/Plan"), tmp_path)

        assert path.name == "Q3- Results-Plan.pptx"
        assert path.exists()
        assert len(Presentation(str(path)).slides) == 1

    def test_export_creates_directory(self, tmp_path: Path) -> None:
        path = export_pptx(make_result(1), tmp_path / "nested" / "out")

        assert path.parent == tmp_path / "nested" / "out"
        assert path.exists()

    def test_explicit_filename(self, tmp_path: Path) -> None:
        path = export_pptx(make_result(1), tmp_path, filename="deck.pptx")

        assert path.name == "deck.pptx"

    def test_write_failure_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(AssemblyError, match="Failed to write"):
            export_pptx(make_result(1), blocker / "sub")
