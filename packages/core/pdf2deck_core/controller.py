"""Pipeline controller: one PDF to one narrated deck.

The controller owns the state of a single run and walks it through

    idle -> rendering -> analyzing -> reconciling -> reviewing -> completed

Any stage failure moves the run to ``error``; a new run has to be started
from scratch. Export is only possible while reviewing, and a failed export
leaves the run in ``reviewing`` so it can be retried.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pdf2deck_core.errors import (
    AssemblyError,
    LoadError,
    PipelineBusyError,
    PipelineError,
    PipelineStateError,
)
from pdf2deck_core.exporters.pptx import export_pptx
from pdf2deck_core.graph.build_deck_graph import build_deck_graph
from pdf2deck_core.graph.config import DeckConfig
from pdf2deck_core.graph.progress import ProgressCallback, ProgressReporter, ProgressUpdate
from pdf2deck_core.model_adapters.base import BaseModelAdapter
from pdf2deck_core.model_adapters.factory import build_model_adapter
from pdf2deck_core.rasterizer import PdfRasterizer
from pdf2deck_core.schemas.analysis import AnalysisResult
from pdf2deck_core.schemas.document import RenderedPage
from pdf2deck_core.settings import Settings
from pdf2deck_core.utils.logging import get_logger, log_exceptions, set_log_level
from pdf2deck_core.utils.pdf import is_pdf_upload, validate_pdf

logger = get_logger(__name__)


class PipelineStatus(str, Enum):
    """Status of a run."""

    IDLE = "idle"
    RENDERING = "rendering"
    ANALYZING = "analyzing"
    RECONCILING = "reconciling"
    REVIEWING = "reviewing"
    COMPLETED = "completed"
    ERROR = "error"


ALLOWED_TRANSITIONS: dict[PipelineStatus, frozenset[PipelineStatus]] = {
    PipelineStatus.IDLE: frozenset({PipelineStatus.RENDERING}),
    PipelineStatus.RENDERING: frozenset(
        {PipelineStatus.ANALYZING, PipelineStatus.ERROR}
    ),
    PipelineStatus.ANALYZING: frozenset(
        {PipelineStatus.RECONCILING, PipelineStatus.ERROR}
    ),
    PipelineStatus.RECONCILING: frozenset(
        {PipelineStatus.REVIEWING, PipelineStatus.ERROR}
    ),
    PipelineStatus.REVIEWING: frozenset(
        {PipelineStatus.COMPLETED, PipelineStatus.ERROR}
    ),
    PipelineStatus.COMPLETED: frozenset(),
    PipelineStatus.ERROR: frozenset(),
}

# Graph step -> run status
STEP_STATUS = {
    "ingest": PipelineStatus.RENDERING,
    "render": PipelineStatus.RENDERING,
    "analyze": PipelineStatus.ANALYZING,
    "reconcile": PipelineStatus.RECONCILING,
}

STATUS_STAGE = {
    PipelineStatus.RENDERING: "render",
    PipelineStatus.ANALYZING: "analyze",
    PipelineStatus.RECONCILING: "reconcile",
    PipelineStatus.REVIEWING: "review",
}


@dataclass
class SelectedFile:
    """A PDF chosen for conversion."""

    data: bytes
    filename: str | None = None


@dataclass
class RunState:
    """Everything belonging to one run; replaced wholesale by a new run."""

    status: PipelineStatus = PipelineStatus.IDLE
    progress: int = 0
    message: str = ""
    failed_stage: str | None = None
    error: str | None = None
    pages: list[RenderedPage] = field(default_factory=list)
    result: AnalysisResult | None = None
    export_path: Path | None = None


class DeckPipeline:
    """Drive the conversion of one selected PDF at a time."""

    def __init__(
        self,
        adapter: BaseModelAdapter,
        config: DeckConfig | None = None,
        rasterizer: PdfRasterizer | None = None,
        callbacks: Iterable[ProgressCallback] = (),
    ):
        """Initialize the controller.

        Args:
            adapter: Model adapter used for the analysis stage
            config: Pipeline configuration
            rasterizer: Page rasterizer (defaults to the poppler-backed one)
            callbacks: Called with every progress update of every run
        """
        self.adapter = adapter
        self.config = config or DeckConfig()
        self.rasterizer = rasterizer or PdfRasterizer(
            jpeg_quality=self.config.jpeg_quality
        )
        self.callbacks = list(callbacks)
        self.selected: SelectedFile | None = None
        self.state = RunState()
        self._running = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        callbacks: Iterable[ProgressCallback] = (),
    ) -> "DeckPipeline":
        """Build a controller from environment settings.

        Applies ``settings.log_level`` to the package loggers and creates the
        Gemini adapter.

        Raises:
            ConfigurationError: If no API key is configured
        """
        settings = settings or Settings()
        set_log_level(settings.log_level)
        return cls(
            build_model_adapter(settings),
            config=settings.to_deck_config(),
            callbacks=callbacks,
        )

    @property
    def status(self) -> PipelineStatus:
        return self.state.status

    @property
    def result(self) -> AnalysisResult | None:
        return self.state.result

    def _transition(self, target: PipelineStatus) -> None:
        current = self.state.status
        if current == target:
            return
        if target not in ALLOWED_TRANSITIONS[current]:
            raise PipelineStateError(
                f"Cannot move from {current.value} to {target.value}"
            )
        logger.info(f"Pipeline status: {current.value} -> {target.value}")
        self.state.status = target

    def _on_progress(self, update: ProgressUpdate) -> None:
        status = STEP_STATUS.get(update.step)
        if status is not None:
            self._transition(status)
        self.state.progress = update.progress
        self.state.message = update.message

    def select_file(
        self,
        data: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> None:
        """Choose the PDF for the next run.

        Raises:
            LoadError: If the file is not declared as, or does not look like, a PDF
        """
        if not is_pdf_upload(filename, content_type):
            raise LoadError(
                f"Unsupported file type: {content_type or filename or 'unknown'}"
            )
        validate_pdf(data)
        self.selected = SelectedFile(data=data, filename=filename)
        logger.info(f"Selected {filename or 'PDF'} ({len(data)} bytes)")

    def select_path(self, path: str | Path) -> None:
        """Choose a PDF on disk for the next run."""
        pdf_path = Path(path)
        try:
            data = pdf_path.read_bytes()
        except OSError as e:
            raise LoadError(f"Failed to read PDF: {e}") from e
        self.select_file(data, filename=pdf_path.name)

    def reset(self) -> None:
        """Discard the current run and return to idle."""
        if self._running:
            raise PipelineBusyError("Cannot reset while a run is in progress")
        self.state = RunState()

    async def run(self) -> AnalysisResult:
        """Render, analyze and reconcile the selected PDF.

        Returns:
            The reconciled result, ready for review

        Raises:
            PipelineStateError: If no file is selected or a run is in progress
            PipelineError: If a stage fails; the run ends in ``error``
        """
        if self.selected is None:
            raise PipelineStateError("Select a PDF file before starting a run")
        if self._running:
            raise PipelineBusyError("A run is already in progress")

        self._running = True
        # A new run discards whatever the previous one produced
        self.state = RunState()
        self._transition(PipelineStatus.RENDERING)
        reporter = ProgressReporter([self._on_progress, *self.callbacks])
        graph = build_deck_graph(
            self.adapter,
            rasterizer=self.rasterizer,
            config=self.config,
            reporter=reporter,
        )
        inputs: dict[str, object] = {"pdf_data": self.selected.data}
        if self.selected.filename:
            inputs["filename"] = self.selected.filename

        try:
            final_state = await graph.ainvoke(inputs)
            self._transition(PipelineStatus.REVIEWING)
            self.state.pages = final_state.get("pages", [])
            self.state.result = final_state["result"]
            reporter.report("review", 100, "Done! Review the slides and export.")
            return self.state.result
        except PipelineError as e:
            self._fail(e.stage, e.message)
            raise
        except Exception as e:
            stage = STATUS_STAGE.get(self.state.status, "pipeline")
            self._fail(stage, str(e) or type(e).__name__)
            raise PipelineError(str(e) or type(e).__name__, stage=stage) from e
        finally:
            self._running = False

    def _fail(self, stage: str, message: str) -> None:
        logger.error(f"Run failed during {stage}: {message}")
        self._transition(PipelineStatus.ERROR)
        self.state.failed_stage = stage
        self.state.error = message
        self.state.pages = []
        self.state.result = None

    def _require_reviewing(self, action: str) -> AnalysisResult:
        if self.state.status != PipelineStatus.REVIEWING or self.state.result is None:
            raise PipelineStateError(
                f"Cannot {action} while {self.state.status.value}"
            )
        return self.state.result

    def update_slide(
        self,
        page_index: int,
        title: str | None = None,
        notes: str | None = None,
    ) -> AnalysisResult:
        """Edit one slide's title or notes during review.

        Raises:
            PipelineStateError: If the run is not being reviewed
            ValueError: If a value is blank or the page does not exist
        """
        result = self._require_reviewing("edit slides")
        updates: dict[str, str] = {}
        for name, value in (("title", title), ("notes", notes)):
            if value is None:
                continue
            if not value.strip():
                raise ValueError(f"Slide {name} must not be blank")
            updates[name] = value.strip()

        slides = list(result.slides)
        for position, slide in enumerate(slides):
            if slide.page_index == page_index:
                slides[position] = slide.model_copy(update=updates)
                break
        else:
            raise ValueError(f"No slide for page index {page_index}")

        self.state.result = result.model_copy(update={"slides": slides})
        return self.state.result

    @log_exceptions(logger)
    def export(self, output_dir: str | Path, filename: str | None = None) -> Path:
        """Write the reviewed deck as a .pptx file.

        Raises:
            PipelineStateError: If the run is not being reviewed
            AssemblyError: If the file cannot be built or written; the run
                stays in ``reviewing`` so the export can be retried
        """
        result = self._require_reviewing("export")
        try:
            path = export_pptx(result, output_dir, self.config, filename=filename)
        except AssemblyError:
            raise
        except Exception as e:
            raise AssemblyError(f"Export failed: {e}") from e

        self.state.export_path = path
        self._transition(PipelineStatus.COMPLETED)
        # Rendered images are no longer needed
        self.state.pages = []
        return path
