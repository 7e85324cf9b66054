"""Error types raised by the deck pipeline."""


class Pdf2DeckError(Exception):
    """Base error for the package."""

    pass


class ConfigurationError(Pdf2DeckError):
    """Raised when required configuration (e.g. an API key) is missing."""

    pass


class PipelineError(Pdf2DeckError):
    """A stage of the pipeline failed and the run was aborted."""

    stage = "pipeline"

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.message = message
        if stage is not None:
            self.stage = stage

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


class LoadError(PipelineError):
    """The input file is unreadable or not a PDF."""

    stage = "ingest"


class RenderError(PipelineError):
    """A page failed to rasterize."""

    stage = "render"

    def __init__(self, message: str, page_index: int | None = None):
        super().__init__(message)
        self.page_index = page_index


class AIResponseError(PipelineError):
    """The model returned an empty or unparseable response."""

    stage = "analyze"


class AssemblyError(PipelineError):
    """No exportable slides, or the presentation file could not be written."""

    stage = "export"


class PipelineStateError(Pdf2DeckError):
    """An operation was requested in a state that does not allow it."""

    pass


class PipelineBusyError(PipelineStateError):
    """A run is already in flight on this controller."""

    pass
