"""Run-scoped progress reporting."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from pdf2deck_core.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProgressUpdate:
    """A progress value (0-100) with the step that produced it."""

    step: str
    progress: int
    message: str


ProgressCallback = Callable[[ProgressUpdate], None]


class ProgressReporter:
    """Fan progress updates out to callbacks, never letting the value regress.

    One reporter belongs to one run; a lower value than the last one reported
    is raised to the running maximum before it is published.
    """

    def __init__(self, callbacks: Iterable[ProgressCallback] = ()):
        self._callbacks = list(callbacks)
        self.progress = 0
        self.step: str | None = None
        self.message = ""

    def report(self, step: str, progress: float, message: str) -> ProgressUpdate:
        value = max(self.progress, min(100, int(progress)))
        update = ProgressUpdate(step=step, progress=value, message=message)
        self.progress = value
        self.step = step
        self.message = message

        logger.debug(f"[{step}] {value}% {message}")
        for callback in self._callbacks:
            callback(update)
        return update
