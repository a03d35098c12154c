from __future__ import annotations


class ProcessingError(Exception):
    """Raised when a pipeline stage cannot produce its next context."""

    def __init__(self, message: str, *, processor: str | None = None) -> None:
        self.processor = processor
        super().__init__(f"[{processor}] {message}" if processor else message)


class MalformedInputError(ProcessingError):
    """A message or side-channel payload does not have the shape a stage needs."""

    pass


class FormatterError(ProcessingError):
    """A content formatter failed; nothing from the stage is injected."""

    pass
