"""Pipeline error taxonomy: input and measurement failures"""


class PagemarkError(Exception):
    """Base class for errors surfaced to pipeline callers."""


class InputError(PagemarkError, ValueError):
    """Raw document is missing or empty; raised before any parsing starts."""


class MeasurementError(PagemarkError, RuntimeError):
    """The measurement capability could not report a usable size for a block."""

    def __init__(self, message: str, position: int | None = None, kind: str | None = None):
        super().__init__(message)
        self.position = position
        self.kind = kind
