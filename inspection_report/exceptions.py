"""
Exception hierarchy for the inspection report engine.

Only ImageDecodeError is recovered inside a generation (the item or signature
gets a placeholder). Everything else reaching the builder is wrapped into a
single GenerationError.
"""


class ReportEngineError(Exception):
    """Base exception for all report engine errors."""
    pass


class ValidationError(ReportEngineError):
    """Raised when an input record fails validation."""
    pass


class ImageDecodeError(ReportEngineError):
    """Raised when image bytes cannot be decoded to an intrinsic size."""

    def __init__(self, reason: str, ref_label: str = "image"):
        self.reason = reason
        self.ref_label = ref_label
        super().__init__(f"Failed to decode {ref_label}: {reason}")


class MeasurementError(ReportEngineError):
    """Raised when the text measurer is given malformed input."""
    pass


class RenderingError(ReportEngineError):
    """Raised when the rendering backend refuses an operation."""
    pass


class FontError(RenderingError):
    """Raised when font registration fails."""
    pass


class GenerationError(ReportEngineError):
    """
    Raised when a generation attempt fails as a whole.

    Wraps the underlying exception; no partial artifact accompanies it.
    """

    def __init__(self, original_exception: Exception, request_id: str = None):
        self.original_exception = original_exception
        self.request_id = request_id
        super().__init__(f"Report generation failed: {original_exception}")


class SummaryGenerationError(ReportEngineError):
    """Raised when the hosted summary model call fails."""
    pass
