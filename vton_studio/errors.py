"""Error taxonomy for try-on runs.

Every failure a caller can observe is a ``TryOnError`` carrying a
human-readable ``message`` (shown to the user verbatim) and a short
``kind`` tag the HTTP layer reports alongside it.
"""

SERVICE_ERROR_PREFIX = "An error occurred while communicating with the AI service"
NO_IMAGE_MESSAGE = (
    "The AI could not generate an image from the provided images. "
    "Please try again with different images."
)
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred while communicating with the AI service."


class TryOnError(Exception):
    """Base class for all try-on failures."""
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ReadError(TryOnError):
    """An input image could not be read or decoded."""
    kind = "read"


class MissingImageError(ReadError):
    """A required input image was not supplied."""

    def __init__(self, role: str):
        super().__init__(f"The {role} image is missing. Please upload both images.")
        self.role = role


class GenerationError(TryOnError):
    """A request to the generation service failed."""
    kind = "generation"

    def __init__(self, cause: str, variant_index: int | None = None):
        super().__init__(f"{SERVICE_ERROR_PREFIX}: {cause}")
        self.cause = cause
        self.variant_index = variant_index


class NoImageProducedError(TryOnError):
    """Every request succeeded but none returned an image."""
    kind = "no_image"

    def __init__(self, message: str = NO_IMAGE_MESSAGE):
        super().__init__(message)


class UnknownError(TryOnError):
    """Fallback for failures with no specific mapping."""
    kind = "unknown"

    def __init__(self, message: str = UNKNOWN_ERROR_MESSAGE):
        super().__init__(message)


class TryOnInProgressError(TryOnError):
    """A run was started while another one is still outstanding."""
    kind = "busy"

    def __init__(self, message: str = "A try-on is already in progress. Please wait for it to finish."):
        super().__init__(message)
