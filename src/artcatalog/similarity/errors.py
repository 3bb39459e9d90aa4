# ABOUTME: Exception types raised by the similarity engine and duplicate detectors.
# ABOUTME: Each error carries a stable code and a context dict for structured logging.

from typing import Any, ClassVar


class SimilarityError(Exception):
    """Base class for all similarity-related errors."""

    code: ClassVar[str] = "SIMILARITY_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for log records and API payloads."""
        cause = self.__cause__
        return {
            "name": type(self).__name__,
            "code": self.code,
            "message": str(self),
            "context": self.context,
            "cause": (
                {"name": type(cause).__name__, "message": str(cause)}
                if cause is not None
                else None
            ),
        }


class SimilarityConfigurationError(SimilarityError, ValueError):
    """Raised when weights, thresholds, or distances are misconfigured."""

    code = "SIMILARITY_CONFIG_INVALID"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(f"Similarity configuration error: {message}", context)


class SimilarityInputError(SimilarityError, ValueError):
    """Raised for invalid input data passed to a similarity operation."""

    code = "SIMILARITY_INPUT_INVALID"


class TagFormatError(SimilarityInputError):
    """Raised when a tag payload cannot be parsed into a set of values."""

    code = "TAG_FORMAT_INVALID"


class SimilarityCalculationError(SimilarityError):
    """Scoring a single candidate failed."""

    code = "SIMILARITY_CALCULATION_FAILED"

    def __init__(self, artwork_id: str, cause: Exception) -> None:
        super().__init__(
            f"Similarity calculation failed for artwork {artwork_id}: {cause}",
            {"artwork_id": artwork_id},
        )
        self.artwork_id = artwork_id


class DuplicateDetectionError(SimilarityError):
    """Mass-import duplicate detection failed for one import item."""

    code = "DUPLICATE_DETECTION_FAILED"
