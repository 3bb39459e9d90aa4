# ABOUTME: Maps a composite similarity score to a confidence band.
# ABOUTME: none < warning < high, with cutoffs taken from a Thresholds config.

from artcatalog.similarity.config import DEFAULT_THRESHOLDS, Thresholds
from artcatalog.similarity.types import SimilarityBand


def classify(score: float, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> SimilarityBand:
    """Band a score: high at or above thresholds.high, warning at or above thresholds.warn."""
    if score >= thresholds.high:
        return SimilarityBand.HIGH
    if score >= thresholds.warn:
        return SimilarityBand.WARNING
    return SimilarityBand.NONE
