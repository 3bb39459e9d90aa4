# ABOUTME: Unit tests for threshold banding of composite similarity scores.
# ABOUTME: Checks inclusive cutoffs at the default and custom thresholds.

import pytest

from artcatalog.similarity.classifier import classify
from artcatalog.similarity.config import Thresholds
from artcatalog.similarity.types import SimilarityBand


class TestClassify:
    """Tests for classify."""

    @pytest.mark.parametrize(
        ("score", "band"),
        [
            (1.0, SimilarityBand.HIGH),
            (0.7, SimilarityBand.HIGH),
            (0.69999, SimilarityBand.WARNING),
            (0.4, SimilarityBand.WARNING),
            (0.39, SimilarityBand.NONE),
            (0.0, SimilarityBand.NONE),
        ],
    )
    def test_default_bands(self, score: float, band: SimilarityBand) -> None:
        """Cutoffs are inclusive: exactly 0.7 is high."""
        assert classify(score) is band

    def test_custom_thresholds(self) -> None:
        thresholds = Thresholds(warn=0.5, high=0.9)
        assert classify(0.8, thresholds) is SimilarityBand.WARNING
        assert classify(0.9, thresholds) is SimilarityBand.HIGH
        assert classify(0.45, thresholds) is SimilarityBand.NONE
