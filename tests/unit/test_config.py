# ABOUTME: Unit tests for similarity configuration dataclasses and the environment loader.
# ABOUTME: Covers weight and threshold validation and ARTCATALOG_SIMILARITY_* parsing.

import pytest

from artcatalog.similarity.config import (
    DEFAULT_SIMILARITY_CONFIG,
    MASS_IMPORT_WEIGHTS,
    MassImportConfig,
    SignalWeights,
    SimilarityConfig,
    Thresholds,
    load_similarity_config,
)
from artcatalog.similarity.errors import SimilarityConfigurationError


class TestSignalWeights:
    """Tests for SignalWeights validation."""

    def test_must_sum_to_one(self) -> None:
        with pytest.raises(SimilarityConfigurationError, match="sum to 1.0"):
            SignalWeights(distance=0.5, title=0.3, tags=0.3)

    def test_tolerates_rounding(self) -> None:
        weights = SignalWeights(distance=0.3333, title=0.3333, tags=0.3333)
        assert weights.artist == 0.0

    def test_rejects_negative(self) -> None:
        with pytest.raises(SimilarityConfigurationError, match="non-negative"):
            SignalWeights(distance=1.2, title=-0.2, tags=0.0)

    def test_error_is_value_error(self) -> None:
        """Configuration errors are also ValueErrors."""
        with pytest.raises(ValueError, match="^Similarity configuration error: "):
            SignalWeights(distance=0.0, title=0.0, tags=0.0)


class TestThresholds:
    """Tests for Thresholds validation and overrides."""

    def test_defaults(self) -> None:
        assert Thresholds() == Thresholds(warn=0.4, high=0.7)

    def test_warn_above_high_rejected(self) -> None:
        with pytest.raises(SimilarityConfigurationError):
            Thresholds(warn=0.8, high=0.7)

    def test_out_of_range_rejected(self) -> None:
        with pytest.raises(SimilarityConfigurationError):
            Thresholds(warn=0.4, high=1.5)

    def test_with_high_pulls_warn_down(self) -> None:
        assert Thresholds().with_high(0.3) == Thresholds(warn=0.3, high=0.3)
        assert Thresholds().with_high(0.9) == Thresholds(warn=0.4, high=0.9)


class TestMassImportConfig:
    """Tests for MassImportConfig."""

    def test_defaults(self) -> None:
        config = MassImportConfig()
        assert config.search_radius_meters == 500.0
        assert config.candidate_limit == 50
        assert config.thresholds.high == 0.7

    def test_as_similarity_config(self) -> None:
        config = MassImportConfig(default_threshold=0.85).as_similarity_config()
        assert config.weights == MASS_IMPORT_WEIGHTS
        assert config.distance_cutoff_meters == 500.0
        assert config.thresholds.high == 0.85

    def test_mass_import_weights_favour_reference(self) -> None:
        """Without a source id match the other signals keep their relative weights."""
        assert MASS_IMPORT_WEIGHTS.reference == 0.5
        assert MASS_IMPORT_WEIGHTS.distance == MASS_IMPORT_WEIGHTS.title
        assert MASS_IMPORT_WEIGHTS.artist == MASS_IMPORT_WEIGHTS.tags

    def test_rejects_bad_limit(self) -> None:
        with pytest.raises(SimilarityConfigurationError, match="candidate_limit"):
            MassImportConfig(candidate_limit=0)

    def test_rejects_bad_threshold(self) -> None:
        with pytest.raises(SimilarityConfigurationError, match="default_threshold"):
            MassImportConfig(default_threshold=1.1)


class TestLoadSimilarityConfig:
    """Tests for load_similarity_config."""

    def test_empty_environment_uses_defaults(self) -> None:
        assert load_similarity_config({}) == DEFAULT_SIMILARITY_CONFIG

    def test_reads_overrides(self) -> None:
        config = load_similarity_config({
            "ARTCATALOG_SIMILARITY_THRESHOLD_HIGH": "0.8",
            "ARTCATALOG_SIMILARITY_WEIGHT_DISTANCE": "0.4",
            "ARTCATALOG_SIMILARITY_WEIGHT_ARTIST": "0.1",
            "ARTCATALOG_SIMILARITY_CUTOFF_METERS": "300",
        })
        assert config.thresholds.high == 0.8
        assert config.weights.distance == 0.4
        assert config.weights.artist == 0.1
        assert config.distance_cutoff_meters == 300.0

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ARTCATALOG_SIMILARITY_THRESHOLD_WARN", "0.5")
        assert load_similarity_config().thresholds.warn == 0.5

    def test_reads_reference_weight(self) -> None:
        config = load_similarity_config({
            "ARTCATALOG_SIMILARITY_WEIGHT_DISTANCE": "0.3",
            "ARTCATALOG_SIMILARITY_WEIGHT_REFERENCE": "0.2",
        })
        assert config.weights.reference == 0.2

    def test_unparsable_value(self) -> None:
        with pytest.raises(SimilarityConfigurationError, match="not a number"):
            load_similarity_config({"ARTCATALOG_SIMILARITY_WEIGHT_TITLE": "lots"})

    def test_inconsistent_weights(self) -> None:
        with pytest.raises(SimilarityConfigurationError, match="sum to 1.0"):
            load_similarity_config({"ARTCATALOG_SIMILARITY_WEIGHT_TITLE": "0.9"})

    def test_non_positive_cutoff(self) -> None:
        with pytest.raises(SimilarityConfigurationError):
            SimilarityConfig(distance_cutoff_meters=0)
