# ABOUTME: Unit tests for mass-import duplicate detection against a fake artwork source.
# ABOUTME: Covers thresholds, per-field score breakdowns, and lookup failure handling.

import pytest

from artcatalog.similarity.config import MASS_IMPORT_WEIGHTS, MassImportConfig, SignalWeights
from artcatalog.similarity.errors import DuplicateDetectionError, SimilarityInputError
from artcatalog.similarity.mass_import import (
    MassImportDuplicateDetectionService,
    create_mass_import_duplicate_detection_service,
)
from artcatalog.similarity.source import NearbyArtworkSource
from artcatalog.similarity.types import MassImportRequest, NearbyArtwork

LAT = 49.2827
LON = -123.1207

WHALE_TAGS = {"material": "bronze", "artwork_type": "sculpture"}


class FakeSource:
    """In-memory NearbyArtworkSource that records its calls."""

    def __init__(self, artworks: list[NearbyArtwork] | None = None) -> None:
        self.artworks = list(artworks or [])
        self.calls: list[tuple[float, float, float, int]] = []

    def find_nearby_artworks(
        self, lat: float, lon: float, radius_meters: float, limit: int,
    ) -> list[NearbyArtwork]:
        self.calls.append((lat, lon, radius_meters, limit))
        return self.artworks[:limit]


class FailingSource:
    def find_nearby_artworks(
        self, lat: float, lon: float, radius_meters: float, limit: int,
    ) -> list[NearbyArtwork]:
        raise ConnectionError("catalogue unavailable")


def _whale(**overrides: object) -> NearbyArtwork:
    fields: dict[str, object] = {
        "id": "whale",
        "lat": LAT,
        "lon": LON,
        "distance_km": 0.0,
        "title": "Bronze Whale",
        "tags": '{"material": "bronze", "artwork_type": "sculpture"}',
        "artist": "Jane Doe",
    }
    fields.update(overrides)
    return NearbyArtwork(**fields)  # type: ignore[arg-type]


def _request(**overrides: object) -> MassImportRequest:
    fields: dict[str, object] = {
        "title": "Bronze Whale",
        "lat": LAT,
        "lon": LON,
        "tags": dict(WHALE_TAGS),
        "artist": "Someone Else",
    }
    fields.update(overrides)
    return MassImportRequest(**fields)  # type: ignore[arg-type]


class TestMassImportDuplicateDetection:
    """Tests for MassImportDuplicateDetectionService.check_for_duplicates."""

    def test_fake_source_satisfies_protocol(self) -> None:
        assert isinstance(FakeSource(), NearbyArtworkSource)

    def test_searches_wide_radius(self) -> None:
        source = FakeSource()
        create_mass_import_duplicate_detection_service(source).check_for_duplicates(_request())
        assert source.calls == [(LAT, LON, 500.0, 50)]

    def test_no_candidates(self) -> None:
        detector = MassImportDuplicateDetectionService(FakeSource())
        result = detector.check_for_duplicates(_request())
        assert not result.is_duplicate
        assert result.candidates_checked == 0
        assert result.duplicate_info is None

    def test_different_artist_below_strict_threshold(self) -> None:
        """Same place, title, and tags with a different artist misses a 0.9 cutoff."""
        detector = MassImportDuplicateDetectionService(FakeSource([_whale()]))

        result = detector.check_for_duplicates(_request(duplicate_threshold=0.9))

        assert not result.is_duplicate
        assert result.candidates_checked == 1

    def test_different_artist_is_duplicate_at_default_threshold(self) -> None:
        detector = MassImportDuplicateDetectionService(FakeSource([_whale()]))

        result = detector.check_for_duplicates(_request())

        assert result.is_duplicate
        info = result.duplicate_info
        assert info is not None
        assert info.existing_artwork_id == "whale"
        assert info.title == "Bronze Whale"
        assert info.score_breakdown.title == 1.0
        assert info.score_breakdown.location == 1.0
        assert info.score_breakdown.tags == 1.0
        assert info.score_breakdown.artist < 0.5
        assert info.confidence_score == pytest.approx(0.8 + 0.2 * info.score_breakdown.artist)
        assert info.confidence_score < 0.9
        assert info.explanation.startswith(f"{round(info.confidence_score * 100)}% similar (")

    def test_missing_artist_renormalizes(self) -> None:
        """An import item without an artist is scored on the remaining signals."""
        detector = MassImportDuplicateDetectionService(FakeSource([_whale()]))

        result = detector.check_for_duplicates(_request(artist=None))

        assert result.duplicate_info is not None
        assert result.duplicate_info.confidence_score == pytest.approx(1.0)
        assert result.duplicate_info.score_breakdown.artist == 0.0

    def test_reports_best_candidate(self) -> None:
        source = FakeSource([
            _whale(id="mural", title="Harbour Mural", tags=None, artist=None),
            _whale(),
        ])
        result = MassImportDuplicateDetectionService(source).check_for_duplicates(_request())

        assert result.candidates_checked == 2
        assert result.duplicate_info is not None
        assert result.duplicate_info.existing_artwork_id == "whale"

    def test_title_reported_from_request(self) -> None:
        detector = MassImportDuplicateDetectionService(FakeSource([_whale()]))
        result = detector.check_for_duplicates(_request(title="Bronze Whale (1992)"))
        assert result.duplicate_info is not None
        assert result.duplicate_info.title == "Bronze Whale (1992)"

    def test_config_default_threshold(self) -> None:
        detector = MassImportDuplicateDetectionService(
            FakeSource([_whale()]), MassImportConfig(default_threshold=0.95),
        )
        assert not detector.check_for_duplicates(_request()).is_duplicate

    @pytest.mark.parametrize("threshold", [-0.1, 1.5])
    def test_threshold_out_of_range(self, threshold: float) -> None:
        detector = MassImportDuplicateDetectionService(FakeSource([_whale()]))
        with pytest.raises(SimilarityInputError, match="duplicate_threshold"):
            detector.check_for_duplicates(_request(duplicate_threshold=threshold))

    def test_lookup_failure_raises(self) -> None:
        """A failed lookup is an error, never a silent 'not a duplicate'."""
        detector = MassImportDuplicateDetectionService(FailingSource())

        with pytest.raises(DuplicateDetectionError) as exc_info:
            detector.check_for_duplicates(_request())

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert exc_info.value.context["title"] == "Bronze Whale"

    def test_scoring_failure_raises(self) -> None:
        source = FakeSource([_whale(lat=None)])
        detector = MassImportDuplicateDetectionService(source)

        with pytest.raises(DuplicateDetectionError, match="whale"):
            detector.check_for_duplicates(_request())


class TestReferenceAndWeights:
    """Tests for source id matching and per-request weights."""

    def test_same_source_id_is_duplicate_despite_drift(self) -> None:
        """A re-imported record matches by source id after its title and position change."""
        drifted = LAT + 0.0018  # ~200 m north
        source = FakeSource([_whale(source_id="van-42", distance_km=0.2)])
        detector = MassImportDuplicateDetectionService(source)

        result = detector.check_for_duplicates(
            _request(title="Orca", lat=drifted, tags=None, artist=None, external_id="van-42"),
        )

        assert result.is_duplicate
        info = result.duplicate_info
        assert info is not None
        assert info.score_breakdown.reference == 1.0
        assert info.score_breakdown.title == 0.0
        assert info.confidence_score == pytest.approx(
            (0.15 * info.score_breakdown.location + 0.5) / 0.8
        )
        assert "same source id" in info.explanation

    def test_drifted_record_without_source_id_is_new(self) -> None:
        drifted = LAT + 0.0018
        source = FakeSource([_whale(source_id="van-42", distance_km=0.2)])
        detector = MassImportDuplicateDetectionService(source)

        result = detector.check_for_duplicates(
            _request(title="Orca", lat=drifted, tags=None, artist=None),
        )

        assert not result.is_duplicate

    def test_different_source_id_does_not_penalize(self) -> None:
        source = FakeSource([_whale(source_id="osm-7")])
        detector = MassImportDuplicateDetectionService(source)

        result = detector.check_for_duplicates(_request(artist=None, external_id="van-42"))

        assert result.duplicate_info is not None
        assert result.duplicate_info.confidence_score == pytest.approx(1.0)
        assert result.duplicate_info.score_breakdown.reference == 0.0

    def test_request_weights_override_config(self) -> None:
        """Weights on the request replace the configured ones for that item only."""
        detector = MassImportDuplicateDetectionService(FakeSource([_whale()]))
        title_only = SignalWeights(distance=0.0, title=1.0, tags=0.0)

        overridden = detector.check_for_duplicates(
            _request(title="Whale", artist=None, weights=title_only),
        )
        default = detector.check_for_duplicates(_request(title="Whale", artist=None))

        assert not overridden.is_duplicate
        assert default.is_duplicate
        assert default.duplicate_info is not None
        assert default.duplicate_info.confidence_score == pytest.approx(0.8125)
        assert detector.config.weights == MASS_IMPORT_WEIGHTS
