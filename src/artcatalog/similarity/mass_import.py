# ABOUTME: Duplicate detection for unattended mass import of artwork records.
# ABOUTME: Stricter than the interactive flow: adds artist matching and reports per-field scores.

import logging
from dataclasses import replace

from artcatalog.similarity.classifier import classify
from artcatalog.similarity.config import MassImportConfig
from artcatalog.similarity.errors import DuplicateDetectionError, SimilarityInputError
from artcatalog.similarity.explanation import explain
from artcatalog.similarity.scoring import SignalAggregator
from artcatalog.similarity.source import NearbyArtworkSource
from artcatalog.similarity.types import (
    Coordinate,
    MassImportDuplicateInfo,
    MassImportDuplicateResult,
    MassImportRequest,
    ScoreBreakdown,
    SignalType,
    SimilarityBand,
    SimilarityQuery,
    SimilarityResult,
)

logger = logging.getLogger(__name__)


def score_breakdown(result: SimilarityResult) -> ScoreBreakdown:
    """Raw per-field scores of a result; excluded signals report 0.0."""
    return ScoreBreakdown(
        title=result.raw_score(SignalType.TITLE),
        artist=result.raw_score(SignalType.ARTIST),
        location=result.raw_score(SignalType.DISTANCE),
        tags=result.raw_score(SignalType.TAGS),
        reference=result.raw_score(SignalType.REFERENCE),
    )


class MassImportDuplicateDetectionService:
    """Decides whether an import item already exists in the catalogue.

    There is no human in the loop to dismiss false positives, so this uses a
    wider candidate search and a per-call duplicate threshold. An exact source
    id match is its strongest signal, and a request may carry its own signal
    weights. Unlike the interactive flow, failures raise DuplicateDetectionError
    so the importer can report the item as an error instead of creating a
    possible duplicate.
    """

    def __init__(
        self, source: NearbyArtworkSource, config: MassImportConfig | None = None,
    ) -> None:
        self._source = source
        self._config = config or MassImportConfig()
        self._aggregator = SignalAggregator(self._config.as_similarity_config())

    @property
    def config(self) -> MassImportConfig:
        return self._config

    def check_for_duplicates(self, request: MassImportRequest) -> MassImportDuplicateResult:
        """Check one import item against nearby catalogue entries.

        Raises:
            SimilarityInputError: If duplicate_threshold is outside [0, 1].
            DuplicateDetectionError: If candidate lookup or scoring fails.
        """
        threshold = self._resolve_threshold(request.duplicate_threshold)
        aggregator = self._aggregator_for(request)

        try:
            nearby = self._source.find_nearby_artworks(
                request.lat,
                request.lon,
                self._config.search_radius_meters,
                self._config.candidate_limit,
            )
        except Exception as exc:
            raise DuplicateDetectionError(
                f"Nearby artwork lookup failed for {request.title!r}: {exc}",
                {"title": request.title, "lat": request.lat, "lon": request.lon},
            ) from exc

        if not nearby:
            return MassImportDuplicateResult(is_duplicate=False, candidates_checked=0)

        query = SimilarityQuery(
            coordinates=Coordinate(request.lat, request.lon),
            title=request.title,
            tags=request.tags,
            artist=request.artist,
            external_id=request.external_id,
        )

        results: list[SimilarityResult] = []
        for artwork in nearby:
            try:
                result = aggregator.score(query, artwork.to_candidate())
            except Exception as exc:
                raise DuplicateDetectionError(
                    f"Scoring failed for {request.title!r} against artwork {artwork.id}: {exc}",
                    {"title": request.title, "artwork_id": artwork.id},
                ) from exc
            results.append(result)

        best = max(results, key=lambda r: r.overall_score)
        thresholds = self._config.thresholds.with_high(threshold)
        if classify(best.overall_score, thresholds) is not SimilarityBand.HIGH:
            logger.debug(
                "No duplicate for %r: best %s scored %.3f < %.3f",
                request.title, best.artwork_id, best.overall_score, threshold,
            )
            return MassImportDuplicateResult(is_duplicate=False, candidates_checked=len(nearby))

        logger.info(
            "Duplicate detected for %r: artwork %s scored %.3f >= %.3f",
            request.title, best.artwork_id, best.overall_score, threshold,
        )
        return MassImportDuplicateResult(
            is_duplicate=True,
            candidates_checked=len(nearby),
            duplicate_info=MassImportDuplicateInfo(
                existing_artwork_id=best.artwork_id,
                title=request.title,
                confidence_score=best.overall_score,
                score_breakdown=score_breakdown(best),
                explanation=explain(best, self._config.noise_floor),
            ),
        )

    def _aggregator_for(self, request: MassImportRequest) -> SignalAggregator:
        if request.weights is None:
            return self._aggregator
        return SignalAggregator(
            replace(self._config.as_similarity_config(), weights=request.weights),
        )

    def _resolve_threshold(self, threshold: float | None) -> float:
        if threshold is None:
            return self._config.default_threshold
        if not 0.0 <= threshold <= 1.0:
            raise SimilarityInputError(
                f"duplicate_threshold must be between 0 and 1, got {threshold}",
                {"duplicate_threshold": threshold},
            )
        return threshold


def create_mass_import_duplicate_detection_service(
    source: NearbyArtworkSource, config: MassImportConfig | None = None,
) -> MassImportDuplicateDetectionService:
    return MassImportDuplicateDetectionService(source, config)
