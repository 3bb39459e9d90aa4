# ABOUTME: Candidate ranking service for the interactive submission flow.
# ABOUTME: Scores nearby artworks, reorders them by likely-duplicate, and flags duplicates.

import logging
from dataclasses import replace

from artcatalog.similarity.classifier import classify
from artcatalog.similarity.config import DEFAULT_SIMILARITY_CONFIG, SimilarityConfig
from artcatalog.similarity.errors import SimilarityCalculationError
from artcatalog.similarity.explanation import explain
from artcatalog.similarity.scoring import SignalAggregator
from artcatalog.similarity.types import (
    DuplicateCheckResult,
    DuplicateMatch,
    EnhancedArtwork,
    NearbyArtwork,
    RankedCandidate,
    SimilarityBand,
    SimilarityCandidate,
    SimilarityQuery,
    SimilarityResult,
)

logger = logging.getLogger(__name__)


class SimilarityService:
    """Scores a query against pre-filtered nearby candidates.

    Candidates are trusted to be within the search area already; the
    service does not re-filter by distance. Similarity is advisory in the
    interactive flow, so the duplicate check and result enhancement never
    raise: failures are logged and degrade to "no warnings".

    include_metadata controls whether per-signal metadata (exact distance,
    normalized titles, common tags) is attached to results. Keep it off for
    end-user responses.
    """

    def __init__(
        self,
        config: SimilarityConfig | None = None,
        *,
        include_metadata: bool = False,
    ) -> None:
        self._config = config or DEFAULT_SIMILARITY_CONFIG
        self._include_metadata = include_metadata
        self._aggregator = SignalAggregator(self._config, include_metadata=include_metadata)

    @property
    def config(self) -> SimilarityConfig:
        return self._config

    @property
    def include_metadata(self) -> bool:
        return self._include_metadata

    def strategy_info(self) -> dict[str, str]:
        return {"name": self._aggregator.name, "version": self._aggregator.version}

    def score(
        self, query: SimilarityQuery, candidates: list[SimilarityCandidate],
    ) -> list[SimilarityResult]:
        """Score every candidate, preserving input order.

        A candidate that fails to score is logged and left out; the rest of
        the batch is unaffected.
        """
        return [result for result in self._score_each(query, candidates) if result is not None]

    def _score_each(
        self, query: SimilarityQuery, candidates: list[SimilarityCandidate],
    ) -> list[SimilarityResult | None]:
        """One entry per candidate, by position; None where scoring failed."""
        results: list[SimilarityResult | None] = []
        for candidate in candidates:
            try:
                results.append(self._aggregator.score(query, candidate))
            except Exception as exc:
                logger.warning("%s", SimilarityCalculationError(candidate.id, exc))
                results.append(None)
        return results

    def calculate_similarity_scores(
        self, query: SimilarityQuery, candidates: list[SimilarityCandidate],
    ) -> list[SimilarityResult]:
        """Score every candidate and sort by overall score, best first."""
        return sorted(
            self.score(query, candidates),
            key=lambda result: result.overall_score,
            reverse=True,
        )

    def explain(self, result: SimilarityResult) -> str:
        return explain(result, self._config.noise_floor)

    def classify(self, result: SimilarityResult) -> SimilarityBand:
        return classify(result.overall_score, self._config.thresholds)

    def rank_and_enhance(
        self, query: SimilarityQuery, candidates: list[SimilarityCandidate],
    ) -> list[RankedCandidate]:
        """Annotate candidates with similarity and sort likely duplicates first.

        Ordering is by score descending, then by distance ascending. Candidates
        that could not be scored sort after all scored ones, by distance.
        """
        return [item for _, item in self._rank(query, candidates)]

    def _rank(
        self, query: SimilarityQuery, candidates: list[SimilarityCandidate],
    ) -> list[tuple[int, RankedCandidate]]:
        # Results are matched to candidates by position; ids need not be unique.
        ranked: list[tuple[int, RankedCandidate]] = []
        for index, (candidate, result) in enumerate(
            zip(candidates, self._score_each(query, candidates))
        ):
            if result is None:
                distance = candidate.distance_meters
                ranked.append((index, RankedCandidate(
                    candidate=candidate,
                    distance_meters=distance if distance is not None else float("inf"),
                )))
                continue
            ranked.append((index, RankedCandidate(
                candidate=candidate,
                distance_meters=result.distance_meters,
                similarity_score=result.overall_score,
                similarity_band=self.classify(result),
                explanation=self.explain(result),
                signals=result.signals if self._include_metadata else None,
            )))

        return sorted(ranked, key=lambda pair: _ranking_key(pair[1]))

    def enhance_nearby_results(
        self, query: SimilarityQuery, nearby: list[NearbyArtwork],
    ) -> list[EnhancedArtwork]:
        """Reorder nearby-artwork lookup results so likely duplicates come first.

        Falls back to plain distance order without scores if scoring fails.
        """
        try:
            ranked = self._rank(query, [artwork.to_candidate() for artwork in nearby])
        except Exception:
            logger.exception("Similarity scoring failed; returning distance-ordered results")
            return [
                EnhancedArtwork(artwork=artwork, distance_meters=artwork.distance_meters)
                for artwork in sorted(nearby, key=lambda a: a.distance_km)
            ]

        return [
            EnhancedArtwork(
                artwork=nearby[index],
                distance_meters=item.distance_meters,
                similarity_score=item.similarity_score,
                similarity_band=item.similarity_band,
                explanation=item.explanation,
                signals=item.signals,
            )
            for index, item in ranked
        ]

    def check_for_duplicates(
        self, query: SimilarityQuery, candidates: list[SimilarityCandidate],
    ) -> DuplicateCheckResult:
        """Partition candidates into high-similarity and warning bands.

        Each list is sorted best first. Candidates in the none band are
        counted but not returned.
        """
        try:
            results = self.calculate_similarity_scores(query, candidates)
            high: list[DuplicateMatch] = []
            warning: list[DuplicateMatch] = []
            top: DuplicateMatch | None = None

            for result in results:
                match = DuplicateMatch(
                    artwork_id=result.artwork_id,
                    score=result.overall_score,
                    band=self.classify(result),
                    explanation=self.explain(result),
                )
                if top is None:
                    top = match
                if match.band is SimilarityBand.HIGH:
                    high.append(match)
                elif match.band is SimilarityBand.WARNING:
                    warning.append(match)
        except Exception:
            logger.exception("Duplicate check failed; continuing without similarity warnings")
            return DuplicateCheckResult(candidates_checked=len(candidates))

        if high:
            logger.info(
                "%d high-similarity match(es) for %r, best %s (%.2f)",
                len(high), query.title, high[0].artwork_id, high[0].score,
            )

        return DuplicateCheckResult(
            high_similarity_matches=high,
            warning_similarity_matches=warning,
            candidates_checked=len(candidates),
            top_match=top,
        )


def _ranking_key(item: RankedCandidate) -> tuple[int, float, float]:
    if item.similarity_score is None:
        return (1, 0.0, item.distance_meters)
    return (0, -item.similarity_score, item.distance_meters)


def create_similarity_service(
    config: SimilarityConfig | None = None,
    *,
    include_metadata: bool = False,
) -> SimilarityService:
    """Create a similarity service for production responses."""
    return SimilarityService(config, include_metadata=include_metadata)


def create_dev_similarity_service(config: SimilarityConfig | None = None) -> SimilarityService:
    """Create a similarity service that exposes per-signal metadata for debugging."""
    return SimilarityService(config, include_metadata=True)


def with_threshold(config: SimilarityConfig, high: float) -> SimilarityConfig:
    """Copy of config with the high-similarity cutoff overridden."""
    return replace(config, thresholds=config.thresholds.with_high(high))
