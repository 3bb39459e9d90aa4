# ABOUTME: Signal aggregation: scores one candidate against one query.
# ABOUTME: Combines distance, title, tag, artist, and reference signals into a weighted mean.

import logging
import math

from artcatalog.similarity.config import DEFAULT_SIMILARITY_CONFIG, SimilarityConfig
from artcatalog.similarity.errors import TagFormatError
from artcatalog.similarity.geo import distance_score, haversine_distance
from artcatalog.similarity.tags import parse_tag_values, tag_overlap
from artcatalog.similarity.text import (
    artist_similarity,
    best_artist_pair,
    normalize_text,
    title_similarity,
)
from artcatalog.similarity.types import (
    Signal,
    SignalType,
    SimilarityCandidate,
    SimilarityQuery,
    SimilarityResult,
)

logger = logging.getLogger(__name__)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def reference_matches(external_id: str | None, candidate: SimilarityCandidate) -> bool:
    """Whether an import record's source id names this candidate exactly."""
    if not external_id:
        return False
    return external_id in (candidate.id, candidate.source_id)


def combine_signals(signals: list[Signal]) -> float:
    """Weighted mean of the signals, renormalized over their weights.

    Falls back to the distance signal's raw score when the included weights
    sum to zero. Never returns NaN.
    """
    total_weight = sum(s.weight for s in signals)
    if total_weight > 0:
        score = sum(s.weighted_score for s in signals) / total_weight
    else:
        distance = next((s for s in signals if s.type is SignalType.DISTANCE), None)
        score = distance.raw_score if distance is not None else 0.0
    if math.isnan(score):
        return 0.0
    return _clamp(score)


class SignalAggregator:
    """Produces a SimilarityResult for a query/candidate pair.

    The distance signal is always present. Title, tag, and artist signals
    are added only when both sides have data for them and their configured
    weight is non-zero; a missing signal is dropped, not scored as zero.
    The reference signal is added only on an exact source id match.
    """

    name = "weighted-signals"
    version = "1.0.0"

    def __init__(
        self,
        config: SimilarityConfig = DEFAULT_SIMILARITY_CONFIG,
        *,
        include_metadata: bool = True,
    ) -> None:
        self._config = config
        self._include_metadata = include_metadata

    @property
    def config(self) -> SimilarityConfig:
        return self._config

    def score(self, query: SimilarityQuery, candidate: SimilarityCandidate) -> SimilarityResult:
        weights = self._config.weights

        distance = haversine_distance(query.coordinates, candidate.coordinates)
        signals = [
            Signal(
                type=SignalType.DISTANCE,
                raw_score=distance_score(distance, self._config.distance_cutoff_meters),
                weight=weights.distance,
                metadata=self._meta(
                    distance_meters=distance,
                    cutoff_meters=self._config.distance_cutoff_meters,
                ),
            )
        ]

        if weights.title > 0:
            title_score = title_similarity(query.title, candidate.title)
            if title_score is not None:
                signals.append(Signal(
                    type=SignalType.TITLE,
                    raw_score=title_score,
                    weight=weights.title,
                    metadata=self._meta(
                        query_normalized=normalize_text(query.title),
                        candidate_normalized=normalize_text(candidate.title),
                    ),
                ))

        if weights.tags > 0:
            tag_signal = self._tag_signal(query, candidate)
            if tag_signal is not None:
                signals.append(tag_signal)

        if weights.artist > 0:
            artist_score = artist_similarity(query.artist, candidate.artist)
            if artist_score is not None:
                signals.append(Signal(
                    type=SignalType.ARTIST,
                    raw_score=artist_score,
                    weight=weights.artist,
                    metadata=self._meta(
                        matched_pair=best_artist_pair(query.artist, candidate.artist),
                    ),
                ))

        if weights.reference > 0 and reference_matches(query.external_id, candidate):
            signals.append(Signal(
                type=SignalType.REFERENCE,
                raw_score=1.0,
                weight=weights.reference,
                metadata=self._meta(matched_reference=query.external_id),
            ))

        return SimilarityResult(
            artwork_id=candidate.id,
            overall_score=combine_signals(signals),
            signals=signals,
            distance_meters=distance,
        )

    def _tag_signal(
        self, query: SimilarityQuery, candidate: SimilarityCandidate,
    ) -> Signal | None:
        try:
            query_tags = parse_tag_values(query.tags)
        except TagFormatError as exc:
            logger.warning("Ignoring unparseable query tags: %s", exc)
            return None
        try:
            candidate_tags = parse_tag_values(candidate.tags)
        except TagFormatError as exc:
            logger.warning("Ignoring unparseable tags on artwork %s: %s", candidate.id, exc)
            return None

        overlap = tag_overlap(query_tags, candidate_tags)
        if overlap is None:
            return None
        return Signal(
            type=SignalType.TAGS,
            raw_score=overlap,
            weight=self._config.weights.tags,
            metadata=self._meta(
                common_tags=sorted(query_tags & candidate_tags),
                union_size=len(query_tags | candidate_tags),
            ),
        )

    def _meta(self, **values: object) -> dict[str, object] | None:
        return dict(values) if self._include_metadata else None
