# ABOUTME: Value types flowing through the similarity engine.
# ABOUTME: Queries, candidates, per-signal scores, and the results produced for callers.

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from artcatalog.similarity.config import SignalWeights

# Tag payloads arrive as a JSON string, a key/value mapping, or a flat list of values.
RawTags = Union[str, dict[str, Any], list[Any], tuple[Any, ...], frozenset[str], set[str], None]


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point. Range validation is the caller's job (see geo.is_valid_coordinate)."""

    lat: float
    lon: float


class SignalType(str, Enum):
    DISTANCE = "distance"
    TITLE = "title"
    TAGS = "tags"
    ARTIST = "artist"
    REFERENCE = "reference"


class SimilarityBand(str, Enum):
    """Confidence band assigned to a composite score."""

    NONE = "none"
    WARNING = "warning"
    HIGH = "high"


@dataclass
class SimilarityQuery:
    """The incoming record being checked against the catalogue."""

    coordinates: Coordinate
    title: str | None = None
    tags: RawTags = None
    artist: str | None = None
    external_id: str | None = None


@dataclass
class SimilarityCandidate:
    """An existing catalogue record already known to be near the query.

    distance_meters may be pre-computed by storage; scoring recomputes the
    exact distance regardless.
    """

    id: str
    coordinates: Coordinate
    title: str | None = None
    tags: RawTags = None
    type_name: str | None = None
    distance_meters: float | None = None
    artist: str | None = None
    source_id: str | None = None


@dataclass(frozen=True)
class Signal:
    """One dimension of comparison between a query and a candidate."""

    type: SignalType
    raw_score: float
    weight: float
    metadata: dict[str, Any] | None = None

    @property
    def weighted_score(self) -> float:
        return self.raw_score * self.weight


@dataclass
class SimilarityResult:
    """Composite score of one candidate against one query.

    overall_score is the weighted mean of the included signals, with weights
    renormalized over only those signals that had data on both sides.
    """

    artwork_id: str
    overall_score: float
    signals: list[Signal]
    distance_meters: float

    def signal(self, signal_type: SignalType) -> Signal | None:
        """Return the signal of the given type, or None if it was excluded."""
        for signal in self.signals:
            if signal.type is signal_type:
                return signal
        return None

    def raw_score(self, signal_type: SignalType) -> float:
        """Raw score of a signal, 0.0 when the signal was excluded."""
        signal = self.signal(signal_type)
        return signal.raw_score if signal is not None else 0.0


@dataclass
class DuplicateMatch:
    artwork_id: str
    score: float
    band: SimilarityBand
    explanation: str


@dataclass
class DuplicateCheckResult:
    """Scored candidates partitioned into confidence bands."""

    high_similarity_matches: list[DuplicateMatch] = field(default_factory=list)
    warning_similarity_matches: list[DuplicateMatch] = field(default_factory=list)
    candidates_checked: int = 0
    top_match: DuplicateMatch | None = None

    @property
    def has_high_similarity(self) -> bool:
        return bool(self.high_similarity_matches)

    @property
    def has_warning_similarity(self) -> bool:
        return bool(self.warning_similarity_matches)


@dataclass
class NearbyArtwork:
    """An approved artwork returned by a nearby-artworks lookup."""

    id: str
    lat: float
    lon: float
    distance_km: float
    title: str | None = None
    tags: RawTags = None
    type_name: str | None = None
    artist: str | None = None
    source_id: str | None = None

    @property
    def distance_meters(self) -> float:
        return self.distance_km * 1000.0

    def to_candidate(self) -> SimilarityCandidate:
        return SimilarityCandidate(
            id=self.id,
            coordinates=Coordinate(self.lat, self.lon),
            title=self.title,
            tags=self.tags,
            type_name=self.type_name,
            distance_meters=self.distance_meters,
            artist=self.artist,
            source_id=self.source_id,
        )


@dataclass
class RankedCandidate:
    """A candidate annotated with its similarity score for display ordering."""

    candidate: SimilarityCandidate
    distance_meters: float
    similarity_score: float | None = None
    similarity_band: SimilarityBand | None = None
    explanation: str | None = None
    signals: list[Signal] | None = None


@dataclass
class EnhancedArtwork:
    """A nearby artwork with similarity annotations attached."""

    artwork: NearbyArtwork
    distance_meters: float
    similarity_score: float | None = None
    similarity_band: SimilarityBand | None = None
    explanation: str | None = None
    signals: list[Signal] | None = None


@dataclass(frozen=True)
class ScoreBreakdown:
    """Raw (unweighted) per-field scores reported for a mass-import match."""

    title: float = 0.0
    artist: float = 0.0
    location: float = 0.0
    tags: float = 0.0
    reference: float = 0.0


@dataclass
class MassImportRequest:
    """Fields of one import item checked for duplicates.

    external_id is the record's identifier in its source feed. weights, when
    given, replaces the detector's configured signal weights for this item.
    """

    title: str
    lat: float
    lon: float
    description: str | None = None
    artist: str | None = None
    tags: dict[str, Any] | None = None
    duplicate_threshold: float | None = None
    external_id: str | None = None
    weights: SignalWeights | None = None


@dataclass
class MassImportDuplicateInfo:
    existing_artwork_id: str
    title: str
    confidence_score: float
    score_breakdown: ScoreBreakdown
    explanation: str


@dataclass
class MassImportDuplicateResult:
    is_duplicate: bool
    candidates_checked: int
    duplicate_info: MassImportDuplicateInfo | None = None
