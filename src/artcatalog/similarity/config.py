# ABOUTME: Configuration for similarity scoring: signal weights, thresholds, and distances.
# ABOUTME: Validates at construction time and can be loaded from ARTCATALOG_* environment variables.

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace

from artcatalog.similarity.errors import SimilarityConfigurationError

# Radius used by the fast submission flow when looking for nearby artworks.
DEFAULT_SEARCH_RADIUS_METERS = 250.0

# Imported coordinates drift more than phone GPS, so mass import searches wider.
MASS_IMPORT_SEARCH_RADIUS_METERS = 500.0
MASS_IMPORT_CANDIDATE_LIMIT = 50

DEFAULT_DUPLICATE_THRESHOLD = 0.7

# Signals below this raw score are left out of explanations.
DEFAULT_NOISE_FLOOR = 0.3

_WEIGHT_TOLERANCE = 0.001

_ENV_PREFIX = "ARTCATALOG_SIMILARITY_"


def _check_unit_interval(name: str, value: float) -> None:
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise SimilarityConfigurationError(
            f"{name} must be between 0 and 1, got {value}", {name: value}
        )


def _check_positive(name: str, value: float) -> None:
    if math.isnan(value) or value <= 0:
        raise SimilarityConfigurationError(f"{name} must be positive, got {value}", {name: value})


@dataclass(frozen=True)
class SignalWeights:
    """Relative weight of each similarity signal. Must sum to 1.0.

    A weight of zero disables the signal entirely; it is then never computed.
    The reference signal only counts when an import record's source id
    matches a candidate exactly, so a missing match never lowers a score.
    """

    distance: float
    title: float
    tags: float
    artist: float = 0.0
    reference: float = 0.0

    def __post_init__(self) -> None:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for name, value in values.items():
            if math.isnan(value) or value < 0:
                raise SimilarityConfigurationError(
                    f"weight '{name}' must be non-negative, got {value}", values
                )
        total = sum(values.values())
        if abs(total - 1.0) > _WEIGHT_TOLERANCE:
            raise SimilarityConfigurationError(
                f"weights must sum to 1.0, got {total:.4f}", values
            )


INTERACTIVE_WEIGHTS = SignalWeights(distance=0.5, title=0.3, tags=0.2)
MASS_IMPORT_WEIGHTS = SignalWeights(
    distance=0.15, title=0.15, tags=0.1, artist=0.1, reference=0.5,
)


@dataclass(frozen=True)
class Thresholds:
    """Score cutoffs for the warning and high-similarity bands."""

    warn: float = 0.4
    high: float = DEFAULT_DUPLICATE_THRESHOLD

    def __post_init__(self) -> None:
        _check_unit_interval("warn threshold", self.warn)
        _check_unit_interval("high threshold", self.high)
        if self.warn > self.high:
            raise SimilarityConfigurationError(
                f"warn threshold ({self.warn}) must not exceed high threshold ({self.high})",
                {"warn": self.warn, "high": self.high},
            )

    def with_high(self, high: float) -> "Thresholds":
        """Return thresholds whose high cutoff is overridden by a caller value.

        The warning cutoff is pulled down to the new high cutoff when it would
        otherwise sit above it.
        """
        _check_unit_interval("high threshold", high)
        return Thresholds(warn=min(self.warn, high), high=high)


DEFAULT_THRESHOLDS = Thresholds()


@dataclass(frozen=True)
class SimilarityConfig:
    """Settings for the interactive submission flow."""

    weights: SignalWeights = INTERACTIVE_WEIGHTS
    thresholds: Thresholds = DEFAULT_THRESHOLDS
    distance_cutoff_meters: float = DEFAULT_SEARCH_RADIUS_METERS
    noise_floor: float = DEFAULT_NOISE_FLOOR

    def __post_init__(self) -> None:
        _check_positive("distance_cutoff_meters", self.distance_cutoff_meters)
        _check_unit_interval("noise_floor", self.noise_floor)


@dataclass(frozen=True)
class MassImportConfig:
    """Stricter settings for unattended batch import."""

    weights: SignalWeights = MASS_IMPORT_WEIGHTS
    distance_cutoff_meters: float = MASS_IMPORT_SEARCH_RADIUS_METERS
    search_radius_meters: float = MASS_IMPORT_SEARCH_RADIUS_METERS
    candidate_limit: int = MASS_IMPORT_CANDIDATE_LIMIT
    default_threshold: float = DEFAULT_DUPLICATE_THRESHOLD
    noise_floor: float = DEFAULT_NOISE_FLOOR

    def __post_init__(self) -> None:
        _check_positive("distance_cutoff_meters", self.distance_cutoff_meters)
        _check_positive("search_radius_meters", self.search_radius_meters)
        if self.candidate_limit < 1:
            raise SimilarityConfigurationError(
                f"candidate_limit must be at least 1, got {self.candidate_limit}"
            )
        _check_unit_interval("noise_floor", self.noise_floor)
        _check_unit_interval("default_threshold", self.default_threshold)

    @property
    def thresholds(self) -> Thresholds:
        return DEFAULT_THRESHOLDS.with_high(self.default_threshold)

    def as_similarity_config(self) -> SimilarityConfig:
        """Project onto the shared scoring configuration."""
        return SimilarityConfig(
            weights=self.weights,
            thresholds=self.thresholds,
            distance_cutoff_meters=self.distance_cutoff_meters,
            noise_floor=self.noise_floor,
        )


DEFAULT_SIMILARITY_CONFIG = SimilarityConfig()


def _env_float(environ: Mapping[str, str], suffix: str, default: float) -> float:
    raw = environ.get(_ENV_PREFIX + suffix, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise SimilarityConfigurationError(
            f"{_ENV_PREFIX}{suffix} is not a number: {raw!r}"
        ) from exc


def load_similarity_config(environ: Mapping[str, str] | None = None) -> SimilarityConfig:
    """Build a SimilarityConfig from environment variables.

    Unset or empty variables fall back to the defaults. The result is
    validated like any other config, so an inconsistent environment fails
    here instead of silently skewing every score.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Raises:
        SimilarityConfigurationError: On unparsable or inconsistent values.
    """
    env = os.environ if environ is None else environ
    base = DEFAULT_SIMILARITY_CONFIG

    weights = SignalWeights(
        distance=_env_float(env, "WEIGHT_DISTANCE", base.weights.distance),
        title=_env_float(env, "WEIGHT_TITLE", base.weights.title),
        tags=_env_float(env, "WEIGHT_TAGS", base.weights.tags),
        artist=_env_float(env, "WEIGHT_ARTIST", base.weights.artist),
        reference=_env_float(env, "WEIGHT_REFERENCE", base.weights.reference),
    )
    thresholds = Thresholds(
        warn=_env_float(env, "THRESHOLD_WARN", base.thresholds.warn),
        high=_env_float(env, "THRESHOLD_HIGH", base.thresholds.high),
    )
    return replace(
        base,
        weights=weights,
        thresholds=thresholds,
        distance_cutoff_meters=_env_float(env, "CUTOFF_METERS", base.distance_cutoff_meters),
    )
