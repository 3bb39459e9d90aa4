# ABOUTME: Similarity and duplicate-detection engine for the artwork catalogue.
# ABOUTME: Exports the services, config, and value types used by submission and import flows.

from artcatalog.similarity.classifier import classify
from artcatalog.similarity.config import (
    DEFAULT_SIMILARITY_CONFIG,
    DEFAULT_THRESHOLDS,
    INTERACTIVE_WEIGHTS,
    MASS_IMPORT_WEIGHTS,
    MassImportConfig,
    SignalWeights,
    SimilarityConfig,
    Thresholds,
    load_similarity_config,
)
from artcatalog.similarity.errors import (
    DuplicateDetectionError,
    SimilarityCalculationError,
    SimilarityConfigurationError,
    SimilarityError,
    SimilarityInputError,
    TagFormatError,
)
from artcatalog.similarity.explanation import explain
from artcatalog.similarity.mass_import import (
    MassImportDuplicateDetectionService,
    create_mass_import_duplicate_detection_service,
)
from artcatalog.similarity.scoring import SignalAggregator
from artcatalog.similarity.service import (
    SimilarityService,
    create_dev_similarity_service,
    create_similarity_service,
)
from artcatalog.similarity.source import NearbyArtworkSource
from artcatalog.similarity.tags import TagMergeResult, merge_tags, parse_tag_values
from artcatalog.similarity.types import (
    Coordinate,
    DuplicateCheckResult,
    DuplicateMatch,
    EnhancedArtwork,
    MassImportDuplicateInfo,
    MassImportDuplicateResult,
    MassImportRequest,
    NearbyArtwork,
    RankedCandidate,
    ScoreBreakdown,
    Signal,
    SignalType,
    SimilarityBand,
    SimilarityCandidate,
    SimilarityQuery,
    SimilarityResult,
)

__all__ = [
    "DEFAULT_SIMILARITY_CONFIG",
    "DEFAULT_THRESHOLDS",
    "INTERACTIVE_WEIGHTS",
    "MASS_IMPORT_WEIGHTS",
    "Coordinate",
    "DuplicateCheckResult",
    "DuplicateDetectionError",
    "DuplicateMatch",
    "EnhancedArtwork",
    "MassImportConfig",
    "MassImportDuplicateDetectionService",
    "MassImportDuplicateInfo",
    "MassImportDuplicateResult",
    "MassImportRequest",
    "NearbyArtwork",
    "NearbyArtworkSource",
    "RankedCandidate",
    "ScoreBreakdown",
    "Signal",
    "SignalAggregator",
    "SignalType",
    "SignalWeights",
    "SimilarityBand",
    "SimilarityCalculationError",
    "SimilarityCandidate",
    "SimilarityConfig",
    "SimilarityConfigurationError",
    "SimilarityError",
    "SimilarityInputError",
    "SimilarityQuery",
    "SimilarityResult",
    "SimilarityService",
    "TagFormatError",
    "TagMergeResult",
    "Thresholds",
    "classify",
    "create_dev_similarity_service",
    "create_mass_import_duplicate_detection_service",
    "create_similarity_service",
    "explain",
    "load_similarity_config",
    "merge_tags",
    "parse_tag_values",
]
