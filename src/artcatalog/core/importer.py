# ABOUTME: Mass-import pipeline for adding open-data artwork records to the catalogue.
# ABOUTME: Checks each record for duplicates, merges tags into matches, and adds the rest.

from dataclasses import dataclass, field

from artcatalog.core.sources import ImportRecord
from artcatalog.db.catalog import ArtworkCatalog
from artcatalog.db.mapping import Artwork
from artcatalog.similarity.config import SignalWeights
from artcatalog.similarity.errors import DuplicateDetectionError, SimilarityInputError
from artcatalog.similarity.geo import is_valid_coordinate, normalize_coordinate
from artcatalog.similarity.mass_import import MassImportDuplicateDetectionService
from artcatalog.similarity.types import (
    Coordinate,
    MassImportDuplicateInfo,
    MassImportRequest,
)


@dataclass
class DuplicateReport:
    """A record that was not added because it matched an existing artwork."""

    record: ImportRecord
    info: MassImportDuplicateInfo
    new_tags_added: int = 0


@dataclass
class ImportResult:
    """Summary of an import operation."""

    added: int = 0
    duplicates: int = 0
    merged_tags: int = 0
    errors: int = 0
    error_details: list[tuple[str, str]] = field(default_factory=list)
    duplicate_details: list[DuplicateReport] = field(default_factory=list)
    added_ids: list[str] = field(default_factory=list)


def import_artworks(
    records: list[ImportRecord],
    catalog: ArtworkCatalog,
    detector: MassImportDuplicateDetectionService,
    *,
    duplicate_threshold: float | None = None,
    merge_duplicate_tags: bool = True,
    weights: SignalWeights | None = None,
) -> ImportResult:
    """Import artwork records into the catalogue.

    For each record: validates coordinates, asks the detector whether it
    duplicates a nearby artwork, and either adds it or reports the match.
    When merge_duplicate_tags is set, the record's tags are union-merged
    into the matched artwork (existing keys are kept). Records whose
    duplicate check fails are counted as errors and not added, so a lookup
    outage never floods the catalogue with duplicates.

    Args:
        records: Parsed import records.
        catalog: The catalogue to add artworks to.
        detector: Mass-import duplicate detector, usually backed by catalog.
        duplicate_threshold: Per-run override of the detector's threshold.
        merge_duplicate_tags: Whether to merge tags into matched artworks.
        weights: Per-run override of the detector's signal weights.

    Returns:
        ImportResult with counts of added, duplicate, and errored records.
    """
    result = ImportResult()

    for record in records:
        point = Coordinate(record.lat, record.lon)
        if not is_valid_coordinate(point):
            result.errors += 1
            result.error_details.append(
                (record.title, f"Invalid coordinates ({record.lat}, {record.lon})")
            )
            continue
        point = normalize_coordinate(point)

        request = MassImportRequest(
            title=record.title,
            lat=point.lat,
            lon=point.lon,
            description=record.description,
            artist=record.artist,
            tags=record.tags,
            duplicate_threshold=duplicate_threshold,
            external_id=record.external_id,
            weights=weights,
        )
        try:
            check = detector.check_for_duplicates(request)
        except (DuplicateDetectionError, SimilarityInputError) as exc:
            result.errors += 1
            result.error_details.append((record.title, str(exc)))
            continue

        if check.is_duplicate and check.duplicate_info is not None:
            report = DuplicateReport(record=record, info=check.duplicate_info)
            if merge_duplicate_tags and record.tags:
                merge = catalog.merge_tags(check.duplicate_info.existing_artwork_id, record.tags)
                report.new_tags_added = merge.new_tags_added
                result.merged_tags += merge.new_tags_added
            result.duplicates += 1
            result.duplicate_details.append(report)
            continue

        artwork_id = catalog.add_artwork(
            Artwork(
                title=record.title,
                lat=point.lat,
                lon=point.lon,
                description=record.description,
                artist=record.artist,
                tags=record.tags,
                type_name=record.type_name,
                source_id=record.external_id,
            )
        )
        result.added += 1
        result.added_ids.append(artwork_id)

    return result
