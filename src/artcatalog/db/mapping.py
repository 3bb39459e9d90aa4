# ABOUTME: Converts between artwork dataclasses and SQLite row dictionaries.
# ABOUTME: Handles JSON serialization of the tags column.

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from artcatalog.similarity.types import NearbyArtwork

logger = logging.getLogger(__name__)


@dataclass
class Artwork:
    """Descriptive fields of a public artwork, as submitted or imported."""

    title: str | None
    lat: float
    lon: float
    description: str | None = None
    artist: str | None = None
    tags: dict[str, Any] = field(default_factory=dict)
    type_name: str | None = None
    source_id: str | None = None


@dataclass
class ArtworkRecord:
    """A catalogued artwork: Artwork plus database-specific fields."""

    id: str
    artwork: Artwork
    status: str
    date_added: str
    date_modified: str


def decode_tags(raw: str | None) -> dict[str, Any]:
    """Decode the tags column into a key/value map.

    Older rows may hold a list or malformed JSON; those decode to an empty map
    for merge purposes, while similarity scoring reads the raw column instead.
    """
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Malformed tags column: %.80s", raw)
        return {}
    if isinstance(parsed, dict) and isinstance(parsed.get("tags"), dict):
        return dict(parsed["tags"])
    return parsed if isinstance(parsed, dict) else {}


def artwork_to_row(artwork: Artwork, artwork_id: str, status: str) -> dict[str, Any]:
    """Convert an Artwork instance to a dict suitable for INSERT."""
    return {
        "id": artwork_id,
        "title": artwork.title,
        "description": artwork.description,
        "lat": artwork.lat,
        "lon": artwork.lon,
        "created_by": artwork.artist,
        "tags": json.dumps(artwork.tags, sort_keys=True),
        "type_name": artwork.type_name,
        "source_id": artwork.source_id,
        "status": status,
    }


def row_to_artwork(row: Any) -> Artwork:
    return Artwork(
        title=row["title"],
        lat=row["lat"],
        lon=row["lon"],
        description=row["description"],
        artist=row["created_by"],
        tags=decode_tags(row["tags"]),
        type_name=row["type_name"],
        source_id=row["source_id"],
    )


def row_to_record(row: Any) -> ArtworkRecord:
    """Convert a full database row to an ArtworkRecord."""
    return ArtworkRecord(
        id=row["id"],
        artwork=row_to_artwork(row),
        status=row["status"],
        date_added=row["date_added"],
        date_modified=row["date_modified"],
    )


def row_to_nearby(row: Any, distance_meters: float) -> NearbyArtwork:
    """Convert a row to the shape consumed by duplicate detection.

    The tags column is passed through undecoded; the similarity engine parses
    and validates it itself.
    """
    return NearbyArtwork(
        id=row["id"],
        lat=row["lat"],
        lon=row["lon"],
        distance_km=distance_meters / 1000.0,
        title=row["title"],
        tags=row["tags"],
        type_name=row["type_name"],
        artist=row["created_by"],
        source_id=row["source_id"],
    )
