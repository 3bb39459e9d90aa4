# ABOUTME: CRUD and spatial lookup operations for the artwork catalogue.
# ABOUTME: Add, query, nearby-search, and tag-merge artworks in the SQLite database.

import json
import sqlite3
import uuid
from typing import Any

from artcatalog.db.mapping import (
    Artwork,
    ArtworkRecord,
    artwork_to_row,
    decode_tags,
    row_to_nearby,
    row_to_record,
)
from artcatalog.similarity.geo import bounding_box, haversine_distance
from artcatalog.similarity.tags import TagMergeResult, merge_tags
from artcatalog.similarity.types import Coordinate, NearbyArtwork

DEFAULT_NEARBY_RADIUS_METERS = 500.0
DEFAULT_NEARBY_LIMIT = 20

_STATUSES = ("pending", "approved", "rejected")


class ArtworkCatalog:
    """Wraps a sqlite3 connection and provides typed CRUD for the artwork table.

    Also serves as the NearbyArtworkSource for duplicate detection.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def add_artwork(self, artwork: Artwork, status: str = "approved") -> str:
        """Add an artwork to the catalogue.

        Args:
            artwork: The artwork's descriptive fields.
            status: Moderation status; only approved artworks are found by
                nearby lookups.

        Returns:
            The generated artwork ID.

        Raises:
            ValueError: If status is not a known moderation status.
        """
        if status not in _STATUSES:
            raise ValueError(f"Unknown status {status!r}")

        artwork_id = str(uuid.uuid4())
        row = artwork_to_row(artwork, artwork_id, status)
        columns = ", ".join(row.keys())
        placeholders = ", ".join("?" for _ in row)

        self._conn.execute(
            f"INSERT INTO artwork ({columns}) VALUES ({placeholders})",
            list(row.values()),
        )
        self._conn.commit()
        return artwork_id

    def get_by_id(self, artwork_id: str) -> ArtworkRecord | None:
        """Retrieve an artwork by its ID."""
        cursor = self._conn.execute("SELECT * FROM artwork WHERE id = ?", (artwork_id,))
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def list_all(self) -> list[ArtworkRecord]:
        """Return all artworks in the catalogue, ordered by title."""
        cursor = self._conn.execute("SELECT * FROM artwork ORDER BY title, id")
        return [row_to_record(row) for row in cursor.fetchall()]

    def set_status(self, artwork_id: str, status: str) -> None:
        """Change an artwork's moderation status.

        Raises:
            ValueError: If the status is unknown or the artwork does not exist.
        """
        if status not in _STATUSES:
            raise ValueError(f"Unknown status {status!r}")
        cursor = self._conn.execute(
            "UPDATE artwork SET status = ?, "
            "date_modified = strftime('%Y-%m-%dT%H:%M:%S', 'now') WHERE id = ?",
            (status, artwork_id),
        )
        self._conn.commit()

        if cursor.rowcount == 0:
            raise ValueError(f"Artwork with id {artwork_id} not found")

    def find_nearby_artworks(
        self,
        lat: float,
        lon: float,
        radius_meters: float = DEFAULT_NEARBY_RADIUS_METERS,
        limit: int = DEFAULT_NEARBY_LIMIT,
    ) -> list[NearbyArtwork]:
        """Find approved artworks within radius_meters of (lat, lon), nearest first.

        A bounding box narrows the SQL scan via the (lat, lon) index; the exact
        haversine distance then filters out the box's corners.
        """
        center = Coordinate(lat, lon)
        box = bounding_box(center, radius_meters)
        cursor = self._conn.execute(
            "SELECT * FROM artwork "
            "WHERE status = 'approved' "
            "AND lat BETWEEN ? AND ? "
            "AND lon BETWEEN ? AND ?",
            (box.south, box.north, box.west, box.east),
        )

        within: list[tuple[float, Any]] = []
        for row in cursor.fetchall():
            distance = haversine_distance(center, Coordinate(row["lat"], row["lon"]))
            if distance <= radius_meters:
                within.append((distance, row))

        within.sort(key=lambda pair: (pair[0], pair[1]["id"]))
        return [row_to_nearby(row, distance) for distance, row in within[:limit]]

    # --- Tag operations ---

    def get_tags(self, artwork_id: str) -> dict[str, Any]:
        """Get an artwork's tags as a key/value map.

        Raises:
            ValueError: If the artwork does not exist.
        """
        cursor = self._conn.execute("SELECT tags FROM artwork WHERE id = ?", (artwork_id,))
        row = cursor.fetchone()
        if row is None:
            raise ValueError(f"Artwork with id {artwork_id} not found")
        return decode_tags(row["tags"])

    def merge_tags(self, artwork_id: str, new_tags: dict[str, Any]) -> TagMergeResult:
        """Union-merge tags into an existing artwork. Idempotent.

        Existing keys are never overwritten. The row is only rewritten when
        at least one key was added.

        Raises:
            ValueError: If the artwork does not exist.
        """
        result = merge_tags(self.get_tags(artwork_id), new_tags)
        if result.new_tags_added:
            self._conn.execute(
                "UPDATE artwork SET tags = ?, "
                "date_modified = strftime('%Y-%m-%dT%H:%M:%S', 'now') WHERE id = ?",
                (json.dumps(result.merged_tags, sort_keys=True), artwork_id),
            )
            self._conn.commit()
        return result
