# ABOUTME: NearbyArtworkSource protocol: the storage contract consumed by duplicate detection.
# ABOUTME: Any catalogue backend (SQLite, remote API, test fake) implements this.

from typing import Protocol, runtime_checkable

from artcatalog.similarity.types import NearbyArtwork


@runtime_checkable
class NearbyArtworkSource(Protocol):
    """Looks up approved artworks around a point.

    Implementations return at most ``limit`` records within ``radius_meters``
    of (lat, lon), nearest first, with distance_km populated.
    """

    def find_nearby_artworks(
        self, lat: float, lon: float, radius_meters: float, limit: int,
    ) -> list[NearbyArtwork]: ...
