# ABOUTME: Public API for the artwork catalogue database layer.
# ABOUTME: Exports connection management, catalogue operations, and data types.

from artcatalog.db.catalog import ArtworkCatalog
from artcatalog.db.connection import DEFAULT_DB_PATH, open_catalog
from artcatalog.db.mapping import Artwork, ArtworkRecord

__all__ = [
    "DEFAULT_DB_PATH",
    "Artwork",
    "ArtworkCatalog",
    "ArtworkRecord",
    "open_catalog",
]
