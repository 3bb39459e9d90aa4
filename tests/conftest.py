# ABOUTME: Shared pytest fixtures for artcatalog tests.
# ABOUTME: Provides a temporary catalogue database and a small seeded set of artworks.

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from artcatalog.db.catalog import ArtworkCatalog
from artcatalog.db.connection import open_catalog
from artcatalog.db.mapping import Artwork

WHALE_LAT = 49.2827
WHALE_LON = -123.1207


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "catalog.db"


@pytest.fixture
def conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    """An open connection to a fresh catalogue database."""
    connection = open_catalog(db_path)
    yield connection
    connection.close()


@pytest.fixture
def catalog(conn: sqlite3.Connection) -> ArtworkCatalog:
    return ArtworkCatalog(conn)


@pytest.fixture
def whale() -> Artwork:
    """A bronze sculpture used as the existing record in duplicate scenarios."""
    return Artwork(
        title="Bronze Whale",
        lat=WHALE_LAT,
        lon=WHALE_LON,
        artist="Jane Doe",
        tags={"material": "bronze", "artwork_type": "sculpture"},
        type_name="sculpture",
    )


@pytest.fixture
def seeded_catalog(catalog: ArtworkCatalog, whale: Artwork) -> ArtworkCatalog:
    """Catalogue holding the whale, a mural 100 m north, and a statue 5 km away."""
    catalog.add_artwork(whale)
    catalog.add_artwork(
        Artwork(
            title="Harbour Mural",
            lat=WHALE_LAT + 0.0009,
            lon=WHALE_LON,
            artist="Sam Lee",
            tags={"artwork_type": "mural", "material": "paint"},
            type_name="mural",
        )
    )
    catalog.add_artwork(
        Artwork(
            title="Founders Statue",
            lat=WHALE_LAT + 0.045,
            lon=WHALE_LON,
            tags={"artwork_type": "statue"},
        )
    )
    return catalog
