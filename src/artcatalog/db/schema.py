# ABOUTME: SQL DDL statements for the artwork catalogue database schema.
# ABOUTME: Defines the artwork table, its spatial and status indexes, and schema versioning.

SCHEMA_V1 = """
-- Core artwork catalogue table
CREATE TABLE artwork (
    id            TEXT PRIMARY KEY,
    title         TEXT,
    description   TEXT,
    lat           REAL NOT NULL,
    lon           REAL NOT NULL,
    created_by    TEXT,
    tags          TEXT,
    type_name     TEXT,
    source_id     TEXT,
    status        TEXT NOT NULL DEFAULT 'approved'
                  CHECK (status IN ('pending', 'approved', 'rejected')),
    date_added    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    date_modified TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

-- Bounding-box prefilter for nearby lookups
CREATE INDEX idx_artwork_lat_lon ON artwork(lat, lon);
CREATE INDEX idx_artwork_status ON artwork(status);
CREATE INDEX idx_artwork_source_id ON artwork(source_id);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""
