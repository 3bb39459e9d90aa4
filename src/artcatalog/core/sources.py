# ABOUTME: Loads mass-import records from a local JSON file or an HTTP(S) feed.
# ABOUTME: Maps loosely named feed fields onto ImportRecord and pages through URL feeds.

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from artcatalog.core.http import CatalogHttpClient, HttpClient, ImportFetchError

logger = logging.getLogger(__name__)

_LAT_KEYS = ("lat", "latitude")
_LON_KEYS = ("lon", "lng", "long", "longitude")
_ARTIST_KEYS = ("artist", "created_by", "artists")
_TYPE_KEYS = ("type", "type_name")
_EXTERNAL_ID_KEYS = ("external_id", "externalId", "source_id", "id")
_RECORD_LIST_KEYS = ("records", "artworks", "results")

# Stops a feed that ignores paging parameters from being read forever.
MAX_FEED_PAGES = 1000


class ImportSourceError(Exception):
    """Raised when an import source cannot be read or has an invalid shape."""


@dataclass
class ImportRecord:
    """One artwork to import, as read from a source feed."""

    title: str
    lat: float
    lon: float
    description: str | None = None
    artist: str | None = None
    tags: dict[str, Any] = field(default_factory=dict)
    type_name: str | None = None
    external_id: str | None = None


def _first(item: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if item.get(key) not in (None, ""):
            return item[key]
    return None


def _as_float(value: Any, name: str, index: int) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ImportSourceError(f"Record {index}: {name} is not a number: {value!r}") from exc
    if not math.isfinite(number):
        raise ImportSourceError(f"Record {index}: {name} is not finite: {value!r}")
    return number


def _artist_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        return ", ".join(str(v).strip() for v in value if str(v).strip()) or None
    return str(value).strip() or None


def parse_record(item: Any, index: int) -> ImportRecord:
    """Map one raw JSON object onto an ImportRecord.

    Raises:
        ImportSourceError: If the object lacks a title or coordinates.
    """
    if not isinstance(item, dict):
        raise ImportSourceError(f"Record {index} is not an object")

    title = str(item.get("title") or "").strip()
    if not title:
        raise ImportSourceError(f"Record {index} has no title")

    lat = _first(item, _LAT_KEYS)
    lon = _first(item, _LON_KEYS)
    if lat is None or lon is None:
        raise ImportSourceError(f"Record {index} ({title!r}) has no coordinates")

    tags = item.get("tags") or {}
    if not isinstance(tags, dict):
        raise ImportSourceError(f"Record {index} ({title!r}): tags must be an object")

    type_name = _first(item, _TYPE_KEYS)
    external_id = _first(item, _EXTERNAL_ID_KEYS)
    return ImportRecord(
        title=title,
        lat=_as_float(lat, "lat", index),
        lon=_as_float(lon, "lon", index),
        description=item.get("description") or None,
        artist=_artist_text(_first(item, _ARTIST_KEYS)),
        tags=dict(tags),
        type_name=str(type_name) if type_name is not None else None,
        external_id=(str(external_id).strip() or None) if external_id is not None else None,
    )


def _record_list(payload: Any) -> list[Any]:
    if isinstance(payload, dict):
        for key in _RECORD_LIST_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
    if not isinstance(payload, list):
        raise ImportSourceError(
            "Import source must be a JSON list or an object with a 'records' list"
        )
    return payload


def parse_records(payload: Any) -> list[ImportRecord]:
    """Parse a feed payload: a list of records or an object wrapping one."""
    return [parse_record(item, index) for index, item in enumerate(_record_list(payload))]


def fetch_feed_pages(client: HttpClient, url: str, page_size: int) -> list[Any]:
    """Read a paged feed with limit/offset parameters until a short page.

    Raises:
        ImportFetchError: If a page cannot be fetched.
        ImportSourceError: If a page has an invalid shape or the feed does
            not end within MAX_FEED_PAGES pages.
    """
    items: list[Any] = []
    for page in range(MAX_FEED_PAGES):
        params = {"limit": str(page_size), "offset": str(page * page_size)}
        batch = _record_list(client.get(url, params=params))
        items.extend(batch)
        logger.debug(
            "Fetched %d record(s) from %s at offset %s", len(batch), url, params["offset"],
        )
        if len(batch) < page_size:
            return items
    raise ImportSourceError(f"{url} did not end within {MAX_FEED_PAGES} pages of {page_size}")


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_import_records(
    source: str | Path,
    http_client: HttpClient | None = None,
    *,
    page_size: int | None = None,
) -> list[ImportRecord]:
    """Load import records from a JSON file path or an http(s) URL.

    Args:
        source: Local path or URL of a JSON feed.
        http_client: Client used for URLs. A CatalogHttpClient is created
            when omitted.
        page_size: When set, a URL feed is read page by page with
            limit/offset query parameters. Ignored for files.

    Raises:
        ImportSourceError: If the source cannot be read or parsed.
    """
    if isinstance(source, str) and _is_url(source):
        owned = http_client is None
        client = http_client or CatalogHttpClient()
        try:
            if page_size is None:
                payload = client.get(source)
            else:
                payload = fetch_feed_pages(client, source, page_size)
        except ImportFetchError as exc:
            raise ImportSourceError(str(exc)) from exc
        finally:
            if owned:
                client.close()
        return parse_records(payload)

    path = Path(source)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ImportSourceError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ImportSourceError(f"{path} is not valid JSON: {exc}") from exc
    return parse_records(payload)
