# ABOUTME: Tag normalization, Jaccard overlap scoring, and the tag union merge used on import.
# ABOUTME: parse_tag_values is the single adapter from every stored tag shape to a value set.

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from artcatalog.similarity.errors import TagFormatError
from artcatalog.similarity.types import RawTags

# Key under which some submission paths nest their key/value tags.
_STRUCTURED_KEY = "tags"


def _value_to_text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list, tuple, set, frozenset)):
        return None
    if isinstance(value, bool):
        return "yes" if value else "no"
    text = str(value).strip().lower()
    return text or None


def _flatten(values: list[Any]) -> list[Any]:
    # Multi-valued tags (e.g. {"material": ["bronze", "steel"]}) contribute each value.
    flat: list[Any] = []
    for value in values:
        if isinstance(value, (list, tuple, set, frozenset)):
            flat.extend(value)
        else:
            flat.append(value)
    return flat


def _values_of(parsed: Any) -> list[Any]:
    if isinstance(parsed, Mapping):
        nested = parsed.get(_STRUCTURED_KEY)
        if isinstance(nested, Mapping):
            return _flatten(list(nested.values()))
        return _flatten(list(parsed.values()))
    if isinstance(parsed, (list, tuple, set, frozenset)):
        return list(parsed)
    raise TagFormatError(
        f"unsupported tag payload of type {type(parsed).__name__}",
        {"type": type(parsed).__name__},
    )


def parse_tag_values(raw: RawTags) -> frozenset[str]:
    """Normalize any tag payload to a set of lowercase string values.

    Accepts a JSON string, a key/value mapping (values are used, keys are
    not, since key naming differs between sources), the nested
    ``{"tags": {...}}`` shape, or a flat list of values. List-valued
    entries are flattened one level. None and empty strings yield an empty
    set.

    Raises:
        TagFormatError: If a string is not valid JSON or the payload is
            neither a mapping nor a list.
    """
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        if not raw.strip():
            return frozenset()
        try:
            parsed: Any = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise TagFormatError(f"tags are not valid JSON: {exc}", {"raw": raw[:200]}) from exc
        if parsed is None:
            return frozenset()
    else:
        parsed = raw

    texts = (_value_to_text(value) for value in _values_of(parsed))
    return frozenset(text for text in texts if text)


def tag_overlap(a: frozenset[str], b: frozenset[str]) -> float | None:
    """Jaccard overlap of two tag value sets, or None if either is empty."""
    if not a or not b:
        return None
    return len(a & b) / len(a | b)


@dataclass
class TagMergeResult:
    merged_tags: dict[str, Any]
    new_tags_added: int
    total_tags: int


def merge_tags(existing: Mapping[str, Any], new: Mapping[str, Any]) -> TagMergeResult:
    """Union-merge new tags into an existing tag map.

    Keys missing from ``existing`` are added; keys already present keep their
    existing value. Merging the same tags a second time adds nothing.
    """
    merged = dict(existing)
    added = 0
    for key, value in new.items():
        if key not in merged:
            merged[key] = value
            added += 1
    return TagMergeResult(merged_tags=merged, new_tags_added=added, total_tags=len(merged))
