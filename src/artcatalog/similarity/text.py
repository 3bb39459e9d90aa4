# ABOUTME: Title and artist-name similarity heuristics.
# ABOUTME: Token-set Jaccard for titles; best pairwise SequenceMatcher ratio for artist names.

import re
from difflib import SequenceMatcher

_WHITESPACE_RE = re.compile(r"\s+")
_TOKEN_RE = re.compile(r"\w+")

# "Jane Doe & John Roe", "Doe, Roe", "Jane Doe and John Roe"
_ARTIST_SPLIT_RE = re.compile(r"[,&;/]|\band\b", re.IGNORECASE)


def normalize_text(text: str | None) -> str:
    """Lowercase, trim, and collapse internal whitespace."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text.strip().lower())


def _tokens(normalized: str) -> set[str]:
    return set(_TOKEN_RE.findall(normalized))


def title_similarity(a: str | None, b: str | None) -> float | None:
    """Score two titles in [0, 1], or None when either side has no title.

    Identical titles after normalization score 1.0. Otherwise the score is the
    Jaccard overlap of the word-token sets, which tolerates reordering and
    punctuation ("Bronze Whale" vs "Whale Sculpture, Bronze").
    """
    norm_a = normalize_text(a)
    norm_b = normalize_text(b)
    if not norm_a or not norm_b:
        return None
    if norm_a == norm_b:
        return 1.0

    tokens_a = _tokens(norm_a)
    tokens_b = _tokens(norm_b)
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)


def split_artists(artists: str | None) -> list[str]:
    """Split a credit line into individual normalized artist names."""
    if not artists:
        return []
    names = (normalize_text(part) for part in _ARTIST_SPLIT_RE.split(artists))
    return [name for name in names if name]


def _name_similarity(a: str, b: str) -> float:
    if a == b:
        return 1.0
    return SequenceMatcher(None, a, b).ratio()


def artist_similarity(a: str | None, b: str | None) -> float | None:
    """Best pairwise similarity between the artists credited on each side.

    Returns None when either side credits nobody.
    """
    names_a = split_artists(a)
    names_b = split_artists(b)
    if not names_a or not names_b:
        return None
    return max(_name_similarity(x, y) for x in names_a for y in names_b)


def best_artist_pair(a: str | None, b: str | None) -> tuple[str, str] | None:
    """The pair of names behind artist_similarity, for signal metadata."""
    names_a = split_artists(a)
    names_b = split_artists(b)
    if not names_a or not names_b:
        return None
    return max(
        ((x, y) for x in names_a for y in names_b),
        key=lambda pair: _name_similarity(*pair),
    )
