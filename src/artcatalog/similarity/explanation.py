# ABOUTME: Human-readable justification strings for similarity results.
# ABOUTME: Rules are an ordered table of (signal type, fragment) pairs, evaluated in priority order.

from collections.abc import Callable

from artcatalog.similarity.config import DEFAULT_NOISE_FLOOR
from artcatalog.similarity.types import SignalType, SimilarityResult

FragmentFn = Callable[[SimilarityResult], str]

EXPLANATION_RULES: tuple[tuple[SignalType, FragmentFn], ...] = (
    (SignalType.DISTANCE, lambda result: f"{round(result.distance_meters)}m away"),
    (SignalType.TITLE, lambda _result: "similar title"),
    (SignalType.TAGS, lambda _result: "matching tags"),
    (SignalType.ARTIST, lambda _result: "same artist"),
    (SignalType.REFERENCE, lambda _result: "same source id"),
)


def explain(result: SimilarityResult, noise_floor: float = DEFAULT_NOISE_FLOOR) -> str:
    """Summarize a result, e.g. ``"87% similar (42m away, similar title)"``.

    Only signals whose raw score exceeds the noise floor are mentioned.
    """
    fragments = []
    for signal_type, fragment in EXPLANATION_RULES:
        signal = result.signal(signal_type)
        if signal is not None and signal.raw_score > noise_floor:
            fragments.append(fragment(result))

    percent = round(result.overall_score * 100)
    if not fragments:
        return f"{percent}% similar"
    return f"{percent}% similar ({', '.join(fragments)})"
