"""Text helpers shared by the extraction and evidence services."""

import re
from collections import Counter
from typing import Callable, Iterable, List, NamedTuple, Set, Tuple, TypeVar

T = TypeVar("T")

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "is", "are", "was", "were", "be", "been", "being", "have",
    "has", "had", "do", "does", "did", "will", "would", "could", "should",
    "may", "might", "can", "this", "that", "these", "those",
})

# Function words counted by the language heuristic, in tie-break order.
LANGUAGE_MARKERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("en", ("the", "and", "is", "are", "was", "were", "have", "has", "will", "would")),
    ("es", ("el", "la", "es", "son", "que", "de", "en", "un", "una", "con")),
    ("fr", ("le", "la", "est", "sont", "que", "de", "en", "un", "une", "avec")),
    ("de", ("der", "die", "das", "ist", "sind", "und", "mit", "ein", "eine", "von")),
)

UNKNOWN_LANGUAGE = "unknown"

_SENTENCE_RE = re.compile(r"[^.!?]+")
_PUNCTUATION_RE = re.compile(r"[^\w\s]")


class Sentence(NamedTuple):
    """A trimmed sentence and its offsets in the source text."""
    text: str
    start: int
    end: int


def split_sentences(text: str, min_length: int = 10) -> List[Sentence]:
    """Split text on runs of sentence punctuation.

    Args:
        text: Text to split
        min_length: Shortest trimmed fragment kept

    Returns:
        Trimmed sentences with their character offsets
    """
    sentences = []
    for match in _SENTENCE_RE.finditer(text):
        raw = match.group()
        stripped = raw.strip()
        if len(stripped) < min_length:
            continue
        start = match.start() + (len(raw) - len(raw.lstrip()))
        sentences.append(Sentence(stripped, start, start + len(stripped)))
    return sentences


def tokenize(text: str) -> List[str]:
    """Lowercase text, replace punctuation with spaces and split on whitespace."""
    return _PUNCTUATION_RE.sub(" ", text.lower()).split()


def _is_keyword(token: str) -> bool:
    return len(token) > 3 and token not in STOP_WORDS


def extract_keywords(text: str, limit: int = 10) -> List[str]:
    """Return the first ``limit`` distinct keywords in order of appearance."""
    keywords: List[str] = []
    seen: Set[str] = set()
    for token in tokenize(text):
        if _is_keyword(token) and token not in seen:
            seen.add(token)
            keywords.append(token)
            if len(keywords) == limit:
                break
    return keywords


def term_frequency_topics(text: str, limit: int = 10) -> List[str]:
    """Most frequent keywords, ties broken by first occurrence."""
    counts = Counter(token for token in tokenize(text) if _is_keyword(token))
    # Counter preserves insertion order, and most_common sorts stably.
    return [term for term, _ in counts.most_common(limit)]


def _word_set(text: str) -> Set[str]:
    return set(text.lower().split())


def jaccard_similarity(first: str, second: str) -> float:
    """Jaccard similarity of the lowercase whitespace word sets."""
    a, b = _word_set(first), _word_set(second)
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def deduplicate(
    items: Iterable[T],
    key: Callable[[T], str],
    threshold: float = 0.8,
) -> List[T]:
    """Drop items whose text is too similar to an earlier item.

    An item is a duplicate when its Jaccard similarity with any kept item
    is strictly greater than ``threshold``. The first occurrence wins.
    """
    kept: List[T] = []
    for item in items:
        text = key(item)
        if any(jaccard_similarity(text, key(other)) > threshold for other in kept):
            continue
        kept.append(item)
    return kept


def detect_language(text: str) -> Tuple[str, float]:
    """Guess the language of text from common function words.

    Counts how many marker words of each language appear in the first
    1000 characters. Returns ``("unknown", 0.3)`` when none match.
    """
    sample = f" {' '.join(text.lower()[:1000].split())} "
    best_language, best_count = UNKNOWN_LANGUAGE, 0
    for language, markers in LANGUAGE_MARKERS:
        count = sum(1 for word in markers if f" {word} " in sample)
        if count > best_count:
            best_language, best_count = language, count
    if best_count == 0:
        return UNKNOWN_LANGUAGE, 0.3
    return best_language, min(0.9, best_count / 10)
