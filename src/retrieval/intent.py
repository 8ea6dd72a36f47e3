"""Query intent classification via an ordered table of pattern rules."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum


class IntentKind(StrEnum):
    """Classification of a user query."""

    COUNT = "count"
    DOCUMENT_REFERENCE = "document-reference"
    TOPIC_ANALYSIS = "topic-analysis"
    KEYWORD_SEARCH = "keyword-search"
    NONE = "none"


@dataclass(frozen=True)
class CountIntent:
    term: str
    document_filter: str | None = None
    episode_filter: str | None = None
    kind: IntentKind = field(default=IntentKind.COUNT, init=False)


@dataclass(frozen=True)
class DocumentReferenceIntent:
    document_name: str | None = None
    episode_number: str | None = None
    kind: IntentKind = field(default=IntentKind.DOCUMENT_REFERENCE, init=False)


@dataclass(frozen=True)
class TopicAnalysisIntent:
    document_name: str | None = None
    episode_number: str | None = None
    kind: IntentKind = field(default=IntentKind.TOPIC_ANALYSIS, init=False)


@dataclass(frozen=True)
class KeywordSearchIntent:
    terms: tuple[str, ...]
    kind: IntentKind = field(default=IntentKind.KEYWORD_SEARCH, init=False)


@dataclass(frozen=True)
class NoIntent:
    kind: IntentKind = field(default=IntentKind.NONE, init=False)


QueryIntent = (
    CountIntent | DocumentReferenceIntent | TopicAnalysisIntent | KeywordSearchIntent | NoIntent
)


# ---------------------------------------------------------------------------
# Vocabulary and term derivation
# ---------------------------------------------------------------------------

# Function words and question scaffolding dropped from keyword search terms.
QUERY_STOPWORDS: frozenset[str] = frozenset(
    {
        "the", "and", "for", "that", "this", "with", "you", "have", "are", "what",
        "was", "from", "they", "your", "but", "not", "its", "about", "any", "all",
        "can", "could", "would", "should", "does", "did", "how", "why", "when",
        "where", "who", "which", "there", "their", "them", "tell", "show", "give",
        "find", "list", "please", "some", "into", "were", "been", "has", "had",
        "our", "his", "her", "she", "him", "out", "also", "than", "then", "is",
        "me", "my", "in", "on", "of", "to", "a", "an", "it", "be", "do",
    }
)

# Smaller list for the loosened keyword pass, which also admits 2-letter terms.
LOOSE_STOPWORDS: frozenset[str] = frozenset(
    {"the", "and", "a", "an", "of", "to", "in", "is", "it", "on", "or", "be", "me", "do"}
)

WORD_RE = re.compile(r"[a-z0-9][a-z0-9'\-]*")


def _strip_possessive(word: str) -> str:
    return word[:-2] if word.endswith("'s") else word


def derive_search_terms(
    query: str,
    min_length: int = 3,
    stopwords: frozenset[str] = QUERY_STOPWORDS,
) -> list[str]:
    """Single words of at least *min_length* characters plus adjacent bigrams.

    Stopwords are removed before bigrams are formed. Order is preserved and
    duplicates dropped.
    """
    words = [_strip_possessive(w.strip("'-")) for w in WORD_RE.findall(query.lower())]
    words = [w for w in words if len(w) >= min_length and w not in stopwords]

    terms: list[str] = []
    for word in words:
        if word not in terms:
            terms.append(word)
    for first, second in zip(words, words[1:]):
        bigram = f"{first} {second}"
        if bigram not in terms:
            terms.append(bigram)
    return terms


# ---------------------------------------------------------------------------
# Parameter extraction
# ---------------------------------------------------------------------------

EPISODE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\bepisode\s*(?:#|no\.?|number)?\s*(\d{1,4})\b", re.IGNORECASE),
    re.compile(r"\bep\.?\s*(\d{1,4})\b", re.IGNORECASE),
    re.compile(r"\b[eE](\d{1,4})\b"),
]

DOCUMENT_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"[\"“]([^\"”]{3,}?)[\"”]"),
    re.compile(r"(?:^|\s)'([^']{3,}?)'(?=[\s?.!,]|$)"),
    re.compile(r"([\w\-]+\.(?:md|markdown|txt|json|csv|vtt))\b", re.IGNORECASE),
]

# "in the file X": X must look like a filename (extension, separator, or
# digit) so ordinary words ("this week", "overall") are not taken as names.
IN_FILE_PATTERN = re.compile(
    r"\bin\s+(?:the\s+)?(?:file|document|doc|transcript)\s+(?:called\s+|named\s+)?([\w\-.]{3,})",
    re.IGNORECASE,
)
FILENAME_SHAPE_RE = re.compile(r"\w[._\-]\w|\d")


def pad_episode(number: str | int) -> str:
    """Left-pad an episode number to three digits (``13`` -> ``"013"``)."""
    return str(int(str(number))).zfill(3)


def extract_episode(text: str) -> str | None:
    """Return the zero-padded episode number mentioned in *text*, if any."""
    for pattern in EPISODE_PATTERNS:
        match = pattern.search(text)
        if match:
            return pad_episode(match.group(1))
    return None


def extract_document_name(text: str) -> str | None:
    """Return a quoted, filename-like, or "in the file X" document reference."""
    for pattern in DOCUMENT_PATTERNS:
        for match in pattern.finditer(text):
            name = match.group(1).strip().rstrip("?.!,")
            if name:
                return name
    for match in IN_FILE_PATTERN.finditer(text):
        name = match.group(1).rstrip("?.!,")
        if FILENAME_SHAPE_RE.search(name):
            return name
    return None


def _clean_term(raw: str) -> str:
    return raw.strip().strip("\"'“”‘’").strip()


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

_TERM_END = r"(?=\s+(?:in|within|across|throughout|during|on)\b|\s*[?.!]|\s*$)"
_WORD_PREFIX = r"(?:the\s+)?(?:(?:word|term|phrase|name)\s+)?"

COUNT_PATTERNS: list[re.Pattern[str]] = [
    re.compile(
        r"\bhow\s+many\s+times\s+(?:is|was|are|were|does|did|do|has|have|had)\s+"
        + _WORD_PREFIX
        + r"(?P<term>.+?)\s+(?:mentioned|said|used|referenced|brought\s+up|"
        r"appear(?:s|ed)?|occur(?:s|red)?|come\s+up|comes\s+up|show\s+up)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"\bhow\s+often\s+(?:is|was|are|were|does|did|do)\s+"
        + _WORD_PREFIX
        + r"(?P<term>.+?)\s+(?:mentioned|said|used|referenced|appear(?:s|ed)?|come\s+up)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"\bhow\s+many\s+times\s+(?:does|did|do)\s+.+?\s+(?:say|mention|use)\s+"
        + _WORD_PREFIX
        + r"(?P<term>[^?.!]+?)"
        + _TERM_END,
        re.IGNORECASE,
    ),
    re.compile(
        r"\bcount\s+(?:the\s+)?(?:number\s+of\s+)?(?:occurrences|instances|mentions|times)\s+"
        r"(?:of\s+)?"
        + _WORD_PREFIX
        + r"(?P<term>[^?.!]+?)"
        + _TERM_END,
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(?:how\s+many|number\s+of)\s+(?:mentions|occurrences|instances)\s+of\s+"
        + _WORD_PREFIX
        + r"(?P<term>[^?.!]+?)"
        + _TERM_END,
        re.IGNORECASE,
    ),
]

TOPIC_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\btopics?\b", re.IGNORECASE),
    re.compile(r"\bdiscuss(?:ed|es|ing|ion|ions)?\b", re.IGNORECASE),
    re.compile(r"\bsummar(?:y|ies|ize|ise|ized|ised)\b", re.IGNORECASE),
    re.compile(r"\bwhat\s+happened\b", re.IGNORECASE),
    re.compile(r"\btalk(?:ed|ing)?\s+about\b", re.IGNORECASE),
    re.compile(r"\b(?:main|key)\s+(?:points?|ideas?|themes?)\b", re.IGNORECASE),
    re.compile(r"\bthemes?\b", re.IGNORECASE),
    re.compile(r"\boverview\b", re.IGNORECASE),
    re.compile(r"\bthat\s+episode\b", re.IGNORECASE),
    re.compile(r"\bepisodes?\b", re.IGNORECASE),
    re.compile(r"\btranscripts?\b", re.IGNORECASE),
    re.compile(r"\bgtm\b", re.IGNORECASE),
]


def _count_intent(query: str, match: re.Match[str]) -> QueryIntent | None:
    term = _clean_term(match.group("term"))
    if not term:
        return None
    remainder = query[match.end("term") :]
    return CountIntent(
        term=term,
        document_filter=extract_document_name(remainder),
        episode_filter=extract_episode(remainder) or extract_episode(query[: match.start("term")]),
    )


def _document_reference_intent(query: str, match: re.Match[str]) -> QueryIntent | None:
    name = extract_document_name(query)
    episode = extract_episode(query)
    if name is None and episode is None:
        return None
    return DocumentReferenceIntent(document_name=name, episode_number=episode)


def _topic_intent(query: str, match: re.Match[str]) -> QueryIntent | None:
    return TopicAnalysisIntent()


def _keyword_intent(query: str, match: re.Match[str]) -> QueryIntent | None:
    terms = derive_search_terms(query)
    if not terms:
        return None
    return KeywordSearchIntent(terms=tuple(terms))


@dataclass(frozen=True)
class IntentRule:
    """A named group of patterns and the extractor run on the first match.

    An extractor returning None lets evaluation continue with the next rule.
    """

    name: IntentKind
    patterns: tuple[re.Pattern[str], ...]
    extract: Callable[[str, re.Match[str]], QueryIntent | None]

    def apply(self, query: str) -> QueryIntent | None:
        for pattern in self.patterns:
            match = pattern.search(query)
            if match:
                intent = self.extract(query, match)
                if intent is not None:
                    return intent
        return None


INTENT_RULES: list[IntentRule] = [
    IntentRule(IntentKind.COUNT, tuple(COUNT_PATTERNS), _count_intent),
    IntentRule(
        IntentKind.DOCUMENT_REFERENCE,
        (re.compile(r"\S"),),
        _document_reference_intent,
    ),
    IntentRule(IntentKind.TOPIC_ANALYSIS, tuple(TOPIC_PATTERNS), _topic_intent),
    IntentRule(IntentKind.KEYWORD_SEARCH, (re.compile(r"\w"),), _keyword_intent),
]


def classify_intent(query: str) -> QueryIntent:
    """Classify *query*; the first rule producing an intent wins.

    Args:
        query: The raw user query.

    Returns:
        One of the intent variants; :class:`NoIntent` for empty or
        unparseable queries.
    """
    text = query.strip()
    if not text:
        return NoIntent()

    for rule in INTENT_RULES:
        intent = rule.apply(text)
        if intent is not None:
            return intent
    return NoIntent()
