"""
German B2 Components - Extract structural features from learner text

This module handles all text analysis: tokenization, marker counts and
the two error-signal heuristics. Scoring lives in scoring.py.
"""

from typing import Dict, List, Set
from dataclasses import dataclass, field

from .taxonomies import (
    MOOD_PATTERN, PASSIVE_PATTERN, NOMINAL_PATTERN, SUBORDINATOR_PATTERN,
    CONNECTOR_PATTERNS, DISCOURSE_PATTERN, PAST_CONDITIONAL_PATTERN,
    FIRST_PERSON_OPENER, ARTICLE_SIGNAL_PATTERN, PREPOSITION_SIGNAL_PATTERN,
    SENTENCE_SPLIT
)


@dataclass
class TextFeatures:
    """Structural features extracted from a (trimmed) learner answer"""
    text: str
    words: List[str]
    sentences: List[str]
    unique_words: Set[str]

    mood_count: int = 0
    passive_count: int = 0
    subordinate_count: int = 0
    connector_count: int = 0  # distinct connector types, not occurrences
    nominal_count: int = 0

    connectors_found: List[str] = field(default_factory=list)
    article_issue: bool = False
    preposition_issue: bool = False
    has_discourse_marker: bool = False
    first_person_opener: bool = False
    has_past_or_conditional: bool = False

    @property
    def has_mood(self) -> bool:
        return self.mood_count > 0

    @property
    def has_passive(self) -> bool:
        return self.passive_count > 0

    @property
    def has_nominal(self) -> bool:
        return self.nominal_count > 0

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def sentence_count(self) -> int:
        return len(self.sentences)

    @property
    def avg_sentence_length(self) -> float:
        return len(self.words) / max(1, len(self.sentences))

    @property
    def too_simple(self) -> bool:
        return (
            len(self.sentences) < 4
            and self.subordinate_count == 0
            and self.connector_count == 0
        )


def split_words(text: str) -> List[str]:
    return [w for w in text.split() if w]


def split_sentences(text: str) -> List[str]:
    return [s.strip() for s in SENTENCE_SPLIT.split(text) if s.strip()]


def count_mood_markers(text: str) -> int:
    return len(MOOD_PATTERN.findall(text))


def count_passive(text: str) -> int:
    return len(PASSIVE_PATTERN.findall(text))


def count_subordinators(text: str) -> int:
    return len(SUBORDINATOR_PATTERN.findall(text))


def count_nominalizations(text: str) -> int:
    """
    2 when any nominal suffix is present, else 0.

    Mirrors the legacy counter, which measured a single non-global match
    (whole match plus one group) instead of counting occurrences.
    """
    return 2 if NOMINAL_PATTERN.search(text) else 0


def find_connectors(text: str) -> List[str]:
    """Distinct advanced connectors present, in table order"""
    return [conn for conn, pattern in CONNECTOR_PATTERNS.items() if pattern.search(text)]


def article_signal(text: str) -> bool:
    """Indefinite article directly before a capitalized word"""
    return bool(ARTICLE_SIGNAL_PATTERN.search(text))


def preposition_signal(text: str) -> bool:
    """Known preposition + case slips ('mit der Problem', 'wegen dem')"""
    return bool(PREPOSITION_SIGNAL_PATTERN.search(text))


def grammar_signals(text: str) -> Dict[str, bool]:
    return {
        'article_issue': article_signal(text),
        'preposition_issue': preposition_signal(text),
    }


def extract_features(text: str) -> TextFeatures:
    """Extract all structural features from (already trimmed) learner text"""

    words = split_words(text)
    sentences = split_sentences(text)
    connectors = find_connectors(text)

    return TextFeatures(
        text=text,
        words=words,
        sentences=sentences,
        unique_words={w.lower() for w in words},
        mood_count=count_mood_markers(text),
        passive_count=count_passive(text),
        subordinate_count=count_subordinators(text),
        connector_count=len(connectors),
        nominal_count=count_nominalizations(text),
        connectors_found=connectors,
        article_issue=article_signal(text),
        preposition_issue=preposition_signal(text),
        has_discourse_marker=bool(DISCOURSE_PATTERN.search(text)),
        first_person_opener=bool(FIRST_PERSON_OPENER.search(' '.join(sentences))),
        has_past_or_conditional=bool(PAST_CONDITIONAL_PATTERN.search(text)),
    )


def weakness_flags(features: TextFeatures) -> Dict[str, bool]:
    """Boolean flags keyed as in taxonomies.WEAKNESS_RULES"""
    return {
        'no_mood': not features.has_mood,
        'no_passive': not features.has_passive,
        'no_nominal': not features.has_nominal,
        'few_subordinates': features.subordinate_count < 2,
        'few_connectors': features.connector_count < 2,
        'article_issue': features.article_issue,
        'preposition_issue': features.preposition_issue,
    }
