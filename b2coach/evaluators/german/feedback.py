"""
German B2 Feedback Generation

Builds weakness tags, missing-structure tags, the cosmetic correction
and the next-challenge instruction from extracted features.
"""

import re
from typing import List

from .components import TextFeatures, weakness_flags
from .taxonomies import (
    WEAKNESS_RULES,
    MISSING_MOOD, MISSING_PASSIVE, MISSING_NOMINAL,
    MISSING_SUBORDINATE, MISSING_CONNECTORS,
    CHALLENGE_TOO_SIMPLE, CHALLENGE_PRESSURE, CHALLENGE_EXPAND, CHALLENGE_DEFAULT
)

ESSAY_MIN_WORDS = 120
DISCUSSION_MIN_SENTENCES = 5


def build_weaknesses(features: TextFeatures) -> List[str]:
    """Weakness tags in rule-table order (not severity-ranked)"""
    flags = weakness_flags(features)
    return [tag for tag, key in WEAKNESS_RULES if flags[key]]


def build_missing_structures(features: TextFeatures) -> List[str]:
    missing = []
    if not features.has_mood:
        missing.append(MISSING_MOOD)
    if not features.has_passive:
        missing.append(MISSING_PASSIVE)
    if not features.has_nominal:
        missing.append(MISSING_NOMINAL)
    if features.subordinate_count < 2:
        missing.append(MISSING_SUBORDINATE)
    if features.connector_count < 2:
        missing.append(MISSING_CONNECTORS)
    return missing


def correct_text(text: str) -> str:
    """
    Cosmetic normalization only - not a grammar corrector.

    Capitalizes a free-standing ' ich ', removes space before commas
    and collapses repeated whitespace.
    """
    corrected = re.sub(r' ich ', ' Ich ', text, flags=re.IGNORECASE)
    corrected = corrected.replace(' ,', ',')
    corrected = re.sub(r'\s{2,}', ' ', corrected)
    return corrected.strip()


def is_short_answer(features: TextFeatures, mode: str) -> bool:
    if mode == 'essay':
        return features.word_count < ESSAY_MIN_WORDS
    return features.sentence_count < DISCUSSION_MIN_SENTENCES


def choose_next_challenge(features: TextFeatures, mode: str, pressure_mode: bool) -> str:
    """First matching rule wins"""

    if features.too_simple:
        return CHALLENGE_TOO_SIMPLE

    if pressure_mode and not features.has_mood and not features.has_nominal:
        return CHALLENGE_PRESSURE

    if is_short_answer(features, mode):
        return CHALLENGE_EXPAND

    return CHALLENGE_DEFAULT
