"""
German B2 Scoring - Grammar, Complexity, Vocabulary, Argument, Fluency

Each dimension is a fixed baseline plus additive bonuses/penalties,
then clamped to 0-100.
"""

import math
from typing import Dict

from .components import TextFeatures


SCORE_FIELDS = [
    'grammar_score',
    'complexity_score',
    'vocabulary_score',
    'argument_score',
    'fluency_potential',
]

TOO_SIMPLE_COMPLEXITY_PENALTY = 20
TOO_SIMPLE_ARGUMENT_PENALTY = 15
PRESSURE_GRAMMAR_PENALTY = 8


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (Python's round() is banker's rounding)"""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def score_grammar(features: TextFeatures) -> int:
    score = 56
    score += 12 if features.has_mood else -10
    score += 10 if features.has_passive else -8
    score += -7 if features.article_issue else 5
    score += -7 if features.preposition_issue else 5
    return score


def score_complexity(features: TextFeatures) -> int:
    score = 40 + features.subordinate_count * 10 + features.connector_count * 8
    score += 8 if features.has_nominal else -8
    score += min(8, round_half_up(features.avg_sentence_length / 3))
    return score


def score_vocabulary(features: TextFeatures) -> int:
    ratio = len(features.unique_words) / len(features.words)
    return 38 + round_half_up(ratio * 42) + features.nominal_count * 4


def score_argument(features: TextFeatures) -> int:
    score = 35 + features.connector_count * 12
    score += 14 if features.sentence_count >= 5 else -8
    score += 12 if features.has_discourse_marker else -6
    return score


def score_fluency(features: TextFeatures) -> int:
    return (
        42
        + min(20, features.sentence_count * 3)
        + min(16, round_half_up(features.word_count / 12))
    )


def applies_pressure_penalty(features: TextFeatures, pressure_mode: bool) -> bool:
    """Opens with ich/wir and never uses a past or conditional form"""
    return (
        pressure_mode
        and features.first_person_opener
        and not features.has_past_or_conditional
    )


def score_all(features: TextFeatures, pressure_mode: bool = True) -> Dict[str, int]:
    """
    Compute the five clamped sub-scores plus overall_score

    Returns: dict keyed by SCORE_FIELDS + 'overall_score'
    """

    grammar = score_grammar(features)
    complexity = score_complexity(features)
    vocabulary = score_vocabulary(features)
    argument = score_argument(features)
    fluency = score_fluency(features)

    if features.too_simple:
        complexity -= TOO_SIMPLE_COMPLEXITY_PENALTY
        argument -= TOO_SIMPLE_ARGUMENT_PENALTY

    if applies_pressure_penalty(features, pressure_mode):
        grammar -= PRESSURE_GRAMMAR_PENALTY

    scores = {
        'grammar_score': clamp_score(grammar),
        'complexity_score': clamp_score(complexity),
        'vocabulary_score': clamp_score(vocabulary),
        'argument_score': clamp_score(argument),
        'fluency_potential': clamp_score(fluency),
    }
    scores['overall_score'] = overall_from(scores)
    return scores


def overall_from(scores: Dict[str, int]) -> int:
    """Rounded mean of the five sub-scores"""
    return round_half_up(sum(scores[f] for f in SCORE_FIELDS) / len(SCORE_FIELDS))
