"""
German B2 Evaluator Package

Evaluates learner answers in German against B2 criteria:
- Konjunktiv II, Passiv, Nominalisierung
- Subordinate clauses and advanced connectors
- Grammar, Complexity, Vocabulary, Argument, Fluency scores (0-100)
"""

from .evaluator import (
    GermanEvaluator, EvaluationResult, EvaluationOptions, DIMENSIONS, empty_result
)
from .components import TextFeatures, extract_features, grammar_signals
from .scoring import score_all, round_half_up
from .feedback import build_weaknesses, build_missing_structures, correct_text, choose_next_challenge
from .api_evaluator import RemoteConfig, evaluate_with_api, normalize_payload
from .caching import ResponseCache

__version__ = '1.0.0'

__all__ = [
    'GermanEvaluator',
    'EvaluationResult',
    'EvaluationOptions',
    'DIMENSIONS',
    'empty_result',
    'TextFeatures',
    'extract_features',
    'grammar_signals',
    'score_all',
    'round_half_up',
    'build_weaknesses',
    'build_missing_structures',
    'correct_text',
    'choose_next_challenge',
    'RemoteConfig',
    'evaluate_with_api',
    'normalize_payload',
    'ResponseCache',
]
