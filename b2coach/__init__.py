"""
B2 Coach - Scoring core
"""

from .evaluators import get_evaluator, list_evaluators
from .progress import ProgressTracker, ProgressLedger, blended_score

__all__ = [
    'get_evaluator',
    'list_evaluators',
    'ProgressTracker',
    'ProgressLedger',
    'blended_score',
]
