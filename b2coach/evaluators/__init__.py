"""
Language evaluators

Each entry maps a CLI/registry name to a class exposing
evaluate(text, options), evaluate_batch and generate_report.
"""

from .german import GermanEvaluator

EVALUATORS = {
    'german': GermanEvaluator,  # B2 rule-based scorer with optional remote evaluation
}


def get_evaluator(name: str):
    """Evaluator class registered under name; ValueError for unknown names"""
    try:
        return EVALUATORS[name]
    except KeyError:
        known = ', '.join(sorted(EVALUATORS))
        raise ValueError(f"Unknown evaluator: '{name}'. Available: {known}") from None


def list_evaluators():
    """Registered names, sorted for stable CLI choices"""
    return sorted(EVALUATORS)


__all__ = ['EVALUATORS', 'get_evaluator', 'list_evaluators']
