"""Exponential-moving-average blending of new scores into a running profile."""

from ..evaluators.german.scoring import round_half_up

HISTORY_WEIGHT = 0.65
LATEST_WEIGHT = 0.35


def blended_score(current: int, latest: int) -> int:
    """History dominates so one submission cannot swing the profile."""
    return round_half_up(current * HISTORY_WEIGHT + latest * LATEST_WEIGHT)
