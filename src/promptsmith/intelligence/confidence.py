"""
Confidence calculation utilities.

Shared helpers for turning raw scores into calibrated 0-100 confidence
values. All functions are pure and safe to call from concurrent invocations.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

# Category upper bounds (inclusive)
LOW_MAX = 49
MEDIUM_MAX = 69
HIGH_MAX = 84
VERY_HIGH_MIN = 85


@dataclass(frozen=True)
class ConfidenceResult:
    percentage: int
    category: str  # low, medium, high, very-high


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_confidence(value: float) -> int:
    """Round and clamp a value into [0, 100]."""
    return min(100, max(0, round_half_up(value)))


def get_confidence_category(percentage: int) -> str:
    if percentage <= LOW_MAX:
        return "low"
    if percentage <= MEDIUM_MAX:
        return "medium"
    if percentage <= HIGH_MAX:
        return "high"
    return "very-high"


def create_confidence_result(percentage: float) -> ConfidenceResult:
    clamped = clamp_confidence(percentage)
    return ConfidenceResult(percentage=clamped, category=get_confidence_category(clamped))


def additive_confidence(base: float, bonuses: Iterable[Tuple[bool, float]]) -> int:
    """Base confidence plus a bonus for every condition that holds.

    Example::

        additive_confidence(50, [(has_requirements, 20), (has_goals, 15)])
    """
    total = base
    for condition, bonus in bonuses:
        if condition:
            total += bonus
    return clamp_confidence(total)


def ratio_confidence(primary: float, total: float,
                     min_confidence: float = 0,
                     fallback: int = 50) -> int:
    """Primary score as a percentage of the total score."""
    if total == 0:
        return fallback

    percentage = round_half_up(primary / total * 100)
    return clamp_confidence(max(min_confidence, percentage))


def competition_penalty(confidence: float, primary: float, secondary: float,
                        threshold: float = 0.15,
                        penalty: float = 15,
                        min_confidence: float = 60) -> int:
    """Reduce confidence when the runner-up score is close to the primary one."""
    if primary > 0 and (primary - secondary) < primary * threshold:
        return clamp_confidence(max(min_confidence, confidence - penalty))
    return clamp_confidence(confidence)


def weighted_confidence(scores: Iterable[Tuple[float, float]]) -> int:
    """Weighted mean of (confidence, weight) pairs; 50 when no weight is given."""
    pairs = list(scores)
    total_weight = sum(weight for _, weight in pairs)
    if total_weight == 0:
        return 50

    weighted_sum = sum(value * weight for value, weight in pairs)
    return clamp_confidence(weighted_sum / total_weight)
