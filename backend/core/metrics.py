"""
Set metrics for exercise progress tracking.

Pure functions deriving max weight, volume, reps, set count and the
Epley estimated 1RM from a collection of performed sets. Sets that are not
marked completed never count.

Any object exposing ``actual_reps``, ``actual_weight`` and ``is_completed``
is accepted (persisted WorkoutSet or live ActiveWorkoutSet).
"""
from typing import Iterable, List, Protocol


class PerformedSet(Protocol):
    """Structural type for anything that records a performed set."""

    @property
    def actual_reps(self) -> int: ...

    @property
    def actual_weight(self) -> float: ...

    @property
    def is_completed(self) -> bool: ...


def _completed(sets: Iterable[PerformedSet]) -> List[PerformedSet]:
    return [s for s in sets if s.is_completed]


# =============================================================================
# 1RM Calculation
# =============================================================================


def calculate_1rm_epley(weight: float, reps: int) -> float:
    """
    Estimate 1RM for a single set using the Epley formula.

    Formula: 1RM = weight * (1 + reps/30)

    Args:
        weight: Weight lifted
        reps: Number of reps completed

    Returns:
        Estimated 1RM (unrounded)
    """
    return weight * (1.0 + reps / 30.0)


def estimated_one_rep_max(sets: Iterable[PerformedSet]) -> float:
    """
    Best single-set Epley estimate across completed, loaded sets.

    Zero-weight sets (bodyweight or warm-up) are ignored.

    Args:
        sets: Performed sets

    Returns:
        Highest estimate, or 0.0 when no completed set carries weight
    """
    best = 0.0
    for s in _completed(sets):
        if s.actual_weight <= 0:
            continue
        best = max(best, calculate_1rm_epley(s.actual_weight, s.actual_reps))
    return best


# =============================================================================
# Aggregates
# =============================================================================


def max_weight(sets: Iterable[PerformedSet]) -> float:
    """Heaviest completed set, or 0.0 when nothing is completed."""
    weights = [s.actual_weight for s in _completed(sets)]
    return max(weights) if weights else 0.0


def total_volume(sets: Iterable[PerformedSet]) -> float:
    """Sum of weight x reps over completed sets."""
    return float(sum(s.actual_weight * s.actual_reps for s in _completed(sets)))


def total_reps(sets: Iterable[PerformedSet]) -> int:
    return sum(s.actual_reps for s in _completed(sets))


def total_sets(sets: Iterable[PerformedSet]) -> int:
    return len(_completed(sets))
