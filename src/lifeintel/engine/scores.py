"""Domain score calculation.

Every score is an integer in [0, 100] computed from the most recent log of
its domain. A domain with no logs scores 0: no data, no credit.
"""

import math

from pydantic import BaseModel

from lifeintel.db.models import BodyLogRead, DisciplineDay, FinanceLogRead, MindLogRead

# Minutes of focused work in one day that earn a perfect discipline score
DISCIPLINE_FULL_MINUTES = 240


class DomainScores(BaseModel):
    """Normalized scores for each domain plus the overall average."""

    body: int
    mind: int
    finance: int
    discipline: int
    overall: int
    financial_pressure: int


def round_half_up(value: float) -> int:
    """Round halves upward (2.5 -> 3, -2.5 -> -2), unlike Python's banker's rounding."""
    return math.floor(value + 0.5)


def normalize_5_to_100(value: float) -> int:
    """Map a 0-5 rating onto 0-100, clamped."""
    return max(0, min(100, round_half_up(value / 5 * 100)))


def body_score(log: BodyLogRead | None) -> int:
    if log is None:
        return 0
    training = 5 if log.training_done else 0
    return normalize_5_to_100((log.sleep_quality + log.energy_level + training) / 3)


def mind_score(log: MindLogRead | None) -> int:
    """Average of mood, focus and inverted anxiety/stress."""
    if log is None:
        return 0
    return normalize_5_to_100((log.mood + (6 - log.anxiety) + (6 - log.stress) + log.focus) / 4)


def financial_pressure(log: FinanceLogRead | None) -> int:
    """Debts as a percentage of income, capped at 100.

    Zero income divides by 1. Debts at or above income saturate before
    rounding, so very large values cannot overflow.
    """
    if log is None:
        return 0
    ratio = log.debts / max(log.income, 1)
    if ratio >= 1:
        return 100
    return round_half_up(ratio * 100)


def finance_score(log: FinanceLogRead | None) -> int:
    if log is None:
        return 0
    return 100 - financial_pressure(log)


def discipline_score(day: DisciplineDay | None) -> int:
    if day is None:
        return 0
    return min(100, round_half_up(day.total_minutes / DISCIPLINE_FULL_MINUTES * 100))


def overall_score(*scores: int) -> int:
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores))


def compute_scores(
    body: BodyLogRead | None,
    mind: MindLogRead | None,
    finance: FinanceLogRead | None,
    discipline: DisciplineDay | None,
) -> DomainScores:
    """Score the latest log of each domain."""
    scores = {
        "body": body_score(body),
        "mind": mind_score(mind),
        "finance": finance_score(finance),
        "discipline": discipline_score(discipline),
    }
    return DomainScores(
        **scores,
        overall=overall_score(*scores.values()),
        financial_pressure=financial_pressure(finance),
    )
