"""Scoring, correlation and insight engine."""

from lifeintel.engine.correlation import (
    CorrelationResult,
    correlate,
    pair_by_date,
    pair_by_position,
    pearson,
)
from lifeintel.engine.insights import (
    DEFAULT_RULES,
    Insight,
    InsightRule,
    evaluate_rule,
    generate_insights,
)
from lifeintel.engine.scores import (
    DomainScores,
    body_score,
    compute_scores,
    discipline_score,
    finance_score,
    financial_pressure,
    mind_score,
    normalize_5_to_100,
    overall_score,
)

__all__ = [
    # Correlation
    "CorrelationResult",
    "correlate",
    "pearson",
    "pair_by_date",
    "pair_by_position",
    # Insights
    "DEFAULT_RULES",
    "Insight",
    "InsightRule",
    "evaluate_rule",
    "generate_insights",
    # Scores
    "DomainScores",
    "normalize_5_to_100",
    "body_score",
    "mind_score",
    "financial_pressure",
    "finance_score",
    "discipline_score",
    "overall_score",
    "compute_scores",
]
