"""Rule-based insights from cross-domain correlations.

Each InsightRule names two (domain, field) series, a minimum window size,
a correlation threshold and a message. New correlations are added as new
rules; the evaluation loop never changes.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Literal

import structlog
from pydantic import BaseModel, ConfigDict

from lifeintel.db.models import Domain
from lifeintel.engine.correlation import pair_by_date, pair_by_position, pearson
from lifeintel.engine.scores import round_half_up

logger = structlog.get_logger()

Polarity = Literal["positive", "negative"]


class InsightRule(BaseModel):
    """Declarative correlation rule.

    trigger:
        "absolute" fires when |r| > threshold, "positive" only when r > threshold.
    polarity:
        "by_sign" follows the sign of r; otherwise the insight is always
        reported with the given polarity.
    template:
        Message text; ``{percent}`` is replaced with round(r * 100).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    left: Domain
    left_field: str
    right: Domain
    right_field: str
    threshold: float
    min_points: int = 5
    trigger: Literal["absolute", "positive"] = "absolute"
    polarity: Literal["by_sign", "positive", "negative"] = "by_sign"
    title: str
    template: str

    def fires(self, r: float) -> bool:
        if self.trigger == "positive":
            return r > self.threshold
        return abs(r) > self.threshold

    def polarity_for(self, r: float) -> Polarity:
        if self.polarity == "by_sign":
            return "positive" if r > 0 else "negative"
        return self.polarity

    def render(self, r: float) -> str:
        return self.template.format(percent=round_half_up(r * 100))


class Insight(BaseModel):
    """A human-readable observation produced by a rule."""

    rule: str
    title: str
    text: str
    polarity: Polarity
    r: float
    n: int


DEFAULT_RULES: tuple[InsightRule, ...] = (
    InsightRule(
        name="sleep_focus",
        left=Domain.BODY,
        left_field="sleep_hours",
        right=Domain.MIND,
        right_field="focus",
        threshold=0.4,
        trigger="absolute",
        polarity="by_sign",
        title="Focus pattern detected",
        template="Your sleep has a {percent}% correlation with your daily focus level.",
    ),
    InsightRule(
        name="debt_anxiety",
        left=Domain.FINANCE,
        left_field="debts",
        right=Domain.MIND,
        right_field="anxiety",
        threshold=0.3,
        trigger="positive",
        polarity="negative",
        title="Financial pressure",
        template="Increases in your debts are directly linked to your anxiety level.",
    ),
)


def evaluate_rule(
    rule: InsightRule,
    windows: Mapping[Domain, Sequence[Any]],
    align_by_date: bool = True,
) -> Insight | None:
    """Apply one rule to the log windows.

    Returns:
        The insight, or None when data is too sparse or the rule does not fire.
    """
    left = windows.get(rule.left, [])
    right = windows.get(rule.right, [])

    if len(left) <= rule.min_points or len(right) <= rule.min_points:
        return None

    pair = pair_by_date if align_by_date else pair_by_position
    xs, ys = pair(left, right, rule.left_field, rule.right_field)
    if len(xs) <= rule.min_points:
        logger.debug("Too few aligned days", rule=rule.name, pairs=len(xs))
        return None

    r = pearson(xs, ys)
    if r is None or not rule.fires(r):
        return None

    return Insight(
        rule=rule.name,
        title=rule.title,
        text=rule.render(r),
        polarity=rule.polarity_for(r),
        r=r,
        n=len(xs),
    )


def generate_insights(
    windows: Mapping[Domain, Sequence[Any]],
    rules: Iterable[InsightRule] = DEFAULT_RULES,
    align_by_date: bool = True,
) -> list[Insight]:
    """Evaluate every rule in order and collect the ones that fire."""
    insights = []
    for rule in rules:
        insight = evaluate_rule(rule, windows, align_by_date)
        if insight:
            logger.info("Insight generated", rule=rule.name, r=round(insight.r, 3))
            insights.append(insight)
    return insights
