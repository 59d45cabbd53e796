"""Dashboard aggregator combining every life domain."""

from collections.abc import Iterable

import numpy as np
import structlog
from pydantic import BaseModel, Field

from lifeintel.config.settings import settings
from lifeintel.db.models import (
    BodyLogRead,
    DisciplineDay,
    Domain,
    FinanceLogRead,
    MindLogRead,
)
from lifeintel.engine.insights import DEFAULT_RULES, Insight, InsightRule, generate_insights
from lifeintel.engine.scores import DomainScores, compute_scores
from lifeintel.store.base import WINDOW_LIMIT, LogStore

logger = structlog.get_logger()


class WindowAverages(BaseModel):
    """Body window averages; None when nothing has been logged."""

    sleep_hours: float | None = None
    energy_level: float | None = None


class DashboardData(BaseModel):
    """Everything the dashboard view needs.

    ``has_data`` is False only when no domain has a single log. In that state
    ``scores`` is None, which keeps "nothing logged yet" distinct from
    "logged, and currently at zero".
    """

    has_data: bool
    body: list[BodyLogRead] = []
    mind: list[MindLogRead] = []
    finance: list[FinanceLogRead] = []
    discipline: list[DisciplineDay] = []
    scores: DomainScores | None = None
    insights: list[Insight] = []
    averages: WindowAverages = Field(default_factory=WindowAverages)

    @classmethod
    def empty(cls) -> "DashboardData":
        return cls(has_data=False)


class DashboardAggregator:
    """Aggregates the recent window of every domain into DashboardData.

    Combines:
    - Latest log per domain -> domain scores and overall score
    - Full windows -> correlation insights
    - Body window -> sleep and energy averages
    """

    def __init__(
        self,
        store: LogStore,
        rules: Iterable[InsightRule] = DEFAULT_RULES,
        align_by_date: bool | None = None,
    ) -> None:
        self.store = store
        self.rules = tuple(rules)
        self.align_by_date = (
            settings.insights.align_by_date if align_by_date is None else align_by_date
        )

    def get_dashboard(self) -> DashboardData:
        """Build the dashboard from the last WINDOW_LIMIT days of logs."""
        body = self.store.query(Domain.BODY, WINDOW_LIMIT)
        mind = self.store.query(Domain.MIND, WINDOW_LIMIT)
        finance = self.store.query(Domain.FINANCE, WINDOW_LIMIT)
        discipline = self.store.aggregate(Domain.DISCIPLINE, WINDOW_LIMIT)

        logger.debug(
            "Dashboard windows loaded",
            body=len(body),
            mind=len(mind),
            finance=len(finance),
            discipline=len(discipline),
        )

        if not (body or mind or finance or discipline):
            return DashboardData.empty()

        # Windows are most recent first
        scores = compute_scores(
            body[0] if body else None,
            mind[0] if mind else None,
            finance[0] if finance else None,
            discipline[0] if discipline else None,
        )

        insights = generate_insights(
            {
                Domain.BODY: body,
                Domain.MIND: mind,
                Domain.FINANCE: finance,
                Domain.DISCIPLINE: discipline,
            },
            rules=self.rules,
            align_by_date=self.align_by_date,
        )

        return DashboardData(
            has_data=True,
            body=body,
            mind=mind,
            finance=finance,
            discipline=discipline,
            scores=scores,
            insights=insights,
            averages=self._averages(body),
        )

    def _averages(self, body: list[BodyLogRead]) -> WindowAverages:
        if not body:
            return WindowAverages()
        return WindowAverages(
            sleep_hours=float(np.mean([log.sleep_hours for log in body])),
            energy_level=float(np.mean([log.energy_level for log in body])),
        )


# Convenience function
def get_dashboard(store: LogStore) -> DashboardData:
    """Get dashboard data with the default rules."""
    return DashboardAggregator(store).get_dashboard()
