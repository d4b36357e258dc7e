from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Optional

import structlog

from ..domain.records import ProblemEvent

logger = structlog.get_logger()


@dataclass(frozen=True)
class DashboardSummary:
    due_count: int
    upcoming_count: int
    source_counts: Dict[str, int] = field(default_factory=dict)
    latest_ingestion: Optional[ProblemEvent] = None


class DashboardService:
    def __init__(self, review_service, ingestion_service):
        self.review_service = review_service
        self.ingestion_service = ingestion_service

    def summary(self, user_id):
        due = self.review_service.due_cards(user_id)
        upcoming = self.review_service.upcoming_cards(user_id)
        source_counts = dict(Counter(card.source for card in upcoming))
        summary = DashboardSummary(
            due_count=len(due),
            upcoming_count=len(upcoming),
            source_counts=source_counts,
            latest_ingestion=self.ingestion_service.latest_for_user(user_id),
        )
        logger.info("dashboard_built",
            user_id=str(user_id),
            due_count=summary.due_count,
            upcoming_count=summary.upcoming_count,
            source_counts=source_counts,
        )
        return summary
