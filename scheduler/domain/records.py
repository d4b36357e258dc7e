"""Plain records passed between the services and the card stores."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from .enums import Grade, ProblemStatus


@dataclass(frozen=True)
class IngestProblemInput:
    user_id: UUID
    source: str
    problem_slug: str
    title: str
    url: str
    status: ProblemStatus
    occurred_at: datetime


@dataclass(frozen=True)
class ProblemEvent:
    id: int
    user_id: UUID
    source: str
    problem_slug: str
    title: str
    url: str
    status: ProblemStatus
    occurred_at: datetime
    dedup_key: str


@dataclass(frozen=True)
class ProblemCard:
    id: int
    user_id: UUID
    source: str
    problem_slug: str
    title: str
    url: str
    interval_index: int
    next_due_at: datetime


@dataclass(frozen=True)
class ReviewEvent:
    id: int
    card_id: int
    user_id: UUID
    grade: Grade
    reviewed_at: datetime
    next_due_at: datetime
