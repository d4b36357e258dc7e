from django.db import models
from django.utils import timezone

from ..domain.enums import Grade, ProblemStatus

STATUS_CHOICES = [(s.value, s.value) for s in ProblemStatus]
GRADE_CHOICES = [(g.value, g.value) for g in Grade]


class ProblemCard(models.Model):
    user_id = models.UUIDField()
    source = models.CharField(max_length=64)
    problem_slug = models.CharField(max_length=255)
    title = models.CharField(max_length=512)
    url = models.CharField(max_length=1024)
    interval_index = models.PositiveSmallIntegerField(default=0)
    next_due_at = models.DateTimeField()  # UTC

    class Meta:
        app_label = "scheduler"
        unique_together = (("user_id", "source", "problem_slug"),)
        indexes = [
            models.Index(fields=["user_id", "next_due_at"], name="card_user_due_idx"),
        ]


class ProblemEvent(models.Model):
    user_id = models.UUIDField()
    source = models.CharField(max_length=64)
    problem_slug = models.CharField(max_length=255)
    title = models.CharField(max_length=512)
    url = models.CharField(max_length=1024)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES)
    occurred_at = models.DateTimeField()
    dedup_key = models.CharField(max_length=512, unique=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        app_label = "scheduler"
        indexes = [
            models.Index(fields=["user_id", "occurred_at"], name="event_user_occurred_idx"),
        ]


class ReviewEvent(models.Model):
    card = models.ForeignKey(ProblemCard, on_delete=models.CASCADE, related_name="reviews")
    user_id = models.UUIDField()
    grade = models.CharField(max_length=8, choices=GRADE_CHOICES)
    reviewed_at = models.DateTimeField()
    next_due_at = models.DateTimeField()

    class Meta:
        app_label = "scheduler"
        indexes = [
            models.Index(fields=["user_id", "reviewed_at"], name="review_user_reviewed_idx"),
        ]
