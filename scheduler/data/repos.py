from django.db import IntegrityError, transaction

from ..domain import records
from ..domain.enums import Grade, ProblemStatus
from .models import ProblemCard, ProblemEvent, ReviewEvent
from .store import CardStore


def _card(row):
    return records.ProblemCard(
        id=row.pk,
        user_id=row.user_id,
        source=row.source,
        problem_slug=row.problem_slug,
        title=row.title,
        url=row.url,
        interval_index=row.interval_index,
        next_due_at=row.next_due_at,
    )


def _event(row):
    return records.ProblemEvent(
        id=row.pk,
        user_id=row.user_id,
        source=row.source,
        problem_slug=row.problem_slug,
        title=row.title,
        url=row.url,
        status=ProblemStatus(row.status),
        occurred_at=row.occurred_at,
        dedup_key=row.dedup_key,
    )


def _review(row):
    return records.ReviewEvent(
        id=row.pk,
        card_id=row.card_id,
        user_id=row.user_id,
        grade=Grade(row.grade),
        reviewed_at=row.reviewed_at,
        next_due_at=row.next_due_at,
    )


class OrmCardStore(CardStore):
    """Durable store backed by the Django ORM."""

    def __init__(self, using=None):
        self.using = using

    def atomic(self):
        return transaction.atomic(using=self.using)

    def _cards(self):
        return ProblemCard.objects.using(self.using)

    def _events(self):
        return ProblemEvent.objects.using(self.using)

    def _reviews(self):
        return ReviewEvent.objects.using(self.using)

    def find_event_by_dedup_key(self, key):
        row = self._events().filter(dedup_key=key).first()
        return _event(row) if row else None

    def insert_event(self, payload, dedup_key):
        """
        Insert the event row; if a concurrent duplicate slips in, return the
        existing one.
        """
        try:
            # Savepoint so a unique violation does not poison the outer transaction
            with transaction.atomic(using=self.using):
                row = self._events().create(
                    user_id=payload.user_id,
                    source=payload.source,
                    problem_slug=payload.problem_slug,
                    title=payload.title,
                    url=payload.url,
                    status=ProblemStatus(payload.status).value,
                    occurred_at=payload.occurred_at,
                    dedup_key=dedup_key,
                )
            return _event(row), True
        except IntegrityError:
            existing = self.find_event_by_dedup_key(dedup_key)
            if existing is None:
                raise
            return existing, False

    def find_or_create_card(self, user_id, source, slug, title, url, next_due_at):
        """
        Fetch the card row and lock it for the rest of the transaction.
        Create if missing.
        """
        row, created = self._cards().select_for_update().get_or_create(
            user_id=user_id,
            source=source,
            problem_slug=slug,
            defaults={
                "title": title,
                "url": url,
                "interval_index": 0,
                "next_due_at": next_due_at,
            },
        )
        return _card(row), created

    def refresh_card_metadata(self, card_id, title, url):
        self._cards().filter(pk=card_id).update(title=title, url=url)

    def lock_card_for_update(self, card_id, user_id):
        row = (self._cards()
               .select_for_update()
               .filter(pk=card_id, user_id=user_id)
               .first())
        return _card(row) if row else None

    def update_card(self, card):
        self._cards().filter(pk=card.id).update(
            interval_index=card.interval_index,
            next_due_at=card.next_due_at,
        )

    def insert_review(self, card_id, user_id, grade, reviewed_at, next_due_at):
        row = self._reviews().create(
            card_id=card_id,
            user_id=user_id,
            grade=Grade(grade).value,
            reviewed_at=reviewed_at,
            next_due_at=next_due_at,
        )
        return _review(row)

    def due_cards(self, user_id, now):
        rows = (self._cards()
                .filter(user_id=user_id, next_due_at__lte=now)
                .order_by("next_due_at", "pk"))
        return [_card(row) for row in rows]

    def upcoming_cards(self, user_id, limit):
        rows = self._cards().filter(user_id=user_id).order_by("next_due_at", "pk")[:limit]
        return [_card(row) for row in rows]

    def user_history(self, user_id):
        rows = self._reviews().filter(user_id=user_id).order_by("-reviewed_at", "-pk")
        return [_review(row) for row in rows]

    def latest_event_for_user(self, user_id):
        row = self._events().filter(user_id=user_id).order_by("-occurred_at", "-pk").first()
        return _event(row) if row else None
