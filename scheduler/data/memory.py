"""
Process-local card store.

All state sits behind one re-entrant lock. ``atomic()`` holds that lock for
the whole unit of work and restores the previous state if the block raises,
so ingestion and grading are all-or-nothing here as well.
"""

import threading
from contextlib import contextmanager
from dataclasses import replace
from itertools import count

from ..domain import records
from ..domain.enums import Grade, ProblemStatus
from .store import CardStore


class InMemoryCardStore(CardStore):
    def __init__(self):
        self._lock = threading.RLock()
        self._ids = count(1)
        self.events = {}
        self.events_by_key = {}
        self.cards = {}
        self.card_index = {}
        self.reviews = {}

    def _snapshot(self):
        return (
            dict(self.events),
            dict(self.events_by_key),
            dict(self.cards),
            dict(self.card_index),
            dict(self.reviews),
        )

    def _restore(self, snapshot):
        (self.events, self.events_by_key, self.cards,
         self.card_index, self.reviews) = snapshot

    @contextmanager
    def atomic(self):
        with self._lock:
            snapshot = self._snapshot()
            try:
                yield self
            except BaseException:
                self._restore(snapshot)
                raise

    def find_event_by_dedup_key(self, key):
        with self._lock:
            event_id = self.events_by_key.get(key)
            return self.events.get(event_id) if event_id is not None else None

    def insert_event(self, payload, dedup_key):
        with self._lock:
            existing = self.find_event_by_dedup_key(dedup_key)
            if existing is not None:
                return existing, False
            event = records.ProblemEvent(
                id=next(self._ids),
                user_id=payload.user_id,
                source=payload.source,
                problem_slug=payload.problem_slug,
                title=payload.title,
                url=payload.url,
                status=ProblemStatus(payload.status),
                occurred_at=payload.occurred_at,
                dedup_key=dedup_key,
            )
            self.events[event.id] = event
            self.events_by_key[dedup_key] = event.id
            return event, True

    def find_or_create_card(self, user_id, source, slug, title, url, next_due_at):
        with self._lock:
            card_id = self.card_index.get((user_id, source, slug))
            if card_id is not None:
                return self.cards[card_id], False
            card = records.ProblemCard(
                id=next(self._ids),
                user_id=user_id,
                source=source,
                problem_slug=slug,
                title=title,
                url=url,
                interval_index=0,
                next_due_at=next_due_at,
            )
            self.cards[card.id] = card
            self.card_index[(user_id, source, slug)] = card.id
            return card, True

    def refresh_card_metadata(self, card_id, title, url):
        with self._lock:
            self.cards[card_id] = replace(self.cards[card_id], title=title, url=url)

    def lock_card_for_update(self, card_id, user_id):
        # The caller already holds the store lock through atomic()
        with self._lock:
            card = self.cards.get(card_id)
            if card is None or card.user_id != user_id:
                return None
            return card

    def update_card(self, card):
        with self._lock:
            current = self.cards[card.id]
            self.cards[card.id] = replace(
                current,
                interval_index=card.interval_index,
                next_due_at=card.next_due_at,
            )

    def insert_review(self, card_id, user_id, grade, reviewed_at, next_due_at):
        with self._lock:
            review = records.ReviewEvent(
                id=next(self._ids),
                card_id=card_id,
                user_id=user_id,
                grade=Grade(grade),
                reviewed_at=reviewed_at,
                next_due_at=next_due_at,
            )
            self.reviews[review.id] = review
            return review

    def due_cards(self, user_id, now):
        with self._lock:
            cards = [c for c in self.cards.values() if c.user_id == user_id and c.next_due_at <= now]
        return sorted(cards, key=lambda c: (c.next_due_at, c.id))

    def upcoming_cards(self, user_id, limit):
        with self._lock:
            cards = [c for c in self.cards.values() if c.user_id == user_id]
        return sorted(cards, key=lambda c: (c.next_due_at, c.id))[:limit]

    def user_history(self, user_id):
        with self._lock:
            reviews = [r for r in self.reviews.values() if r.user_id == user_id]
        return sorted(reviews, key=lambda r: (r.reviewed_at, r.id), reverse=True)

    def latest_event_for_user(self, user_id):
        with self._lock:
            events = [e for e in self.events.values() if e.user_id == user_id]
        if not events:
            return None
        return max(events, key=lambda e: (e.occurred_at, e.id))
