from dataclasses import replace

import structlog

from ..domain.dedup import dedup_key
from ..utils.time import to_utc

logger = structlog.get_logger()


class IngestionService:
    def __init__(self, store, schedule):
        self.store = store
        self.schedule = schedule

    def ingest(self, payload):
        """
        Record a solved/attempted event and upsert the card it refers to.

        Re-ingestion only refreshes card title and url; interval_index and
        next_due_at change through grading alone.
        """
        payload = replace(payload, source=payload.source.lower(), occurred_at=to_utc(payload.occurred_at))
        key = dedup_key(
            payload.user_id,
            payload.source,
            payload.problem_slug,
            payload.status,
            payload.occurred_at,
        )
        logger.info("event_received",
            user_id=str(payload.user_id),
            source=payload.source,
            problem_slug=payload.problem_slug,
            dedup_key=key,
        )

        with self.store.atomic():
            # Fast path: a duplicate must not touch the card at all
            existing = self.store.find_event_by_dedup_key(key)
            if existing:
                logger.info("event_duplicate", user_id=str(payload.user_id), event_id=existing.id, dedup_key=key)
                return existing

            event, created = self.store.insert_event(payload, key)
            if not created:
                logger.info("event_duplicate", user_id=str(payload.user_id), event_id=event.id, dedup_key=key)
                return event

            first_due = payload.occurred_at + self.schedule.duration_for_index(0)
            card, card_created = self.store.find_or_create_card(
                payload.user_id,
                payload.source,
                payload.problem_slug,
                payload.title,
                payload.url,
                first_due,
            )
            if not card_created:
                self.store.refresh_card_metadata(card.id, payload.title, payload.url)

        logger.info("event_ingested",
            user_id=str(payload.user_id),
            event_id=event.id,
            card_id=card.id,
            card_created=card_created,
            source=payload.source,
            problem_slug=payload.problem_slug,
        )
        return event

    def latest_for_user(self, user_id):
        return self.store.latest_event_for_user(user_id)
