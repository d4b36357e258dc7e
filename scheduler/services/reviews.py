from dataclasses import replace

import structlog
from django.utils import timezone

from ..config import UPCOMING_LIMIT
from ..domain.enums import Grade
from ..domain.logic import next_index
from ..errors import CardNotFound

logger = structlog.get_logger()


class ReviewService:
    def __init__(self, store, schedule, clock=timezone.now):
        self.store = store
        self.schedule = schedule
        self.clock = clock

    def due_cards(self, user_id, now=None):
        if now is None:
            now = self.clock()
        cards = self.store.due_cards(user_id, now)
        logger.info("review_due_cards", user_id=str(user_id), due_count=len(cards))
        return cards

    def upcoming_cards(self, user_id):
        cards = self.store.upcoming_cards(user_id, UPCOMING_LIMIT)
        logger.info("review_upcoming_cards", user_id=str(user_id), upcoming_count=len(cards))
        return cards

    def grade(self, user_id, card_id, grade):
        grade = Grade(grade)
        logger.info("review_received", user_id=str(user_id), card_id=card_id, grade=grade.value)

        # Serialize grading per card: the row stays locked until commit
        with self.store.atomic():
            card = self.store.lock_card_for_update(card_id, user_id)
            if card is None:
                logger.warning("review_grade_card_not_found", user_id=str(user_id), card_id=card_id)
                raise CardNotFound(user_id, card_id)

            new_index = next_index(card.interval_index, grade, self.schedule.max_index())
            now = self.clock()
            next_due_at = now + self.schedule.duration_for_index(new_index)

            self.store.update_card(replace(card, interval_index=new_index, next_due_at=next_due_at))
            review = self.store.insert_review(card.id, user_id, grade, now, next_due_at)

        logger.info("review_graded",
            user_id=str(user_id),
            card_id=card_id,
            review_id=review.id,
            grade=grade.value,
            from_index=card.interval_index,
            to_index=new_index,
            next_due_at=next_due_at.isoformat(),
        )
        return review

    def history(self, user_id):
        reviews = self.store.user_history(user_id)
        logger.info("review_history", user_id=str(user_id), history_count=len(reviews))
        return reviews
