import threading
import uuid
from dataclasses import replace
from datetime import timedelta

import pytest

from scheduler.domain.enums import Grade, ProblemStatus
from scheduler.domain.records import IngestProblemInput
from scheduler.services.events import IngestionService
from scheduler.services.reviews import ReviewService


def solved(user_id, at, slug="two-sum", source="leetcode", title="Two Sum", status=ProblemStatus.SOLVED):
    return IngestProblemInput(
        user_id=user_id,
        source=source,
        problem_slug=slug,
        title=title,
        url=f"https://{source}.com/problems/{slug}",
        status=status,
        occurred_at=at,
    )


def only_card(store, user_id):
    cards = store.upcoming_cards(user_id, 10)
    assert len(cards) == 1
    return cards[0]


def test_first_ingestion_creates_card(store, minute_schedule, clock, user_id):
    service = IngestionService(store, minute_schedule)
    event = service.ingest(solved(user_id, clock.now))

    assert event.status == ProblemStatus.SOLVED
    assert event.dedup_key.endswith(":leetcode:two-sum:solved:2024-01-01T12")

    card = only_card(store, user_id)
    assert card.interval_index == 0
    assert card.next_due_at == clock.now + timedelta(minutes=1)
    assert card.title == "Two Sum"


def test_source_is_lowercased(store, minute_schedule, clock, user_id):
    event = IngestionService(store, minute_schedule).ingest(solved(user_id, clock.now, source="LeetCode"))
    assert event.source == "leetcode"
    assert only_card(store, user_id).source == "leetcode"


def test_duplicate_returns_original_event(store, minute_schedule, clock, user_id):
    service = IngestionService(store, minute_schedule)
    first = service.ingest(solved(user_id, clock.now))
    card_before = only_card(store, user_id)

    second = service.ingest(solved(user_id, clock.now + timedelta(minutes=30), title="Renamed"))

    assert second == first
    card_after = only_card(store, user_id)
    assert card_after == card_before
    assert card_after.title == "Two Sum"


def test_duplicate_does_not_disturb_graded_card(store, minute_schedule, clock, user_id):
    ingestion = IngestionService(store, minute_schedule)
    reviews = ReviewService(store, minute_schedule, clock=clock)

    ingestion.ingest(solved(user_id, clock.now))
    card = only_card(store, user_id)
    reviews.grade(user_id, card.id, Grade.GOOD)
    graded = only_card(store, user_id)

    ingestion.ingest(solved(user_id, clock.now + timedelta(minutes=10)))

    assert only_card(store, user_id) == graded
    assert graded.interval_index == 1


def test_reingestion_refreshes_metadata_only(store, minute_schedule, clock, user_id):
    ingestion = IngestionService(store, minute_schedule)
    reviews = ReviewService(store, minute_schedule, clock=clock)

    ingestion.ingest(solved(user_id, clock.now))
    card = only_card(store, user_id)
    reviews.grade(user_id, card.id, Grade.EASY)
    graded = only_card(store, user_id)

    # Different hour bucket, so this is a new event for the same card
    event = ingestion.ingest(solved(user_id, clock.now + timedelta(hours=2), title="Two Sum (II)"))

    refreshed = only_card(store, user_id)
    assert event.title == "Two Sum (II)"
    assert refreshed.title == "Two Sum (II)"
    assert refreshed.interval_index == graded.interval_index == 2
    assert refreshed.next_due_at == graded.next_due_at


def test_status_change_is_a_new_event(store, minute_schedule, clock, user_id):
    service = IngestionService(store, minute_schedule)
    attempted = service.ingest(solved(user_id, clock.now, status=ProblemStatus.UNSOLVED))
    finished = service.ingest(solved(user_id, clock.now, status=ProblemStatus.SOLVED))

    assert attempted.id != finished.id
    only_card(store, user_id)


def test_cards_are_per_user_and_source(store, minute_schedule, clock, user_id):
    service = IngestionService(store, minute_schedule)
    other_user = uuid.uuid4()
    service.ingest(solved(user_id, clock.now))
    service.ingest(solved(user_id, clock.now, source="neetcode"))
    service.ingest(solved(other_user, clock.now))

    assert {c.source for c in store.upcoming_cards(user_id, 10)} == {"leetcode", "neetcode"}
    assert len(store.upcoming_cards(other_user, 10)) == 1


def test_latest_for_user(store, minute_schedule, clock, user_id):
    service = IngestionService(store, minute_schedule)
    assert service.latest_for_user(user_id) is None

    service.ingest(solved(user_id, clock.now + timedelta(hours=3), slug="lru-cache"))
    service.ingest(solved(user_id, clock.now, slug="two-sum"))

    assert service.latest_for_user(user_id).problem_slug == "lru-cache"


class ExplodingCardStore:
    """Wraps a store and fails while upserting the card."""

    def __init__(self, inner):
        self.inner = inner

    def __getattr__(self, name):
        return getattr(self.inner, name)

    def find_or_create_card(self, *args, **kwargs):
        raise RuntimeError("storage unavailable")


def test_failed_card_upsert_leaves_no_event(store, minute_schedule, clock, user_id):
    payload = solved(user_id, clock.now)
    with pytest.raises(RuntimeError):
        IngestionService(ExplodingCardStore(store), minute_schedule).ingest(payload)

    assert store.latest_event_for_user(user_id) is None
    assert store.upcoming_cards(user_id, 10) == []

    # A retry after the failure goes through normally
    event = IngestionService(store, minute_schedule).ingest(replace(payload))
    assert store.find_event_by_dedup_key(event.dedup_key) == event


def test_naive_occurred_at_is_taken_as_utc(store, minute_schedule, clock, user_id):
    naive = clock.now.replace(tzinfo=None)
    event = IngestionService(store, minute_schedule).ingest(solved(user_id, naive))

    assert event.occurred_at == clock.now
    card = only_card(store, user_id)
    assert card.next_due_at == clock.now + timedelta(minutes=1)
    # Comparing against an aware "now" must not blow up
    assert [c.id for c in store.due_cards(user_id, clock.now + timedelta(minutes=1))] == [card.id]


def ingest_together(service, payloads, after_each=None):
    """Ingest every payload from its own thread, all released at once."""
    barrier = threading.Barrier(len(payloads))
    results, errors = [], []

    def run(payload):
        try:
            barrier.wait(timeout=5)
            results.append(service.ingest(payload))
        except Exception as exc:
            errors.append(exc)
        finally:
            if after_each:
                after_each()

    threads = [threading.Thread(target=run, args=(p,)) for p in payloads]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    assert errors == []
    assert len(results) == len(payloads)
    return results


def test_concurrent_duplicates_share_one_event(memory_store, minute_schedule, clock, user_id):
    service = IngestionService(memory_store, minute_schedule)

    events = ingest_together(service, [solved(user_id, clock.now)] * 8)

    assert len({e.id for e in events}) == 1
    only_card(memory_store, user_id)


def test_concurrent_first_sightings_share_one_card(memory_store, minute_schedule, clock, user_id):
    service = IngestionService(memory_store, minute_schedule)
    payloads = [solved(user_id, clock.now + timedelta(hours=h)) for h in range(6)]

    events = ingest_together(service, payloads)

    assert len({e.id for e in events}) == 6
    assert only_card(memory_store, user_id).interval_index == 0


@pytest.mark.django_db(transaction=True)
def test_concurrent_ingestion_on_database(minute_schedule, clock, user_id):
    from django.db import connection

    from scheduler.data.repos import OrmCardStore
    from scheduler.models import ProblemCard, ProblemEvent

    service = IngestionService(OrmCardStore(), minute_schedule)

    duplicates = ingest_together(service, [solved(user_id, clock.now)] * 4, after_each=connection.close)
    assert len({e.id for e in duplicates}) == 1

    hours = [solved(user_id, clock.now + timedelta(hours=h)) for h in range(1, 5)]
    distinct = ingest_together(service, hours, after_each=connection.close)
    assert len({e.id for e in distinct}) == 4

    assert ProblemEvent.objects.filter(user_id=user_id).count() == 5
    assert ProblemCard.objects.filter(user_id=user_id).count() == 1
