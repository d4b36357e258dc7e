import abc


class CardStore(abc.ABC):
    """
    Storage used by the scheduling services.

    Services only talk to this interface, so they do not know whether cards
    live in the database or in memory. Mutating calls that must succeed or
    fail together are wrapped in ``atomic()``.
    """

    @abc.abstractmethod
    def atomic(self):
        """Context manager for an all-or-nothing unit of work."""

    @abc.abstractmethod
    def find_event_by_dedup_key(self, key):
        """Return the ProblemEvent stored under ``key``, or None."""

    @abc.abstractmethod
    def insert_event(self, payload, dedup_key):
        """
        Insert an event. Returns ``(event, created)``; when another writer
        already stored the key, returns its event with ``created=False``.
        """

    @abc.abstractmethod
    def find_or_create_card(self, user_id, source, slug, title, url, next_due_at):
        """Return ``(card, created)`` for the (user, source, slug) identity."""

    @abc.abstractmethod
    def refresh_card_metadata(self, card_id, title, url):
        """Update title and url only."""

    @abc.abstractmethod
    def lock_card_for_update(self, card_id, user_id):
        """Lock and return the user's card, or None if absent or foreign."""

    @abc.abstractmethod
    def update_card(self, card):
        """Persist ``interval_index`` and ``next_due_at`` of a locked card."""

    @abc.abstractmethod
    def insert_review(self, card_id, user_id, grade, reviewed_at, next_due_at):
        """Append a ReviewEvent and return it."""

    @abc.abstractmethod
    def due_cards(self, user_id, now):
        """Cards with next_due_at <= now, oldest due first."""

    @abc.abstractmethod
    def upcoming_cards(self, user_id, limit):
        """First ``limit`` cards ordered by next_due_at."""

    @abc.abstractmethod
    def user_history(self, user_id):
        """Reviews of the user, newest first."""

    @abc.abstractmethod
    def latest_event_for_user(self, user_id):
        """Most recent event by occurred_at, or None."""
