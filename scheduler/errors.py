class SchedulerError(Exception):
    """Base class for errors raised by the scheduling core."""


class InvalidScheduleError(SchedulerError):
    """Raised when raw profile data cannot form a usable schedule."""


class CardNotFound(SchedulerError):
    """No card with that id exists for the requesting user."""

    def __init__(self, user_id, card_id):
        super().__init__("Card not found")
        self.user_id = user_id
        self.card_id = card_id
