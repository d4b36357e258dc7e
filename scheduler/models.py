from .data.models import ProblemCard, ProblemEvent, ReviewEvent  # noqa: F401
