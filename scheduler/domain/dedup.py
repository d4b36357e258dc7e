from ..utils.time import hour_bucket
from .enums import ProblemStatus


def dedup_key(user_id, source: str, slug: str, status: ProblemStatus, occurred_at) -> str:
    """
    Idempotency key for an ingested event.

    Reports of the same (user, source, slug, status) within one UTC hour
    collapse to the same key; a status change or a different hour does not.
    """
    status_name = ProblemStatus(status).value
    return f"{user_id}:{source.lower()}:{slug}:{status_name}:{hour_bucket(occurred_at)}"
