from datetime import timezone as dt_tz

UTC = dt_tz.utc


def to_utc(dt):
    """Naive datetimes are taken to already be in UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def hour_bucket(dt):
    return to_utc(dt).strftime("%Y-%m-%dT%H")
