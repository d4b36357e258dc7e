DEFAULT_INTERVALS = (1, 3, 7, 14, 30)
DEFAULT_UNIT = "days"

UPCOMING_LIMIT = 10

UNIT_SECONDS = {
    "seconds": 1,
    "minutes": 60,
    "days": 24 * 3600,
}
