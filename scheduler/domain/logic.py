from .enums import Grade


def next_index(current_index: int, grade: Grade, max_index: int) -> int:
    # Clamp first so the result stays in [0, max_index] for any input
    current = min(max(current_index, 0), max_index)

    if grade == Grade.AGAIN:
        return 0
    if grade == Grade.HARD:
        return max(current - 1, 0)
    if grade == Grade.GOOD:
        return min(current + 1, max_index)
    if grade == Grade.EASY:
        return min(current + 2, max_index)
    raise ValueError(f"unknown grade: {grade!r}")
