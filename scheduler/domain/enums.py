from enum import Enum


class Grade(str, Enum):
    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


class ProblemStatus(str, Enum):
    SOLVED = "solved"
    UNSOLVED = "unsolved"


class IntervalUnit(str, Enum):
    DAYS = "days"
    MINUTES = "minutes"
    SECONDS = "seconds"


GRADE_LABELS = {
    Grade.AGAIN: "Again",
    Grade.HARD: "Hard",
    Grade.GOOD: "Good",
    Grade.EASY: "Easy",
}
