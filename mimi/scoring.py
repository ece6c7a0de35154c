# mimi/scoring.py — point values and feedback phrases shared by every round
import random
from dataclasses import dataclass
from typing import Optional, Sequence

MATCH_POINTS = 10
MEMORY_POINTS = 10
SPEED_POINTS = 10
LISTEN_POINTS = 10
SENTENCE_POINTS = 15
BUBBLE_POINTS = 10
VOCABULARY_POINTS = 10
CHALLENGE_POINTS = 20

# full / partial / minimum, indexed by hints used
SPELLING_POINTS = (10, 6, 3)
MAX_SPELLING_HINTS = len(SPELLING_POINTS) - 1

PRAISE = [
    "Great job! 🌟",
    "Super! ⭐",
    "You did it! 🎉",
    "Amazing! 🐲",
    "Well done! 👏",
]

TRY_AGAIN = [
    "Try again! 💪",
    "Almost! 🤔",
    "Keep going! 🌈",
    "Nice try! 😊",
]


@dataclass(frozen=True)
class Feedback:
    correct: bool
    delta: int
    message: str = ""
    answer: Optional[str] = None  # the right answer, shown after a miss


def spelling_points(hints_used: int) -> int:
    tier = min(max(hints_used, 0), MAX_SPELLING_HINTS)
    return SPELLING_POINTS[tier]


def feedback(
    correct: bool, points: int, rng: random.Random, answer: Optional[str] = None
) -> Feedback:
    phrases: Sequence[str] = PRAISE if correct else TRY_AGAIN
    return Feedback(
        correct=correct,
        delta=points if correct else 0,
        message=rng.choice(phrases),
        answer=None if correct else answer,
    )


def challenge_verdict(score: int) -> str:
    if score >= 60:
        return "Amazing! You are a super student! 🌟"
    if score >= 40:
        return "Very good! Tomorrow will be even better! 💪"
    return "Keep practising! You can do it! 🎯"
