# mimi/games/speed_round.py — as many translations as possible in 60 seconds
from typing import Optional

from ..scoring import SPEED_POINTS, Feedback
from .base import GameKind, TimedRound, pick_options


class SpeedRound(TimedRound):
    """No feedback pause: every answer immediately loads the next question."""

    kind = GameKind.SPEED_ROUND
    duration = 60.0
    options_per_question = 4

    def setup(self) -> None:
        self.target = None
        self.answered = 0
        self.correct_answers = 0

    def load_item(self) -> None:
        vocabulary = list(self.pools.vocabulary)
        previous = self.target
        candidates = [v for v in vocabulary if previous is None or v.id != previous.id]
        self.target = self.rng.choice(candidates)
        self.options = pick_options(vocabulary, self.target, self.rng, self.options_per_question)

    def next_item(self) -> None:
        pass

    def answer(self, item_id: str) -> Optional[Feedback]:
        if not self.accepting_input:
            return None
        correct = item_id == self.target.id
        self.answered += 1
        if correct:
            self.correct_answers += 1
        return self._evaluate(correct, SPEED_POINTS, answer=self.target.translation, delay=0)
