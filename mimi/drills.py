# mimi/drills.py — vocabulary drill and daily challenge modes
from typing import Optional

from .games.base import Round, pick_options
from .scoring import CHALLENGE_POINTS, VOCABULARY_POINTS, Feedback, challenge_verdict


class VocabularyDrill(Round):
    """Five words. Each is shown first ("learn"), then quizzed with four translations."""

    feedback_delay = 1.5
    words_per_round = 5

    def setup(self) -> None:
        self.words = self.rng.sample(list(self.pools.vocabulary), self.words_per_round)
        self.index = 0

    @property
    def word(self):
        return self.words[self.index]

    def load_item(self) -> None:
        self.step = "learn"
        self.options = [
            item.translation
            for item in pick_options(list(self.pools.vocabulary), self.word, self.rng)
        ]

    def on_item_ready(self) -> None:
        upcoming = self.words[self.index + 1:]
        self._warm([self.word.example_sentence] + [w.word for w in upcoming])

    def next_item(self) -> None:
        self.index += 1

    def speak_word(self) -> bool:
        if not self.accepting_input:
            return False
        self._say(self.word.word)
        return True

    def speak_example(self) -> bool:
        if not self.accepting_input:
            return False
        self._say(self.word.example_sentence)
        return True

    def start_quiz(self) -> bool:
        if not self.accepting_input or self.step != "learn":
            return False
        self.step = "quiz"
        return True

    def answer(self, option_index: int) -> Optional[Feedback]:
        if not self.accepting_input or self.step != "quiz":
            return None
        if not 0 <= option_index < len(self.options):
            return None
        correct = self.options[option_index] == self.word.translation
        return self._evaluate(correct, VOCABULARY_POINTS, answer=self.word.translation)

    def is_finished(self) -> bool:
        return self.index >= len(self.words) - 1


class DailyChallenge(Round):
    feedback_delay = 1.5
    questions_per_round = 3

    def setup(self) -> None:
        questions = list(self.pools.questions)
        self.questions = self.rng.sample(questions, min(self.questions_per_round, len(questions)))
        self.index = 0

    @property
    def question(self):
        return self.questions[self.index]

    def on_item_ready(self) -> None:
        self._warm([self.question.question])

    def next_item(self) -> None:
        self.index += 1

    def answer(self, option_index: int) -> Optional[Feedback]:
        if not self.accepting_input:
            return None
        q = self.question
        if not 0 <= option_index < len(q.options):
            return None
        correct = option_index == q.correct_answer
        return self._evaluate(correct, CHALLENGE_POINTS, answer=q.options[q.correct_answer])

    def is_finished(self) -> bool:
        return self.index >= len(self.questions) - 1

    @property
    def verdict(self) -> Optional[str]:
        return challenge_verdict(self.score) if self.complete else None
