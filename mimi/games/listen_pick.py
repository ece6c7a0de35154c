# mimi/games/listen_pick.py — hear a word, pick its picture
from typing import Optional

from ..scoring import LISTEN_POINTS, Feedback
from .base import GameKind, Round, pick_options


class ListenAndPick(Round):
    kind = GameKind.LISTEN_AND_PICK
    feedback_delay = 1.5
    rounds = 5
    options_per_question = 4

    def setup(self) -> None:
        self.targets = self.rng.sample(list(self.pools.vocabulary), self.rounds)
        self.index = 0

    @property
    def target(self):
        return self.targets[self.index]

    def load_item(self) -> None:
        self.options = pick_options(
            list(self.pools.vocabulary), self.target, self.rng, self.options_per_question
        )

    def on_item_ready(self) -> None:
        # audio is fire-and-forget; the round never waits on it
        self._say(self.target.word)
        self._warm(t.word for t in self.targets[self.index + 1:])

    def next_item(self) -> None:
        self.index += 1

    def play_again(self) -> bool:
        if not self.accepting_input:
            return False
        self._say(self.target.word)
        return True

    def pick(self, item_id: str) -> Optional[Feedback]:
        if not self.accepting_input:
            return None
        correct = item_id == self.target.id
        return self._evaluate(correct, LISTEN_POINTS, answer=self.target.word)

    def is_finished(self) -> bool:
        return self.index >= len(self.targets) - 1
