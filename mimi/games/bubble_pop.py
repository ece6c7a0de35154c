# mimi/games/bubble_pop.py — pop the rising bubble that carries the target word
from dataclasses import dataclass
from typing import List, Optional

from ..content import VocabularyItem
from ..scoring import BUBBLE_POINTS, Feedback
from .base import GameKind, TimedRound


@dataclass
class Bubble:
    id: int
    item: VocabularyItem
    x: float  # 0..1 across the play area
    height: float = 0.0  # 0 at the bottom, escapes at 1


class BubblePop(TimedRound):
    """
    Bubbles spawn on a fixed interval and rise at a fixed rate. Popping the
    target scores and picks a new target; popping anything else just removes
    the bubble.
    """

    kind = GameKind.BUBBLE_POP
    duration = 45.0
    spawn_interval = 1.2
    rise_seconds = 6.0
    tick = 0.1
    target_chance = 0.35

    def setup(self) -> None:
        self.target: Optional[VocabularyItem] = None
        self.bubbles: List[Bubble] = []
        self._next_id = 0
        self.pops = 0

    def load_item(self) -> None:
        previous = self.target
        candidates = [v for v in self.pools.vocabulary if previous is None or v.id != previous.id]
        self.target = self.rng.choice(candidates)

    def on_item_ready(self) -> None:
        self._say(self.target.word)

    def on_start(self) -> None:
        super().on_start()
        self.spawn()
        self.timers.every(self.spawn_interval, self.spawn)
        self.timers.every(self.tick, self._rise)

    @property
    def target_translation(self) -> str:
        return self.target.translation

    def spawn(self) -> None:
        if self.complete or self.closed:
            return
        if self.rng.random() < self.target_chance:
            item = self.target
        else:
            item = self.rng.choice(list(self.pools.vocabulary))
        self.bubbles.append(Bubble(self._next_id, item, x=self.rng.random()))
        self._next_id += 1

    def _rise(self) -> None:
        step = self.tick / self.rise_seconds
        for bubble in self.bubbles:
            bubble.height += step
        self.bubbles = [b for b in self.bubbles if b.height < 1.0 - 1e-9]

    def pop(self, bubble_id: int) -> Optional[Feedback]:
        if not self.accepting_input:
            return None
        bubble = next((b for b in self.bubbles if b.id == bubble_id), None)
        if bubble is None:
            return None
        self.bubbles.remove(bubble)
        self.pops += 1
        correct = bubble.item.id == self.target.id
        return self._evaluate(correct, BUBBLE_POINTS, answer=self.target.word, delay=0)

    def advance(self) -> None:
        if self.last_feedback.correct:
            self._load()
        else:
            self._resume()

    def _finish(self) -> None:
        self.bubbles.clear()
        super()._finish()
