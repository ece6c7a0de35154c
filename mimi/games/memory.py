# mimi/games/memory.py — flip two cards, find the word/emoji pairs
from dataclasses import dataclass
from typing import List, Set

from ..scoring import MEMORY_POINTS
from .base import GameKind, Round


@dataclass(frozen=True)
class Card:
    index: int
    pair_id: str
    face: str
    side: str  # "word" or "emoji"


class MemoryGame(Round):
    kind = GameKind.MEMORY
    feedback_delay = 1.2
    pairs = 6

    def setup(self) -> None:
        chosen = self.rng.sample(list(self.pools.vocabulary), self.pairs)
        faces = []
        for item in chosen:
            faces.append((item.id, item.word, "word"))
            faces.append((item.id, item.emoji, "emoji"))
        self.rng.shuffle(faces)
        self.cards: List[Card] = [Card(i, *face) for i, face in enumerate(faces)]
        self.revealed: List[int] = []
        self.matched: Set[int] = set()
        self.moves = 0

    def is_face_up(self, index: int) -> bool:
        return index in self.matched or index in self.revealed

    def flip(self, index: int) -> bool:
        if not self.accepting_input or not 0 <= index < len(self.cards):
            return False
        if self.is_face_up(index):
            return False
        self.revealed.append(index)
        card = self.cards[index]
        if card.side == "word":
            self._say(card.face)
        if len(self.revealed) < 2:
            return True

        self.moves += 1
        first, second = (self.cards[i] for i in self.revealed)
        correct = first.pair_id == second.pair_id
        if correct:
            self.matched.update(self.revealed)
        self._evaluate(correct, MEMORY_POINTS)
        return True

    def is_finished(self) -> bool:
        return len(self.matched) == len(self.cards)

    def advance(self) -> None:
        self.revealed.clear()
        self._resume()

    def _finish(self) -> None:
        self.revealed.clear()
        super()._finish()
