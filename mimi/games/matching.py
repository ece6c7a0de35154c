# mimi/games/matching.py — English column vs. translation column
import random
from typing import Dict, List, Optional, Set

from ..content import VocabularyItem
from ..scoring import MATCH_POINTS
from .base import GameKind, Round


def shuffled_apart(order: List[str], rng: random.Random, attempts: int = 50) -> List[str]:
    """A shuffle of `order` where no entry keeps its position."""
    if len(order) < 2:
        return list(order)
    for _ in range(attempts):
        candidate = list(order)
        rng.shuffle(candidate)
        if all(a != b for a, b in zip(candidate, order)):
            return candidate
    return order[1:] + order[:1]


class MatchingGame(Round):
    kind = GameKind.MATCHING
    feedback_delay = 1.2
    pairs = 6

    def setup(self) -> None:
        chosen = self.rng.sample(list(self.pools.vocabulary), self.pairs)
        self.items: Dict[str, VocabularyItem] = {item.id: item for item in chosen}
        self.english: List[str] = [item.id for item in chosen]
        self.rng.shuffle(self.english)
        self.translations: List[str] = shuffled_apart(self.english, self.rng)
        self.matched: Set[str] = set()
        self.selected_english: Optional[str] = None
        self.selected_translation: Optional[str] = None

    def _selectable(self, item_id: str) -> bool:
        return self.accepting_input and item_id in self.items and item_id not in self.matched

    def select_english(self, item_id: str) -> bool:
        if not self._selectable(item_id):
            return False
        self.selected_english = item_id
        self._say(self.items[item_id].word)
        self._try_match()
        return True

    def select_translation(self, item_id: str) -> bool:
        if not self._selectable(item_id):
            return False
        self.selected_translation = item_id
        self._try_match()
        return True

    def _try_match(self) -> None:
        if self.selected_english is None or self.selected_translation is None:
            return
        english, translation = self.selected_english, self.selected_translation
        self.selected_english = self.selected_translation = None
        correct = english == translation
        if correct:
            self.matched.add(english)
        self._evaluate(correct, MATCH_POINTS, answer=self.items[english].translation)

    def is_finished(self) -> bool:
        return len(self.matched) == len(self.items)

    def advance(self) -> None:
        self._resume()
