# mimi/games/sentence_builder.py — put the shuffled words back in order
from dataclasses import dataclass
from typing import List, Optional

from ..scoring import SENTENCE_POINTS, Feedback
from .base import GameKind, Round


@dataclass(frozen=True)
class WordTile:
    id: int
    word: str


class SentenceBuilder(Round):
    """All-or-nothing: the built sentence must equal the canonical one exactly."""

    kind = GameKind.SENTENCE_BUILDER
    feedback_delay = 2.0
    rounds = 5

    def setup(self) -> None:
        sentences = list(self.pools.sentences)
        self.templates = self.rng.sample(sentences, min(self.rounds, len(sentences)))
        self.index = 0

    @property
    def template(self):
        return self.templates[self.index]

    def load_item(self) -> None:
        words = list(self.template.word_sequence)
        shuffled = list(words)
        # a few tries to avoid handing out the sentence already solved
        for _ in range(10):
            self.rng.shuffle(shuffled)
            if shuffled != words or len(set(words)) < 2:
                break
        self.tiles: List[WordTile] = [WordTile(i, w) for i, w in enumerate(shuffled)]
        self.built: List[int] = []

    def next_item(self) -> None:
        self.index += 1

    @property
    def sentence(self) -> str:
        return " ".join(self.tiles[i].word for i in self.built)

    def tap(self, tile_id: int) -> bool:
        if not self.accepting_input or not 0 <= tile_id < len(self.tiles):
            return False
        if tile_id in self.built:
            return False
        self.built.append(tile_id)
        return True

    def untap(self, tile_id: Optional[int] = None) -> bool:
        """Take a word back out; the last one placed when no id is given."""
        if not self.accepting_input or not self.built:
            return False
        if tile_id is None:
            self.built.pop()
            return True
        if tile_id not in self.built:
            return False
        self.built.remove(tile_id)
        return True

    @property
    def can_submit(self) -> bool:
        return self.accepting_input and len(self.built) == len(self.tiles)

    def submit(self) -> Optional[Feedback]:
        if not self.can_submit:
            return None
        canonical = self.template.canonical_sentence
        correct = self.sentence == canonical
        if correct:
            self._say(canonical)
        return self._evaluate(correct, SENTENCE_POINTS, answer=canonical)

    def is_finished(self) -> bool:
        return self.index >= len(self.templates) - 1
