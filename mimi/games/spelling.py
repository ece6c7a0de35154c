# mimi/games/spelling.py — build the word from a pool of letter tiles
from dataclasses import dataclass
from string import ascii_uppercase
from typing import List, Optional

from ..scoring import MAX_SPELLING_HINTS, Feedback, spelling_points
from .base import GameKind, Round


@dataclass(frozen=True)
class Tile:
    id: int
    letter: str


class SpellingGame(Round):
    """
    Letters of the target word plus a couple of distractors are shuffled into
    a pool. A wrong submission sends back only the tiles sitting in the wrong
    slot; tiles already in the right place stay put and the same word is
    retried.
    """

    kind = GameKind.SPELLING
    feedback_delay = 1.5
    words_per_round = 5
    distractors = 2

    def setup(self) -> None:
        self.words = self.rng.sample(list(self.pools.vocabulary), self.words_per_round)
        self.index = 0

    @property
    def target(self):
        return self.words[self.index]

    @property
    def answer(self) -> str:
        return self.target.word.upper()

    def load_item(self) -> None:
        answer = self.answer
        unused = [c for c in ascii_uppercase if c not in answer]
        letters = list(answer) + self.rng.sample(unused, self.distractors)
        self.rng.shuffle(letters)
        self.tiles: List[Tile] = [Tile(i, letter) for i, letter in enumerate(letters)]
        self.pool: List[int] = [tile.id for tile in self.tiles]
        self.slots: List[Optional[int]] = [None] * len(answer)
        self.hints_used = 0

    def on_item_ready(self) -> None:
        self._say(self.target.word)
        self._warm(w.word for w in self.words[self.index + 1:])

    def next_item(self) -> None:
        self.index += 1

    def letter(self, tile_id: int) -> str:
        return self.tiles[tile_id].letter

    @property
    def spelled(self) -> str:
        return "".join(self.letter(t) if t is not None else "_" for t in self.slots)

    # ---- input ---------------------------------------------------------

    def place(self, tile_id: int) -> bool:
        if not self.accepting_input or tile_id not in self.pool:
            return False
        if None not in self.slots:
            return False
        self.pool.remove(tile_id)
        self.slots[self.slots.index(None)] = tile_id
        return True

    def remove(self, slot: int) -> bool:
        if not self.accepting_input or not 0 <= slot < len(self.slots):
            return False
        tile_id = self.slots[slot]
        if tile_id is None:
            return False
        self.slots[slot] = None
        self.pool.append(tile_id)
        return True

    def use_hint(self) -> bool:
        """Put the right letter into the first slot that does not hold it."""
        if not self.accepting_input or self.hints_used >= MAX_SPELLING_HINTS:
            return False
        answer = self.answer
        for i, wanted in enumerate(answer):
            current = self.slots[i]
            if current is not None and self.letter(current) == wanted:
                continue
            source = self._find_tile(wanted, skip_slot=i)
            if source is None:
                return False
            if current is not None:
                self.slots[i] = None
                self.pool.append(current)
            if source in self.pool:
                self.pool.remove(source)
            else:
                self.slots[self.slots.index(source)] = None
            self.slots[i] = source
            self.hints_used += 1
            return True
        return False

    def _find_tile(self, wanted: str, skip_slot: int) -> Optional[int]:
        for tile_id in self.pool:
            if self.letter(tile_id) == wanted:
                return tile_id
        # otherwise borrow one that sits in a wrong slot
        for j, tile_id in enumerate(self.slots):
            if j == skip_slot or tile_id is None:
                continue
            if self.letter(tile_id) == wanted and self.answer[j] != wanted:
                return tile_id
        return None

    @property
    def can_submit(self) -> bool:
        return self.accepting_input and None not in self.slots

    def submit(self) -> Optional[Feedback]:
        if not self.can_submit:
            return None
        answer = self.answer
        correct = self.spelled == answer
        if not correct:
            for i, tile_id in enumerate(self.slots):
                if self.letter(tile_id) != answer[i]:
                    self.slots[i] = None
                    self.pool.append(tile_id)
        return self._evaluate(correct, spelling_points(self.hints_used), answer=answer)

    # ---- flow ----------------------------------------------------------

    def is_finished(self) -> bool:
        return self.last_feedback.correct and self.index >= len(self.words) - 1

    def advance(self) -> None:
        if self.last_feedback.correct:
            super().advance()
        else:
            self._resume()
