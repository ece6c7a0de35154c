# mimi/games/base.py — the round state machine every mini-game and drill shares
import logging
import random
from enum import Enum
from typing import Iterable, Optional

from .. import scoring
from ..content import ContentPools, DEFAULT_POOLS
from ..scheduler import ManualScheduler, Scheduler, TimerGroup
from ..scoring import Feedback

logger = logging.getLogger(__name__)


class GameKind(str, Enum):
    MATCHING = "matching"
    SPELLING = "spelling"
    MEMORY = "memory"
    SPEED_ROUND = "speedRound"
    LISTEN_AND_PICK = "listenAndPick"
    SENTENCE_BUILDER = "sentenceBuilder"
    BUBBLE_POP = "bubblePop"


class Phase(str, Enum):
    LOADING = "loading-round"
    AWAITING = "awaiting-input"
    EVALUATING = "evaluating"
    FEEDBACK = "feedback"
    COMPLETE = "complete"


class MutedSpeech:
    def say(self, text: str) -> None:
        pass

    def warm(self, texts: Iterable[str]) -> None:
        pass

    def cancel(self) -> None:
        pass


class Round:
    """
    loading-round -> awaiting-input -> evaluating -> feedback -> (loading-round | complete)

    Subclasses fill in the content hooks (`setup`, `load_item`, `is_finished`)
    and expose their own input methods, each of which must check
    `accepting_input` first. Scoring only ever happens in `_evaluate`.
    """

    kind = None
    feedback_delay = 1.5

    def __init__(
        self,
        pools: ContentPools = DEFAULT_POOLS,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
        speech=None,
    ):
        self.pools = pools
        self.rng = rng or random.Random()
        self.scheduler = scheduler or ManualScheduler()
        self.speech = speech or MutedSpeech()
        self.timers = TimerGroup(self.scheduler)
        self.phase = Phase.LOADING
        self.score = 0
        self.last_feedback: Optional[Feedback] = None
        self.closed = False

    # ---- lifecycle -----------------------------------------------------

    def start(self) -> None:
        """Enter the round with fresh random content and a zero score."""
        self.timers.cancel_all()
        self.closed = False
        self.score = 0
        self.last_feedback = None
        self.phase = Phase.LOADING
        self.setup()
        self._load()
        self.on_start()
        logger.debug("%s round started", self.name)

    def replay(self) -> bool:
        if self.phase is not Phase.COMPLETE or self.closed:
            return False
        self.start()
        return True

    def exit(self) -> None:
        self.closed = True
        self.timers.cancel_all()
        logger.debug("%s round closed (score %d)", self.name, self.score)

    @property
    def name(self) -> str:
        return self.kind.value if isinstance(self.kind, Enum) else type(self).__name__

    @property
    def accepting_input(self) -> bool:
        return self.phase is Phase.AWAITING and not self.closed

    @property
    def complete(self) -> bool:
        return self.phase is Phase.COMPLETE

    # ---- hooks ---------------------------------------------------------

    def setup(self) -> None:
        """Build the whole round's content (word list, board, ...)."""

    def load_item(self) -> None:
        """Prepare the current item for display."""

    def on_item_ready(self) -> None:
        pass

    def on_start(self) -> None:
        pass

    def is_finished(self) -> bool:
        raise NotImplementedError

    def next_item(self) -> None:
        raise NotImplementedError

    def advance(self) -> None:
        """Called after feedback when the round is not over."""
        self.next_item()
        self._load()

    # ---- audio (never allowed to break the round) ----------------------

    def _say(self, text: str) -> None:
        try:
            self.speech.say(text)
        except Exception as e:
            logger.warning("could not speak %r: %s", text, e)

    def _warm(self, texts: Iterable[str]) -> None:
        try:
            self.speech.warm(list(texts))
        except Exception as e:
            logger.warning("prefetch skipped: %s", e)

    # ---- transitions ---------------------------------------------------

    def _load(self) -> None:
        self.phase = Phase.LOADING
        self.load_item()
        self.phase = Phase.AWAITING
        self.on_item_ready()

    def _resume(self) -> None:
        self.phase = Phase.AWAITING

    def _evaluate(
        self,
        correct: bool,
        points: int,
        answer: Optional[str] = None,
        delay: Optional[float] = None,
    ) -> Feedback:
        self.phase = Phase.EVALUATING
        fb = scoring.feedback(correct, points, self.rng, answer)
        self.score += fb.delta
        self.last_feedback = fb
        self.phase = Phase.FEEDBACK

        wait = self.feedback_delay if delay is None else delay
        if wait <= 0:
            self._after_feedback()
        else:
            self.timers.later(wait, self._after_feedback)
        return fb

    def _after_feedback(self) -> None:
        if self.closed or self.phase is not Phase.FEEDBACK:
            return
        if self.is_finished():
            self._finish()
        else:
            self.advance()

    def _finish(self) -> None:
        if self.phase is Phase.COMPLETE:
            return
        self.timers.cancel_all()
        self.phase = Phase.COMPLETE
        logger.info("%s round complete with %d points", self.name, self.score)


class TimedRound(Round):
    """A round that ends strictly when its countdown runs out."""

    duration = 60.0

    def on_start(self) -> None:
        self.ends_at = self.scheduler.now() + self.duration
        self.timers.later(self.duration, self._finish)

    @property
    def seconds_left(self) -> float:
        if self.phase is Phase.COMPLETE:
            return 0.0
        return max(0.0, self.ends_at - self.scheduler.now())

    def is_finished(self) -> bool:
        return False


def pick_options(vocabulary, target, rng: random.Random, count: int = 4) -> list:
    """`target` plus `count - 1` other items, shuffled."""
    others = [item for item in vocabulary if item.id != target.id]
    options = [target] + rng.sample(others, count - 1)
    rng.shuffle(options)
    return options
