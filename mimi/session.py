# mimi/session.py — one mounted companion: mode dispatch and gating
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .content import ContentPools, DEFAULT_POOLS
from .drills import DailyChallenge, VocabularyDrill
from .games import FREE_GAMES, GAMES, GameKind, Round
from .games.base import MutedSpeech
from .scheduler import ManualScheduler, Scheduler
from .usage import FeatureKind, UsageGate

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    MENU = "menu"
    VOCABULARY = "vocabulary"
    DAILY_CHALLENGE = "dailyChallenge"
    GAMES = "games"


# modes that spend a daily free action on entry
MODE_FEATURES = {
    Mode.VOCABULARY: FeatureKind.VOCABULARY,
}

# counter shown for each mode; games spend it per gated game, not on entry
MODE_COUNTERS = {
    Mode.VOCABULARY: FeatureKind.VOCABULARY,
    Mode.GAMES: FeatureKind.GAMES,
}

DAILY_LIMIT = "daily_limit"
PREMIUM_ONLY = "premium_only"


@dataclass(frozen=True)
class Transition:
    allowed: bool
    reason: Optional[str] = None
    feature: Optional[str] = None


ALLOWED = Transition(True)


class CompanionSession:
    """
    Created when the companion opens and thrown away when it closes. Owns at
    most one round at a time; the usage gate is shared across sessions and the
    speech service belongs to the caller's UI session.
    """

    def __init__(
        self,
        gate: UsageGate,
        speech=None,
        pools: ContentPools = DEFAULT_POOLS,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
        on_gate_denied: Optional[Callable[[Transition], None]] = None,
    ):
        self.gate = gate
        self.speech = speech or MutedSpeech()
        self.pools = pools
        self.rng = rng or random.Random()
        self.scheduler = scheduler or ManualScheduler()
        self.on_gate_denied = on_gate_denied
        self.mode = Mode.MENU
        self.active_game: Optional[GameKind] = None
        self.round: Optional[Round] = None
        self.closed = False

    @property
    def is_premium(self) -> bool:
        return self.gate.is_premium()

    def remaining(self, mode) -> Optional[int]:
        feature = MODE_COUNTERS.get(Mode(mode))
        return None if feature is None else self.gate.remaining(feature)

    # ---- transitions ---------------------------------------------------

    def select_mode(self, mode) -> Transition:
        if self.closed:
            return Transition(False)
        mode = Mode(mode)
        feature = MODE_FEATURES.get(mode)
        if feature is not None and not self.gate.can_consume(feature):
            return self._deny(DAILY_LIMIT, feature)

        self._unmount()
        if feature is not None:
            self.gate.consume(feature)
        self.mode = mode
        if mode is Mode.VOCABULARY:
            self._mount(VocabularyDrill)
        elif mode is Mode.DAILY_CHALLENGE:
            self._mount(DailyChallenge)
        logger.debug("mode -> %s", mode.value)
        return ALLOWED

    def select_game(self, kind) -> Transition:
        if self.closed:
            return Transition(False)
        kind = GameKind(kind)
        gated = kind not in FREE_GAMES
        if gated:
            if not self.is_premium:
                return self._deny(PREMIUM_ONLY, FeatureKind.GAMES)
            if not self.gate.can_consume(FeatureKind.GAMES):
                return self._deny(DAILY_LIMIT, FeatureKind.GAMES)
        if self.mode is not Mode.GAMES:
            self.select_mode(Mode.GAMES)

        self._unmount()
        if gated:
            self.gate.consume(FeatureKind.GAMES)
        self.active_game = kind
        self._mount(GAMES[kind])
        logger.debug("game -> %s", kind.value)
        return ALLOWED

    def back_to_games(self) -> None:
        """Leave the current mini-game for the games menu."""
        if self.mode is Mode.GAMES:
            self._unmount()

    def back_to_menu(self) -> None:
        self.select_mode(Mode.MENU)

    def replay(self) -> bool:
        return self.round is not None and self.round.replay()

    def close(self) -> None:
        self._unmount()
        self.mode = Mode.MENU
        self.closed = True
        logger.debug("companion closed")

    # ---- helpers -------------------------------------------------------

    def _mount(self, round_cls) -> None:
        self.round = round_cls(
            pools=self.pools, rng=self.rng, scheduler=self.scheduler, speech=self.speech
        )
        self.round.start()

    def _unmount(self) -> None:
        if self.round is not None:
            self.round.exit()
            self.speech.cancel()
        self.round = None
        self.active_game = None

    def _deny(self, reason: str, feature: FeatureKind) -> Transition:
        result = Transition(False, reason, feature.value)
        logger.info("gated: %s (%s)", feature.value, reason)
        if self.on_gate_denied is not None:
            self.on_gate_denied(result)
        return result
