from .base import GameKind, Phase, Round, TimedRound
from .bubble_pop import BubblePop
from .listen_pick import ListenAndPick
from .matching import MatchingGame
from .memory import MemoryGame
from .sentence_builder import SentenceBuilder
from .speed_round import SpeedRound
from .spelling import SpellingGame

GAMES = {
    GameKind.MATCHING: MatchingGame,
    GameKind.SPELLING: SpellingGame,
    GameKind.MEMORY: MemoryGame,
    GameKind.SPEED_ROUND: SpeedRound,
    GameKind.LISTEN_AND_PICK: ListenAndPick,
    GameKind.SENTENCE_BUILDER: SentenceBuilder,
    GameKind.BUBBLE_POP: BubblePop,
}

# open to everyone; the rest need a premium account
FREE_GAMES = frozenset({GameKind.MATCHING, GameKind.MEMORY})

GAME_TITLES = {
    GameKind.MATCHING: "🔗 Word Match",
    GameKind.SPELLING: "🔤 Spell It",
    GameKind.MEMORY: "🧠 Memory Cards",
    GameKind.SPEED_ROUND: "⚡ Speed Round",
    GameKind.LISTEN_AND_PICK: "👂 Listen & Pick",
    GameKind.SENTENCE_BUILDER: "🧩 Sentence Builder",
    GameKind.BUBBLE_POP: "🫧 Bubble Pop",
}

__all__ = [
    "GAMES",
    "GAME_TITLES",
    "FREE_GAMES",
    "GameKind",
    "Phase",
    "Round",
    "TimedRound",
    "BubblePop",
    "ListenAndPick",
    "MatchingGame",
    "MemoryGame",
    "SentenceBuilder",
    "SpeedRound",
    "SpellingGame",
]
