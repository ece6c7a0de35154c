"""Mimi companion: mini-game learning sessions for young English learners."""

from .content import DEFAULT_POOLS, ContentPools
from .scheduler import AsyncioScheduler, ManualScheduler, WallClockScheduler
from .session import CompanionSession, Mode, Transition
from .speech import SpeechClient, SpeechService, SpeechSynthesisError, VoiceParams
from .storage import JsonFileStore, MemoryStore, StorageError
from .usage import FeatureKind, UsageGate

__all__ = [
    "AsyncioScheduler",
    "CompanionSession",
    "ContentPools",
    "DEFAULT_POOLS",
    "FeatureKind",
    "JsonFileStore",
    "ManualScheduler",
    "MemoryStore",
    "Mode",
    "SpeechClient",
    "SpeechService",
    "SpeechSynthesisError",
    "StorageError",
    "Transition",
    "UsageGate",
    "VoiceParams",
    "WallClockScheduler",
]
