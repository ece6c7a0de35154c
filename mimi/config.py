# mimi/config.py
import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ── load environment ─────────────────────────────────────────────────────

load_dotenv()  # loads .env from the project root


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not a whole number, using %d", name, raw, default)
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("%s=%r is not a number, using %s", name, raw, default)
        return default


# ── speech backend ───────────────────────────────────────────────────────

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")
TTS_TIMEOUT = _float_env("TTS_TIMEOUT", 8.0)

OPENAI_TTS_MODEL = os.getenv("OPENAI_TTS_MODEL", "tts-1")
OPENAI_TTS_VOICE = os.getenv("OPENAI_TTS_VOICE", "nova")
TTS_MAX_CHARS = 4000

# ── usage gate ───────────────────────────────────────────────────────────

USAGE_STORE_PATH = os.getenv("USAGE_STORE_PATH", "mimi_usage.json")

FREE_VOCABULARY_LIMIT = _int_env("FREE_VOCABULARY_LIMIT", 5)
FREE_GAMES_LIMIT = _int_env("FREE_GAMES_LIMIT", 20)
FREE_CHAT_LIMIT = _int_env("FREE_CHAT_LIMIT", 100)
