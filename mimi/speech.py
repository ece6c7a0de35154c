# mimi/speech.py — text -> audio with an in-memory cache and a local-voice fallback
import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Set

import requests

from . import config

logger = logging.getLogger(__name__)

PREFETCH_AHEAD = 3


class SpeechSynthesisError(Exception):
    """The speech endpoint was unreachable or returned something unusable."""


@dataclass(frozen=True)
class VoiceParams:
    """Friendly character voice for the local speech engine."""

    lang: str = "en-US"
    pitch: float = 1.2
    rate: float = 0.9


# ── HTTP client for the /tts backend ─────────────────────────────────────

class SpeechClient:
    def __init__(
        self,
        base_url: str = config.BACKEND_URL,
        timeout: float = config.TTS_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def synthesize(self, text: str) -> bytes:
        """POST {text} to the backend and return the decoded mp3 bytes."""
        try:
            r = self.session.post(
                f"{self.base_url}/tts", json={"text": text}, timeout=self.timeout
            )
            r.raise_for_status()
            payload = r.json()
            return base64.b64decode(payload["audio"])
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            raise SpeechSynthesisError(str(e)) from e


# ── playback targets ─────────────────────────────────────────────────────

class NullPlayer:
    """Player used when there is nowhere to play audio (tests, headless runs)."""

    def play(self, audio: bytes) -> None:
        logger.debug("play %d bytes (no output device)", len(audio))

    def stop(self) -> None:
        pass


def silent_voice(text: str, voice: VoiceParams) -> None:
    logger.debug("local voice (silent): %r", text)


# ── cache + coordination ─────────────────────────────────────────────────

class SpeechService:
    """
    Resolves text to audio, caching every successful synthesis by its exact
    text. At most one request per text is in flight on an event loop; a
    `speak` for a different text while another is loading is dropped, so a
    child hammering the button gets predictable behaviour.

    The in-flight and playback state belongs to one event loop, so build one
    service per UI session. Sessions may share a single `cache` dict.
    """

    def __init__(
        self,
        client: SpeechClient,
        player=None,
        fallback: Callable[[str, VoiceParams], None] = silent_voice,
        voice: VoiceParams = VoiceParams(),
        cache: Optional[Dict[str, bytes]] = None,
    ):
        self.client = client
        self.player = player or NullPlayer()
        self.fallback = fallback
        self.voice = voice
        self.cache: Dict[str, bytes] = {} if cache is None else cache
        self.requests_sent = 0
        self._inflight: Dict[str, asyncio.Future] = {}
        self._speaking: Optional[str] = None
        self._generation = 0
        self._tasks: Set[asyncio.Task] = set()

    @property
    def busy(self) -> bool:
        """True while a `speak` is waiting on the network."""
        return self._speaking is not None

    def is_cached(self, text: str) -> bool:
        return text in self.cache

    # ---- network -------------------------------------------------------

    async def _request(self, text: str) -> bytes:
        self.requests_sent += 1
        try:
            audio = await asyncio.to_thread(self.client.synthesize, text)
        except SpeechSynthesisError:
            raise
        except Exception as e:
            raise SpeechSynthesisError(str(e)) from e
        self.cache[text] = audio
        return audio

    def _forget(self, text: str, future: asyncio.Future) -> None:
        if self._inflight.get(text) is future:
            del self._inflight[text]

    async def _fetch(self, text: str) -> bytes:
        """Cached audio, the in-flight request for `text`, or a new request."""
        if text in self.cache:
            return self.cache[text]
        loop = asyncio.get_running_loop()
        future = self._inflight.get(text)
        if future is None or future.get_loop() is not loop:
            future = loop.create_task(self._request(text))
            future.add_done_callback(_retrieve_exception)
            future.add_done_callback(lambda f: self._forget(text, f))
            self._inflight[text] = future
        try:
            # shielded: cancelling a speak must not abort the cache fill
            return await asyncio.shield(future)
        except SpeechSynthesisError:
            raise
        except Exception as e:
            raise SpeechSynthesisError(str(e)) from e

    # ---- playback ------------------------------------------------------

    def stop(self) -> None:
        try:
            self.player.stop()
        except Exception as e:
            logger.warning("could not stop playback: %s", e)

    def _play(self, audio: bytes) -> None:
        self.stop()
        try:
            self.player.play(audio)
        except Exception as e:
            logger.warning("playback failed: %s", e)

    def _speak_locally(self, text: str) -> None:
        self.stop()
        try:
            self.fallback(text, self.voice)
        except Exception as e:
            logger.warning("local voice failed for %r: %s", text, e)

    async def speak(self, text: str) -> None:
        if self._speaking is not None:
            if text == self._speaking and text in self._inflight:
                logger.debug("already loading %r, joining", text)
                try:
                    await self._fetch(text)
                except SpeechSynthesisError:
                    pass
            else:
                logger.debug("speech busy with %r, ignoring %r", self._speaking, text)
            return

        generation = self._generation
        audio = self.cache.get(text)
        if audio is not None:
            self._play(audio)
            return

        self.stop()
        self._speaking = text
        try:
            audio = await self._fetch(text)
        except SpeechSynthesisError as e:
            logger.warning("speech synthesis failed for %r, using local voice: %s", text, e)
            if generation == self._generation:
                self._speak_locally(text)
            return
        finally:
            self._speaking = None

        if generation == self._generation:
            self._play(audio)

    async def prefetch(self, text: str) -> None:
        """Warm the cache for `text`. Never plays, never raises."""
        if text in self.cache:
            return
        try:
            await self._fetch(text)
        except SpeechSynthesisError as e:
            logger.debug("prefetch failed for %r: %s", text, e)

    # ---- fire-and-forget helpers used by rounds ------------------------

    def say(self, text: str) -> None:
        self._spawn(self.speak(text))

    def warm(self, texts: Iterable[str]) -> None:
        for text in list(texts)[:PREFETCH_AHEAD]:
            if text not in self.cache and text not in self._inflight:
                self._spawn(self.prefetch(text))

    def _spawn(self, coro) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.debug("no running event loop, speech skipped")
            return None
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def cancel(self) -> None:
        """Stop playback and drop pending speak/prefetch calls. Cache fills still land."""
        self._generation += 1
        self.stop()
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()


def _retrieve_exception(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()
