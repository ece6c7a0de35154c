# pages/companion.py

import asyncio
import base64
import json
import logging
import time

import streamlit as st
import streamlit.components.v1 as components

from mimi import config
from mimi.games import GAME_TITLES, GAMES, FREE_GAMES, GameKind, Phase
from mimi.session import DAILY_LIMIT, CompanionSession, Mode
from mimi.scheduler import WallClockScheduler
from mimi.scoring import MAX_SPELLING_HINTS
from mimi.speech import PREFETCH_AHEAD, SpeechClient, SpeechService, VoiceParams
from mimi.storage import JsonFileStore
from mimi.usage import FeatureKind, UsageGate

# ---------------------------------------------------------------------
# BASIC CONFIG
# ---------------------------------------------------------------------
st.set_page_config(
    page_title="Mimi – Companion",
    page_icon="🐲",
    layout="wide",
    initial_sidebar_state="collapsed",
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

TIMED_REFRESH_SECONDS = 0.5


# ---------------------------------------------------------------------
# AUDIO OUTPUT (browser side)
# ---------------------------------------------------------------------
class BrowserPlayer:
    """Plays cached mp3 bytes with a JS Audio() element."""

    def play(self, audio: bytes) -> None:
        b64 = base64.b64encode(audio).decode("utf-8")
        components.html(
            f"""
            <script>
              try {{
                window.parent.__mimiAudio && window.parent.__mimiAudio.pause();
                var audio = new Audio('data:audio/mpeg;base64,{b64}');
                window.parent.__mimiAudio = audio;
                audio.play().catch(function(_){{}});
              }} catch (e) {{}}
            </script>
            """,
            height=0,
        )

    def stop(self) -> None:
        components.html(
            """
            <script>
              try {
                window.parent.__mimiAudio && window.parent.__mimiAudio.pause();
                window.parent.speechSynthesis && window.parent.speechSynthesis.cancel();
              } catch (e) {}
            </script>
            """,
            height=0,
        )


def browser_voice(text: str, voice: VoiceParams) -> None:
    """Local speech engine: the browser's speechSynthesis with Mimi's voice."""
    components.html(
        f"""
        <script>
          (function() {{
            var synth = window.parent.speechSynthesis || window.speechSynthesis;
            if (!synth) return;
            synth.cancel();
            var u = new SpeechSynthesisUtterance({json.dumps(text)});
            u.lang = {json.dumps(voice.lang)};
            u.pitch = {voice.pitch};
            u.rate = {voice.rate};
            synth.speak(u);
          }})();
        </script>
        """,
        height=0,
    )


class PageSpeech:
    """Blocking adapter: Streamlit reruns have no event loop of their own."""

    def __init__(self, service: SpeechService):
        self.service = service

    def say(self, text: str) -> None:
        asyncio.run(self.service.speak(text))

    def warm(self, texts) -> None:
        pending = [t for t in list(texts)[:PREFETCH_AHEAD] if not self.service.is_cached(t)]
        if not pending:
            return

        async def _warm():
            await asyncio.gather(*(self.service.prefetch(t) for t in pending))

        asyncio.run(_warm())

    def cancel(self) -> None:
        self.service.cancel()


# ---------------------------------------------------------------------
# SERVICES
# ---------------------------------------------------------------------
@st.cache_resource
def get_audio_cache() -> dict:
    """text -> mp3 bytes, shared by every browser session in this process."""
    return {}


def get_speech_service() -> SpeechService:
    # each session reruns on its own thread and event loop; only the cache is shared
    if "speech_service" not in st.session_state:
        st.session_state.speech_service = SpeechService(
            SpeechClient(),
            player=BrowserPlayer(),
            fallback=browser_voice,
            cache=get_audio_cache(),
        )
    return st.session_state.speech_service


@st.cache_resource
def get_usage_gate() -> UsageGate:
    return UsageGate(
        JsonFileStore(config.USAGE_STORE_PATH),
        is_premium=lambda: bool(st.session_state.get("is_premium", False)),
    )


# ---------------------------------------------------------------------
# SESSION STATE INIT
# ---------------------------------------------------------------------
if "is_premium" not in st.session_state:
    st.session_state.is_premium = False

if "gate_prompt" not in st.session_state:
    st.session_state.gate_prompt = None


def _remember_denial(transition):
    st.session_state.gate_prompt = transition


if "companion" not in st.session_state:
    st.session_state.companion = CompanionSession(
        get_usage_gate(),
        speech=PageSpeech(get_speech_service()),
        scheduler=WallClockScheduler(),
        on_gate_denied=_remember_denial,
    )

companion: CompanionSession = st.session_state.companion
companion.scheduler.catch_up()

# ---------------------------------------------------------------------
# SIDEBAR – GROWN-UP CONTROLS
# ---------------------------------------------------------------------
with st.sidebar:
    st.title("Grown-Up Settings")
    st.caption("Premium flag normally comes from the billing service.")
    st.session_state.is_premium = st.checkbox(
        "Premium account", value=st.session_state.is_premium
    )
    gate = companion.gate
    for kind in (FeatureKind.VOCABULARY, FeatureKind.GAMES):
        left = gate.remaining(kind)
        st.write(f"{kind.value}: {'unlimited' if left is None else f'{left} left today'}")
    if st.button("Close companion"):
        companion.close()
        del st.session_state["companion"]
        st.rerun()


# ---------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------
def show_gate_prompt():
    prompt = st.session_state.gate_prompt
    if prompt is None:
        return
    if prompt.reason == DAILY_LIMIT:
        st.warning("You've played a lot today! 🌟 Come back tomorrow, or ask a grown-up about Premium.")
    else:
        st.warning("This game is for Premium friends! 👑 Ask a grown-up to unlock it.")
    if st.button("OK", key="gate_ok"):
        st.session_state.gate_prompt = None
        st.rerun()


def show_feedback(rnd):
    fb = rnd.last_feedback
    if fb is None or rnd.phase is not Phase.FEEDBACK:
        return
    if fb.correct:
        st.success(f"{fb.message} +{fb.delta}")
    else:
        text = fb.message + (f" The answer is **{fb.answer}**." if fb.answer else "")
        st.error(text)


def show_complete(rnd, extra: str = ""):
    st.markdown(f"### 🎉 Finished! Score: **{rnd.score}**")
    if extra:
        st.write(extra)
    c1, c2 = st.columns(2)
    if c1.button("🔁 Play again", key="replay"):
        companion.replay()
        st.rerun()
    if c2.button("⬅️ Back", key="done_back"):
        if companion.mode is Mode.GAMES:
            companion.back_to_games()
        else:
            companion.back_to_menu()
        st.rerun()


def header(title: str, rnd=None):
    cols = st.columns([1, 2, 1])
    with cols[0]:
        if st.button("⬅️ Back", key="hdr_back"):
            if companion.mode is Mode.GAMES and companion.active_game is not None:
                companion.back_to_games()
            else:
                companion.back_to_menu()
            st.rerun()
    with cols[1]:
        st.markdown(f"<h3 style='text-align:center;'>{title}</h3>", unsafe_allow_html=True)
    with cols[2]:
        if rnd is not None:
            st.markdown(f"<div style='text-align:right;'>⭐ <b>{rnd.score}</b></div>", unsafe_allow_html=True)


def option_buttons(labels, on_pick, key_prefix, disabled=False):
    cols = st.columns(len(labels))
    for i, (label, col) in enumerate(zip(labels, cols)):
        if col.button(label, key=f"{key_prefix}_{i}", disabled=disabled, use_container_width=True):
            on_pick(i)
            st.rerun()


# ---------------------------------------------------------------------
# SCREENS
# ---------------------------------------------------------------------
def menu_screen():
    st.markdown("## Learn with Mimi! 🐲")
    st.write("What do you want to learn today?")
    c1, c2, c3 = st.columns(3)
    if c1.button("📚 Learn Words", use_container_width=True):
        companion.select_mode(Mode.VOCABULARY)
        st.rerun()
    if c2.button("🎯 Daily Challenge", use_container_width=True):
        companion.select_mode(Mode.DAILY_CHALLENGE)
        st.rerun()
    if c3.button("🎮 Quick Games", use_container_width=True):
        companion.select_mode(Mode.GAMES)
        st.rerun()


def vocabulary_screen():
    drill = companion.round
    header(f"Word {drill.index + 1} / {len(drill.words)}", drill)
    if drill.complete:
        show_complete(drill)
        return
    word = drill.word
    if drill.step == "learn":
        st.markdown(f"<div style='font-size:80px;text-align:center'>{word.emoji}</div>", unsafe_allow_html=True)
        st.markdown(f"## {word.word}  ·  _{word.translation}_")
        st.write(f'"{word.example_sentence}"')
        c1, c2, c3 = st.columns(3)
        if c1.button("🔊 Listen", disabled=get_speech_service().busy):
            drill.speak_word()
        if c2.button("🔊 Sentence", disabled=get_speech_service().busy):
            drill.speak_example()
        if c3.button("I'm ready! Quiz time! 🎯"):
            drill.start_quiz()
            st.rerun()
        return
    st.markdown(f"### What is **{word.word}** {word.emoji}?")
    show_feedback(drill)
    option_buttons(drill.options, drill.answer, "vocab", disabled=not drill.accepting_input)


def challenge_screen():
    challenge = companion.round
    header(f"Question {challenge.index + 1} / {len(challenge.questions)}", challenge)
    if challenge.complete:
        show_complete(challenge, challenge.verdict)
        return
    q = challenge.question
    st.markdown(f"### {q.emoji} {q.question}")
    show_feedback(challenge)
    option_buttons(list(q.options), challenge.answer, "challenge", disabled=not challenge.accepting_input)


def games_menu_screen():
    header("Quick Games")
    cols = st.columns(4)
    for i, kind in enumerate(GAMES):
        locked = kind not in FREE_GAMES and not companion.is_premium
        label = f"{'🔒 ' if locked else ''}{GAME_TITLES[kind]}"
        if cols[i % 4].button(label, key=f"game_{kind.value}", use_container_width=True):
            companion.select_game(kind)
            st.rerun()


def matching_screen(game):
    c1, c2 = st.columns(2)
    with c1:
        for item_id in game.english:
            done = item_id in game.matched
            label = ("✅ " if done else "") + game.items[item_id].word
            if st.button(label, key=f"en_{item_id}", disabled=done, use_container_width=True):
                game.select_english(item_id)
                st.rerun()
    with c2:
        for item_id in game.translations:
            done = item_id in game.matched
            label = ("✅ " if done else "") + game.items[item_id].translation
            if st.button(label, key=f"tr_{item_id}", disabled=done, use_container_width=True):
                game.select_translation(item_id)
                st.rerun()


def spelling_screen(game):
    st.markdown(f"<div style='font-size:64px;text-align:center'>{game.target.emoji}</div>", unsafe_allow_html=True)
    st.markdown(f"### {' '.join(game.spelled)}")
    slot_cols = st.columns(len(game.slots))
    for i, (tile_id, col) in enumerate(zip(game.slots, slot_cols)):
        if tile_id is not None and col.button(game.letter(tile_id), key=f"slot_{i}"):
            game.remove(i)
            st.rerun()
    pool_cols = st.columns(max(1, len(game.pool)))
    for tile_id, col in zip(list(game.pool), pool_cols):
        if col.button(game.letter(tile_id), key=f"tile_{tile_id}"):
            game.place(tile_id)
            st.rerun()
    c1, c2 = st.columns(2)
    if c1.button(f"💡 Hint ({game.hints_used}/{MAX_SPELLING_HINTS})", disabled=not game.accepting_input):
        game.use_hint()
        st.rerun()
    if c2.button("✔️ Check", disabled=not game.can_submit):
        game.submit()
        st.rerun()


def memory_screen(game):
    st.caption(f"Moves: {game.moves}")
    cols = st.columns(4)
    for card in game.cards:
        face = card.face if game.is_face_up(card.index) else "❓"
        if cols[card.index % 4].button(face, key=f"card_{card.index}", use_container_width=True):
            game.flip(card.index)
            st.rerun()


def speed_screen(game):
    st.progress(game.seconds_left / game.duration, text=f"⏱️ {int(game.seconds_left)}s")
    st.markdown(f"### {game.target.emoji} {game.target.word}")
    option_buttons(
        [o.translation for o in game.options],
        lambda i: game.answer(game.options[i].id),
        f"speed_{game.answered}",
    )


def listen_screen(game):
    st.caption(f"Round {game.index + 1} / {len(game.targets)}")
    if st.button("🔊 Listen again", disabled=not game.accepting_input):
        game.play_again()
    option_buttons(
        [f"{o.emoji}" for o in game.options],
        lambda i: game.pick(game.options[i].id),
        f"listen_{game.index}",
        disabled=not game.accepting_input,
    )


def sentence_screen(game):
    st.caption(f"Sentence {game.index + 1} / {len(game.templates)}")
    st.markdown(f"### {game.sentence or '…'}")
    cols = st.columns(len(game.tiles))
    for tile, col in zip(game.tiles, cols):
        used = tile.id in game.built
        if col.button(tile.word, key=f"word_{game.index}_{tile.id}", disabled=used):
            game.tap(tile.id)
            st.rerun()
    c1, c2 = st.columns(2)
    if c1.button("↩️ Undo", disabled=not game.built):
        game.untap()
        st.rerun()
    if c2.button("✔️ Check", disabled=not game.can_submit):
        game.submit()
        st.rerun()


def bubble_screen(game):
    st.progress(game.seconds_left / game.duration, text=f"⏱️ {int(game.seconds_left)}s")
    st.markdown(f"### Pop: **{game.target_translation}**")
    for bubble in sorted(game.bubbles, key=lambda b: b.x):
        pad = int(bubble.x * 8)
        cols = st.columns([pad + 1, 2, 9 - pad])
        if cols[1].button(f"🫧 {bubble.item.word}", key=f"bubble_{bubble.id}"):
            game.pop(bubble.id)
            st.rerun()


GAME_SCREENS = {
    GameKind.MATCHING: matching_screen,
    GameKind.SPELLING: spelling_screen,
    GameKind.MEMORY: memory_screen,
    GameKind.SPEED_ROUND: speed_screen,
    GameKind.LISTEN_AND_PICK: listen_screen,
    GameKind.SENTENCE_BUILDER: sentence_screen,
    GameKind.BUBBLE_POP: bubble_screen,
}


def game_screen():
    game = companion.round
    header(GAME_TITLES[companion.active_game], game)
    if game.complete:
        show_complete(game)
        return
    show_feedback(game)
    GAME_SCREENS[companion.active_game](game)


# ---------------------------------------------------------------------
# DISPATCH
# ---------------------------------------------------------------------
show_gate_prompt()

if companion.mode is Mode.MENU:
    menu_screen()
elif companion.mode is Mode.VOCABULARY:
    vocabulary_screen()
elif companion.mode is Mode.DAILY_CHALLENGE:
    challenge_screen()
elif companion.active_game is None:
    games_menu_screen()
else:
    game_screen()

# feedback delays and countdowns only move when the page reruns
rnd = companion.round
if rnd is not None and not rnd.complete and companion.scheduler.pending:
    time.sleep(TIMED_REFRESH_SECONDS)
    st.rerun()
