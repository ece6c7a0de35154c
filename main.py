# main.py — Mimi landing page (optional background + centered Start)
import base64, os
import streamlit as st

from mimi.usage import FeatureKind

st.set_page_config(
    page_title="Mimi – Learn English",
    page_icon="🐲",
    layout="wide",
    initial_sidebar_state="collapsed",
)

def _b64(path: str) -> str | None:
    if not os.path.exists(path):
        return None
    with open(path, "rb") as f:
        return base64.b64encode(f.read()).decode()

# --- EXPECTED LOCATIONS (same folder as main.py) ---
BG_PATHS     = ["mimi_background.png", "assets/mimi_background.png"]
MASCOT_PATHS = ["mimi_dragon.png", "assets/mimi_dragon.png"]

def _first_existing(paths):
    for p in paths:
        if os.path.exists(p):
            return p
    return None

bg_file     = _first_existing(BG_PATHS)
mascot_file = _first_existing(MASCOT_PATHS)

bg_css = ""
if bg_file:
    bg_css = f"""
        [data-testid="stAppViewContainer"] {{
          background-image: url("data:image/png;base64,{_b64(bg_file)}");
          background-size: cover;
          background-position: center;
        }}
    """

# --- CSS: hide chrome, center the Start button, float the mascot ---
st.markdown(
    f"""
    <style>
    header, footer {{ visibility: hidden; }}
    [data-testid="stSidebar"] {{ display: none; }}
    .block-container {{ padding: 0; margin: 0; max-width: 100%; }}
    {bg_css}
    .center-wrap {{
      position: fixed;
      inset: 0;
      display: flex;
      flex-direction: column;
      align-items: center;
      justify-content: center;
      gap: 14px;
      z-index: 10;
    }}
    .start-btn {{
      font-size: 24px;
      padding: 18px 40px;
      border-radius: 20px;
      border: none;
      background: #ffffffee;
      cursor: pointer;
      font-weight: 700;
      color: #6d28d9;
      box-shadow: 0 6px 16px rgba(0,0,0,0.25);
    }}
    .start-btn:hover {{ background:#f3e8ff; transform: scale(1.05); }}
    .free-note {{ color: #ffffff; font-weight: 600; text-shadow: 0 1px 4px rgba(0,0,0,.5); }}
    .mascot {{
      position: fixed;
      right: 20px;
      bottom: 20px;
      height: 140px;
      z-index: 11;
      animation: bob 1.2s ease-in-out infinite alternate;
    }}
    @keyframes bob {{ 0% {{transform: translateY(0)}} 100% {{transform: translateY(-10px)}} }}
    </style>
    """,
    unsafe_allow_html=True,
)

# --- Centered Start button that routes to /companion (pages/companion.py) ---
st.markdown(
    f"""
    <div class="center-wrap">
      <form action="companion">
        <button class="start-btn">🐲 Play with Mimi</button>
      </form>
      <div class="free-note">Free friends get daily {FeatureKind.VOCABULARY.value} and {FeatureKind.GAMES.value} turns!</div>
    </div>
    """,
    unsafe_allow_html=True,
)

# --- Mascot (optional) ---
if mascot_file:
    st.markdown(f'<img class="mascot" src="data:image/png;base64,{_b64(mascot_file)}" />',
                unsafe_allow_html=True)
