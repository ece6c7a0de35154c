# server.py
import base64
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from openai import OpenAI
from pydantic import BaseModel

from mimi import config

# ----------- env + logging ----------------------
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("tts_server")

# ----------- FastAPI app ------------------------
app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],       # OK for dev
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_client = None


def get_client() -> OpenAI:
    """Lazily build the OpenAI client so the app can start without a key."""
    global _client
    if _client is None:
        _client = OpenAI(api_key=os.getenv("OPENAI_API_KEY"))
    return _client


# ----------- text-to-speech endpoint -------------

class TTSRequest(BaseModel):
    text: str
    voice: str | None = None


class TTSResponse(BaseModel):
    audio: str
    format: str = "mp3"


@app.post("/tts", response_model=TTSResponse)
def tts_endpoint(req: TTSRequest):
    """
    Synthesize `text` with OpenAI TTS and return it as base64 mp3.
    The companion caches the result by exact text.
    """
    text = req.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Text is required")

    if not os.getenv("OPENAI_API_KEY"):
        logger.error("OPENAI_API_KEY not found in environment")
        raise HTTPException(status_code=500, detail="API key not configured")

    logger.info("🔊 Generating TTS audio (%d chars)", len(text))
    try:
        resp = get_client().audio.speech.create(
            model=config.OPENAI_TTS_MODEL,
            voice=req.voice or config.OPENAI_TTS_VOICE,
            input=text[: config.TTS_MAX_CHARS],
            response_format="mp3",
        )
        audio = resp.content
    except Exception as e:
        logger.error("❌ OpenAI TTS error: %s", e)
        raise HTTPException(status_code=502, detail="OpenAI TTS Error")

    logger.info("✅ TTS audio generated")
    return {"audio": base64.b64encode(audio).decode("utf-8"), "format": "mp3"}


@app.get("/health")
def health():
    return {"status": "ok", "tts_configured": bool(os.getenv("OPENAI_API_KEY"))}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
