import os
from dotenv import load_dotenv

# Load .env from repo root (dotenv auto-walks up from CWD)
load_dotenv()


def _read_secret_file(path: str | None) -> str | None:
    if not path:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return None


def _get_secret(name: str) -> str | None:
    return os.getenv(name) or _read_secret_file(os.getenv(f"{name}_FILE"))


# --- The Odds API ---
ODDS_API_KEY = _get_secret("ODDS_API_KEY")
ODDS_API_BASE = os.getenv("ODDS_API_BASE", "https://api.the-odds-api.com/v4")

# --- Sportradar (proxied, key never leaves the server) ---
SPORTRADAR_API_KEY = _get_secret("SPORTRADAR_API_KEY")
SPORTRADAR_BASE = os.getenv("SPORTRADAR_BASE", "https://api.sportradar.us")

# --- OpenAI (primary bet parser) ---
OPENAI_API_KEY = _get_secret("OPENAI_API_KEY")
OPENAI_ENDPOINT = os.getenv("OPENAI_ENDPOINT", "https://api.openai.com/v1/chat/completions")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
