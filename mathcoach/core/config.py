"""
mathcoach/core/config.py
Environment-driven settings. Values may come from a local .env file.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_HISTORY_KEY = "math_problem_history"
DEFAULT_STATS_KEY = "math_user_stats"


def get_api_key() -> str:
    api_key = os.getenv("GEMINI_API_KEY", "").strip()
    if not api_key:
        raise RuntimeError("Missing GEMINI_API_KEY in environment (.env).")
    return api_key


def get_model() -> str:
    return os.getenv("GEMINI_MODEL", DEFAULT_MODEL).strip() or DEFAULT_MODEL


def get_api_base() -> str:
    return os.getenv("GEMINI_API_BASE", DEFAULT_API_BASE).strip().rstrip("/") or DEFAULT_API_BASE


def get_timeout() -> float:
    raw = os.getenv("GEMINI_TIMEOUT", "60").strip()
    try:
        return float(raw)
    except ValueError:
        return 60.0


def get_storage_backend() -> str:
    backend = os.getenv("MATHCOACH_STORAGE", "file").strip().lower()
    return backend if backend in ("file", "memory") else "file"


def get_data_dir() -> Path:
    env_dir = os.getenv("MATHCOACH_DATA_DIR", "").strip()
    return Path(env_dir) if env_dir else BASE_DIR / "data"


def get_history_key() -> str:
    return os.getenv("MATHCOACH_HISTORY_KEY", DEFAULT_HISTORY_KEY).strip() or DEFAULT_HISTORY_KEY


def get_stats_key() -> str:
    return os.getenv("MATHCOACH_STATS_KEY", DEFAULT_STATS_KEY).strip() or DEFAULT_STATS_KEY
