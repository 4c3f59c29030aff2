"""
settings.py — Central config for SiteScan

Precedence for config values:
1) Streamlit secrets (if available)
2) Environment variables (a local .env is loaded first)
3) Sensible defaults

All file paths derive from DATA_ROOT.
Secrets (API keys, team password) should live in .streamlit/secrets.toml.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

# --- Streamlit secrets (optional) ---
_ST_SECRETS = None
try:
    import streamlit as st  # noqa: F401
    _ST_SECRETS = getattr(st, "secrets", None)
except Exception:
    _ST_SECRETS = None


# --- Helpers ---------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent

def from_secrets_or_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Return value from st.secrets[key] if available, else os.getenv(key), else default."""
    if _ST_SECRETS is not None:
        try:
            val = _ST_SECRETS.get(key, None)
            if val is not None:
                return str(val)
        except Exception:
            # no secrets.toml present
            pass
    return os.getenv(key, default)

def as_float(value: Optional[str], default: Optional[float]) -> Optional[float]:
    try:
        return float(value) if value not in (None, "") else default
    except ValueError:
        return default

def resolve_path(raw: str | Path, *, base: Path = PROJECT_ROOT) -> Path:
    """
    Resolve a filesystem path. If absolute or starts with ~, respect it.
    If relative, resolve under `base`.
    """
    p = Path(raw).expanduser()
    return p if p.is_absolute() else (base / p)

def ensure_dirs(*paths: Path) -> None:
    for p in paths:
        p.mkdir(parents=True, exist_ok=True)


# --- Core Paths ------------------------------------------------------------

DATA_ROOT = resolve_path(from_secrets_or_env("DATA_ROOT", "data"))
IMAGE_DIR = DATA_ROOT / "images"
DB_PATH   = resolve_path(from_secrets_or_env("DB_PATH", str(DATA_ROOT / "sitescan.db")))

ensure_dirs(DATA_ROOT, IMAGE_DIR)


# --- Display ---------------------------------------------------------------

THEME_COLOR = from_secrets_or_env("THEME_COLOR", "#2D5F4C")
LOG_LEVEL   = from_secrets_or_env("LOG_LEVEL", "INFO").upper()


# --- Inference (OpenAI) ----------------------------------------------------

OPENAI_API_KEY = from_secrets_or_env("OPENAI_API_KEY")
LLM_MODEL      = from_secrets_or_env("LLM_MODEL", "gpt-4o-mini")
LLM_MAX_TRIES  = int(from_secrets_or_env("LLM_MAX_TRIES", "3"))


# --- Location --------------------------------------------------------------

LOCATION_TIMEOUT = as_float(from_secrets_or_env("LOCATION_TIMEOUT"), 10.0)

# Optional fixed field-station position (e.g. a surveyed datum)
SITE_LATITUDE  = as_float(from_secrets_or_env("SITE_LATITUDE"), None)
SITE_LONGITUDE = as_float(from_secrets_or_env("SITE_LONGITUDE"), None)
SITE_ACCURACY  = as_float(from_secrets_or_env("SITE_ACCURACY"), None)


# --- Sharing / Auth ----------------------------------------------------------

APP_BASE_URL   = from_secrets_or_env("APP_BASE_URL", "http://localhost:8501").rstrip("/")
QR_SERVICE_URL = from_secrets_or_env("QR_SERVICE_URL", "https://api.qrserver.com/v1/create-qr-code/")
AUTH_PASSWORD  = from_secrets_or_env("AUTH_PASSWORD")
