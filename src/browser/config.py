"""Environment variable configuration for the browser.

Settings are loaded in priority order:
  1. Shell environment variables (highest priority)
  2. .env file in current directory
  3. ~/.markup-browser/.env (persistent config, set via `markup-browser env set`)

Run `markup-browser env` to see which settings are configured.

Known settings:
    MARKUP_MAX_WIDTH   ->  maximum line width passed to the renderer (default 120)
    MARKUP_TIMEOUT     ->  HTTP timeout in seconds (default 30)
    MARKUP_USER_AGENT  ->  User-Agent header sent with requests
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

CONFIG_DIR = Path.home() / ".markup-browser"
PERSISTENT_ENV = CONFIG_DIR / ".env"

# Load in reverse priority order (later loads don't overwrite existing)
if PERSISTENT_ENV.exists():
    load_dotenv(PERSISTENT_ENV)

load_dotenv()

DEFAULT_MAX_WIDTH = 120
DEFAULT_TIMEOUT = 30
DEFAULT_USER_AGENT = "markup-browser/0.1"


# --- Persistent config ---

def save_key(name: str, value: str) -> Path:
    """Save a setting to ~/.markup-browser/.env for persistent use."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    replaced = False
    if PERSISTENT_ENV.exists():
        for line in PERSISTENT_ENV.read_text().splitlines():
            if line.startswith(f"{name}="):
                lines.append(f"{name}={value}")
                replaced = True
            else:
                lines.append(line)

    if not replaced:
        lines.append(f"{name}={value}")

    PERSISTENT_ENV.write_text("\n".join(lines) + "\n")

    # Also set in current process
    os.environ[name] = value

    return PERSISTENT_ENV


# --- Accessors ---

def _parse_positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if not raw:
        return default
    return _parse_positive_int(name, raw)


def get_max_width() -> int:
    return _positive_int("MARKUP_MAX_WIDTH", DEFAULT_MAX_WIDTH)


def get_timeout() -> int:
    return _positive_int("MARKUP_TIMEOUT", DEFAULT_TIMEOUT)


def get_user_agent() -> str:
    return os.getenv("MARKUP_USER_AGENT") or DEFAULT_USER_AGENT


# --- Status check ---

VALID_KEYS = {"MARKUP_MAX_WIDTH", "MARKUP_TIMEOUT", "MARKUP_USER_AGENT"}
NUMERIC_KEYS = {"MARKUP_MAX_WIDTH", "MARKUP_TIMEOUT"}

ENV_VARS = {
    "MARKUP_MAX_WIDTH": {
        "default": str(DEFAULT_MAX_WIDTH),
        "description": "Maximum line width for rendered pages",
    },
    "MARKUP_TIMEOUT": {
        "default": str(DEFAULT_TIMEOUT),
        "description": "HTTP timeout in seconds",
    },
    "MARKUP_USER_AGENT": {
        "default": DEFAULT_USER_AGENT,
        "description": "User-Agent header sent with requests",
    },
}


def validate(name: str, value: str) -> None:
    """Raise ValueError if ``value`` is not a valid setting for ``name``."""
    if name in NUMERIC_KEYS:
        _parse_positive_int(name, value)


def check_env() -> list[tuple[str, bool, dict]]:
    """Return list of (var_name, is_set, info) for all known settings."""
    result = []
    for var, info in ENV_VARS.items():
        is_set = bool(os.getenv(var))
        result.append((var, is_set, info))
    return result
