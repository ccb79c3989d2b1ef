from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

ALPHAVANTAGE_URL = "https://www.alphavantage.co/query"
HANDLER_NAME = "alphaview"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_bool(environ: Mapping[str, str], name: str, default: bool = False) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(environ: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = (environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return max(minimum, int(raw))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: str = ALPHAVANTAGE_URL
    timeout: int = 10
    chart_height: int = 420
    log_level: str = "INFO"
    debug: bool = False


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from the process environment (or the given mapping)."""
    env = os.environ if environ is None else environ
    api_key = (env.get("ALPHAVANTAGE_API_KEY") or env.get("VITE_API_KEY") or "").strip()
    return Settings(
        api_key=api_key or "demo",
        base_url=(env.get("AV_BASE_URL") or ALPHAVANTAGE_URL).strip(),
        timeout=_env_int(env, "AV_TIMEOUT_SECONDS", 10),
        chart_height=_env_int(env, "AV_CHART_HEIGHT", 420, minimum=200),
        log_level=(env.get("AV_LOG_LEVEL") or "INFO").strip().upper(),
        debug=_env_bool(env, "AV_DEBUG"),
    )


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    numeric = getattr(logging, level, None)
    root.setLevel(numeric if isinstance(numeric, int) else logging.INFO)
    # Streamlit re-executes the script on every interaction.
    if any(h.get_name() == HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    handler.set_name(HANDLER_NAME)
    root.addHandler(handler)
