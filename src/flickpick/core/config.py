"""Runtime settings loaded from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .feature_flags import ENV_VAR as FEATURES_ENV_VAR
from .feature_flags import FeatureFlag, parse_flags
from .memory import HISTORY_WINDOW

logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEY = "YOUR_TMDB_API_KEY"


def is_configured(api_key: str | None) -> bool:
    return bool(api_key) and api_key != PLACEHOLDER_API_KEY


def _default_history_path() -> Path:
    return Path.home() / ".flickpick" / "history.json"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid float setting", extra={"setting": name, "value": raw})
        return default
    return value if value >= 0.0 else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid int setting", extra={"setting": name, "value": raw})
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    tmdb_api_key: str | None = None
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_image_base_url: str = "https://image.tmdb.org/t/p/w500"
    http_timeout: float = 5.0
    # Match celebration window before continuation choices are offered.
    celebration_seconds: float = 3.0
    history_path: Path = field(default_factory=_default_history_path)
    history_window: int = HISTORY_WINDOW
    features: frozenset[FeatureFlag] = frozenset()

    @property
    def catalog_configured(self) -> bool:
        return is_configured(self.tmdb_api_key)

    @classmethod
    def from_env(cls) -> Settings:
        defaults = cls()
        api_key = os.getenv("FLICKPICK_TMDB_API_KEY", "").strip() or None
        history_raw = os.getenv("FLICKPICK_HISTORY_PATH", "").strip()
        return cls(
            tmdb_api_key=api_key,
            tmdb_base_url=os.getenv("FLICKPICK_TMDB_BASE_URL", "").strip() or defaults.tmdb_base_url,
            tmdb_image_base_url=os.getenv("FLICKPICK_TMDB_IMAGE_BASE_URL", "").strip()
            or defaults.tmdb_image_base_url,
            http_timeout=_env_float("FLICKPICK_HTTP_TIMEOUT", defaults.http_timeout),
            celebration_seconds=_env_float("FLICKPICK_CELEBRATION_SECONDS", defaults.celebration_seconds),
            history_path=Path(history_raw).expanduser() if history_raw else defaults.history_path,
            history_window=_env_int("FLICKPICK_HISTORY_WINDOW", defaults.history_window),
            features=parse_flags(os.getenv(FEATURES_ENV_VAR)),
        )
