from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from config.settings import get_settings

_ENV_LOADED = False

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _ensure_env_loaded() -> None:
    global _ENV_LOADED
    if _ENV_LOADED:
        return

    base_dir = Path(__file__).resolve().parent.parent
    env_path = base_dir / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=True)
    else:
        load_dotenv(override=True)

    _ENV_LOADED = True


def bootstrap(log_level: Optional[str] = None) -> None:
    """Load ``.env`` settings and configure logging for a grading process."""
    _ensure_env_loaded()
    settings = get_settings()
    level_name = (log_level or settings.LOG_LEVEL or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
