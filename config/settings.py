import os
from dataclasses import dataclass
from pathlib import Path

_ROOT_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "off", "no"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _default_sqlite_url(filename: str) -> str:
    return f"sqlite:///{_ROOT_DIR / filename}"


@dataclass(frozen=True)
class Settings:
    CLASSICMODELS_DATABASE_URL: str
    NORTHWIND_DATABASE_URL: str
    DEFAULT_REFERENCE_DATABASE: str
    QUERY_TIMEOUT_SECONDS: float
    QUERY_ROLLBACK_ENABLED: bool
    REFERENCE_FILES_DIR: str
    VALIDATE_REFERENCE_SOLUTIONS: bool
    LOG_LEVEL: str


def get_settings() -> Settings:
    return Settings(
        CLASSICMODELS_DATABASE_URL=os.getenv(
            "CLASSICMODELS_DATABASE_URL", _default_sqlite_url("classicmodels.sqlite")
        ),
        NORTHWIND_DATABASE_URL=os.getenv(
            "NORTHWIND_DATABASE_URL", _default_sqlite_url("northwind.sqlite")
        ),
        DEFAULT_REFERENCE_DATABASE=os.getenv("DEFAULT_REFERENCE_DATABASE", "ClassicModels"),
        QUERY_TIMEOUT_SECONDS=_env_float("QUERY_TIMEOUT_SECONDS", 30.0),
        QUERY_ROLLBACK_ENABLED=_env_bool("QUERY_ROLLBACK_ENABLED", True),
        REFERENCE_FILES_DIR=os.getenv(
            "REFERENCE_FILES_DIR", str(_ROOT_DIR / "reference_files")
        ),
        VALIDATE_REFERENCE_SOLUTIONS=_env_bool("VALIDATE_REFERENCE_SOLUTIONS", False),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )
