from collections.abc import Iterator

import pytest

import sqlpractice
from databases import CLASSIC_MODELS, NORTHWIND
from databases.samples import build_sample_database

_SETTING_VARS = (
    "CLASSICMODELS_DATABASE_URL",
    "NORTHWIND_DATABASE_URL",
    "DEFAULT_REFERENCE_DATABASE",
    "QUERY_TIMEOUT_SECONDS",
    "QUERY_ROLLBACK_ENABLED",
    "REFERENCE_FILES_DIR",
    "VALIDATE_REFERENCE_SOLUTIONS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    # keep a developer's .env from leaking into tests
    monkeypatch.setattr(sqlpractice, "_ENV_LOADED", True)
    for name in _SETTING_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture()
def reference_dbs(tmp_path, monkeypatch: pytest.MonkeyPatch) -> dict:
    classic_path = tmp_path / "classicmodels.sqlite"
    northwind_path = tmp_path / "northwind.sqlite"
    build_sample_database(classic_path, CLASSIC_MODELS)
    build_sample_database(northwind_path, NORTHWIND)

    monkeypatch.setenv("CLASSICMODELS_DATABASE_URL", f"sqlite:///{classic_path}")
    monkeypatch.setenv("NORTHWIND_DATABASE_URL", f"sqlite:///{northwind_path}")
    return {CLASSIC_MODELS: classic_path, NORTHWIND: northwind_path}
