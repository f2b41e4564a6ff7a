from __future__ import annotations

from pathlib import Path

import pytest

from angle_views.config import DEFAULT_IMAGE_MODEL, load_config

_ENV_VARS = (
    "GEMINI_API_KEY",
    "API_KEY",
    "GEMINI_API_URL",
    "GEMINI_IMAGE_MODEL",
    "GEMINI_TIMEOUT_SECONDS",
    "ANGLE_VIEWS_MAX_CONCURRENCY",
    "OUTPUT_ROOT_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # setenv first so variables loaded from .env files are removed on teardown.
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


def test_defaults(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "secret")

    config = load_config()

    assert config.gemini.api_key == "secret"
    assert config.gemini.model == DEFAULT_IMAGE_MODEL
    assert config.gemini.timeout_seconds == 120.0
    assert config.batch.max_concurrency is None
    assert config.output.root_dir == Path("output")


def test_api_key_fallback(monkeypatch) -> None:
    monkeypatch.setenv("API_KEY", "legacy")

    assert load_config().gemini.api_key == "legacy"


def test_missing_api_key() -> None:
    with pytest.raises(RuntimeError, match="gemini/api_key"):
        load_config()


def test_dotenv_file(tmp_path) -> None:
    env_file = tmp_path / "custom.env"
    env_file.write_text(
        "GEMINI_API_KEY=from-file\nGEMINI_IMAGE_MODEL=other-model\nANGLE_VIEWS_MAX_CONCURRENCY=2\n",
        encoding="utf-8",
    )

    config = load_config(env_file)

    assert config.gemini.api_key == "from-file"
    assert config.gemini.model == "other-model"
    assert config.batch.max_concurrency == 2


@pytest.mark.parametrize(
    ("name", "value"),
    [("GEMINI_TIMEOUT_SECONDS", "soon"), ("ANGLE_VIEWS_MAX_CONCURRENCY", "many")],
)
def test_invalid_numbers(monkeypatch, name: str, value: str) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv(name, value)

    with pytest.raises(RuntimeError, match="Invalid"):
        load_config()


def test_concurrency_must_be_positive(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("ANGLE_VIEWS_MAX_CONCURRENCY", "0")

    with pytest.raises(RuntimeError, match="batch/max_concurrency"):
        load_config()
