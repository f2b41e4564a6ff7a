from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

DEFAULT_GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"


class GeminiImageConfig(BaseModel):
    """Settings required to call the Gemini image generation endpoint."""

    api_key: str = Field(..., min_length=1, description="Gemini API key")
    api_url: str = Field(
        default=DEFAULT_GEMINI_API_URL,
        description="Base URL of the Generative Language REST API",
    )
    model: str = Field(
        default=DEFAULT_IMAGE_MODEL,
        description="Model identifier used for image re-rendering",
    )
    timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        le=600.0,
        description="Per-request transport timeout",
    )


class BatchConfig(BaseModel):
    """Fan-out settings for a single batch of angle requests."""

    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        description="Optional cap on in-flight requests; unset means one request per angle at once",
    )


class OutputConfig(BaseModel):
    """Where the CLI writes generated views."""

    root_dir: Path = Field(default_factory=lambda: Path("output"))


class AppConfig(BaseModel):
    """Top-level configuration consumed by the batch generator and CLI."""

    gemini: GeminiImageConfig
    batch: BatchConfig = Field(default_factory=BatchConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def _float_from_env(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid float value: {value}") from exc


def _optional_int_from_env(value: Optional[str]) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer value: {value}") from exc


def load_config(dotenv_path: str | Path | None = None) -> AppConfig:
    """
    Load configuration from environment variables (optionally seeded by a .env file).

    Parameters
    ----------
    dotenv_path:
        Optional override for the .env file location. Defaults to ``.env`` in the
        working directory.

    Raises
    ------
    RuntimeError
        If required configuration values are missing or invalid.
    """
    env_path = Path(dotenv_path) if dotenv_path else Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    data = {
        "gemini": {
            "api_key": os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            "api_url": os.getenv("GEMINI_API_URL", DEFAULT_GEMINI_API_URL),
            "model": os.getenv("GEMINI_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
            "timeout_seconds": _float_from_env(os.getenv("GEMINI_TIMEOUT_SECONDS"), 120.0),
        },
        "batch": {
            "max_concurrency": _optional_int_from_env(os.getenv("ANGLE_VIEWS_MAX_CONCURRENCY")),
        },
        "output": {
            "root_dir": Path(os.getenv("OUTPUT_ROOT_DIR", "output")),
        },
    }

    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        missing = {"/".join(str(part) for part in err["loc"]) for err in exc.errors()}
        missing_str = ", ".join(sorted(missing))
        raise RuntimeError(f"Missing configuration values: {missing_str}") from exc
