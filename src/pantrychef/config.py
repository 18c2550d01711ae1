"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/pantrychef.db"),
        description="SQLite database backing the key-value collections.",
    )
    vision_api_key: Optional[str] = Field(
        default=None,
        description="Google Vision API key used for receipt OCR.",
    )
    vision_base_url: str = Field(
        default="https://vision.googleapis.com/v1",
        description="Google Vision API base URL.",
    )
    llm_provider: str = Field(
        default="gemini",
        description="Generative text provider (gemini, openai or ollama).",
    )
    llm_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative text endpoint base URL.",
    )
    llm_model: str = Field(
        default="gemini-pro",
        description="Model identifier passed to the generative text endpoint.",
    )
    llm_api_key: Optional[str] = Field(
        default=None,
        description="API key for the generative text endpoint.",
    )
    llm_temperature: float = Field(
        default=0.4,
        description="Sampling temperature for generative calls.",
    )
    llm_max_tokens: int = Field(
        default=2048,
        description="Maximum tokens to request from the generative endpoint.",
    )
    http_timeout: float = Field(
        default=30.0,
        description="Transport timeout in seconds for upstream HTTP calls.",
    )
    carve_strategy: str = Field(
        default="greedy",
        description="JSON carving strategy (greedy or balanced).",
    )
    receipt_max_items: int = Field(
        default=20,
        description="Maximum number of items produced by the receipt line heuristic.",
    )
    receipt_dedupe: bool = Field(
        default=False,
        description="Drop repeated item names from receipt heuristic output when true.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )

    model_config = ConfigDict(frozen=True)

    def secrets(self) -> list[str]:
        """Return configured credentials that must never reach the logs."""

        return [self.vision_api_key or "", self.llm_api_key or ""]


def _read_env_files(paths: Iterable[Path] = ENV_FILE_CANDIDATES) -> dict[str, str]:
    """Merge ``KEY=value`` lines from the candidate files; later files win."""

    values: dict[str, str] = {}
    for path in paths:
        if not path.is_file():
            continue
        for raw_line in path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if line.startswith("export "):
                line = line[len("export ") :].lstrip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, raw_value = line.split("=", 1)
            values[key.strip()] = raw_value.strip().strip("'\"")
    return values


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


# Setting name, environment keys in priority order, converter.
_ENV_OVERRIDES: tuple[tuple[str, tuple[str, ...], Callable[[str], Any]], ...] = (
    ("database_path", ("PANTRYCHEF_DATABASE_PATH",), Path),
    ("vision_api_key", ("PANTRYCHEF_VISION_API_KEY", "GOOGLE_VISION_API_KEY"), str),
    ("vision_base_url", ("PANTRYCHEF_VISION_BASE_URL",), str),
    ("llm_provider", ("PANTRYCHEF_LLM_PROVIDER",), str),
    ("llm_base_url", ("PANTRYCHEF_LLM_BASE_URL",), str),
    ("llm_model", ("PANTRYCHEF_LLM_MODEL",), str),
    ("llm_api_key", ("PANTRYCHEF_LLM_API_KEY", "GOOGLE_GEMINI_API_KEY"), str),
    ("llm_temperature", ("PANTRYCHEF_LLM_TEMPERATURE",), float),
    ("llm_max_tokens", ("PANTRYCHEF_LLM_MAX_TOKENS",), int),
    ("http_timeout", ("PANTRYCHEF_HTTP_TIMEOUT",), float),
    ("carve_strategy", ("PANTRYCHEF_CARVE_STRATEGY",), str),
    ("receipt_max_items", ("PANTRYCHEF_RECEIPT_MAX_ITEMS",), int),
    ("receipt_dedupe", ("PANTRYCHEF_RECEIPT_DEDUPE",), _as_bool),
    ("log_level", ("PANTRYCHEF_LOG_LEVEL",), str),
    ("log_format", ("PANTRYCHEF_LOG_FORMAT",), str),
)


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks).

    Values that fail to convert are ignored and the default is kept.
    """

    file_values = _read_env_files()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    for setting, keys, convert in _ENV_OVERRIDES:
        raw = next((value for value in map(_env, keys) if value), None)
        if raw is None:
            continue
        try:
            payload[setting] = convert(raw)
        except ValueError:
            continue
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
