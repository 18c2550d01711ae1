"""Shared pytest fixtures for the pantrychef test suite."""

from __future__ import annotations

from datetime import date, datetime, timezone
from itertools import count

import pytest

from pantrychef.config import get_settings
from pantrychef.extraction.resolver import StructuredResultResolver
from pantrychef.store.backends import InMemoryKeyValueStore
from pantrychef.store.pantry import PantryMergeStore
from pantrychef.upstream.interface import StaticOcrEngine, StaticTextGenerator

FIXED_TODAY = date(2025, 1, 4)
FIXED_NOW = datetime(2025, 1, 4, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated database location and fresh settings."""

    db_path = tmp_path / "test_pantrychef.db"
    monkeypatch.setenv("PANTRYCHEF_DATABASE_PATH", str(db_path))
    get_settings.cache_clear()
    yield
    monkeypatch.delenv("PANTRYCHEF_DATABASE_PATH", raising=False)
    get_settings.cache_clear()


@pytest.fixture()
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def pantry(memory_store) -> PantryMergeStore:
    """Pantry with a fixed clock and sequential ids."""

    ids = count(1)
    return PantryMergeStore(
        memory_store,
        clock=lambda: FIXED_NOW,
        id_factory=lambda: f"item-{next(ids)}",
    )


@pytest.fixture()
def make_resolver():
    """Build a resolver around static OCR and generator stubs."""

    def _factory(reply: str = "{}", ocr_text: str = "", **kwargs) -> StructuredResultResolver:
        return StructuredResultResolver(
            ocr=kwargs.pop("ocr", StaticOcrEngine(ocr_text)),
            generator=kwargs.pop("generator", StaticTextGenerator(reply)),
            clock=lambda: FIXED_TODAY,
            **kwargs,
        )

    return _factory
