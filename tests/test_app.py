from __future__ import annotations

import logging

from pantrychef.app import create_services
from pantrychef.config import get_settings
from pantrychef.extraction.carve import BalancedSpanStrategy
from pantrychef.store.backends import InMemoryKeyValueStore, SqlKeyValueStore
from pantrychef.upstream.interface import StaticOcrEngine, StaticTextGenerator


def test_create_services_wires_sql_store(monkeypatch, tmp_path):
    monkeypatch.setenv("PANTRYCHEF_CARVE_STRATEGY", "balanced")
    get_settings.cache_clear()

    services = create_services(
        ocr=StaticOcrEngine("Milk 3.99"),
        generator=StaticTextGenerator("no json here"),
    )
    try:
        assert isinstance(services.store, SqlKeyValueStore)
        assert isinstance(services.resolver._carver._strategy, BalancedSpanStrategy)

        result = services.resolver.extract_receipt("aGVsbG8=")
        services.import_receipt_items(result.items)

        assert [item.name for item in services.pantry.list()] == ["Milk"]
        assert services.preferences.load().serving_size == 4
    finally:
        services.close()

    assert (tmp_path / "test_pantrychef.db").exists()


def test_create_services_configures_logging():
    services = create_services(
        store=InMemoryKeyValueStore(),
        ocr=StaticOcrEngine(""),
        generator=StaticTextGenerator("{}"),
    )

    assert services.meal_plans.latest() is None
    assert logging.getLogger().handlers
