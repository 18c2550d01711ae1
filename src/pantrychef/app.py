"""Application wiring: logging, storage and the extraction services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from pantrychef.config import Settings, get_settings
from pantrychef.extraction.resolver import StructuredResultResolver, build_resolver
from pantrychef.logging_utils import configure_logging
from pantrychef.models.items import ExtractedItem, PantryItem
from pantrychef.store.backends import KeyValueStore, SqlKeyValueStore, build_store
from pantrychef.store.history import MealPlanHistory, PreferencesStore, RecipeBook
from pantrychef.store.pantry import PantryMergeStore
from pantrychef.upstream.interface import OcrEngine, TextGenerator

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything a caller needs to run the pantry workflows."""

    settings: Settings
    store: KeyValueStore
    resolver: StructuredResultResolver
    pantry: PantryMergeStore
    meal_plans: MealPlanHistory
    recipes: RecipeBook
    preferences: PreferencesStore

    def import_receipt_items(self, items: List[ExtractedItem]) -> List[PantryItem]:
        return self.resolver.import_receipt_items(items, self.pantry)

    def close(self) -> None:
        if isinstance(self.store, SqlKeyValueStore):
            self.store.close()


def create_services(
    settings: Optional[Settings] = None,
    *,
    store: Optional[KeyValueStore] = None,
    ocr: Optional[OcrEngine] = None,
    generator: Optional[TextGenerator] = None,
) -> Services:
    """Configure logging and build the store and resolver described by ``settings``."""

    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format, settings.secrets())

    store = store if store is not None else build_store(settings)
    services = Services(
        settings=settings,
        store=store,
        resolver=build_resolver(settings, ocr=ocr, generator=generator),
        pantry=PantryMergeStore(store),
        meal_plans=MealPlanHistory(store),
        recipes=RecipeBook(store),
        preferences=PreferencesStore(store),
    )
    logger.info(
        "pantrychef ready (llm_provider=%s, carve_strategy=%s)",
        settings.llm_provider,
        settings.carve_strategy,
    )
    return services


__all__ = ["Services", "create_services"]
