"""Persistence for pantry items, meal plans, recipes and preferences."""

from .backends import (
    MEAL_PLANS,
    PANTRY_ITEMS,
    SAVED_RECIPES,
    USER_PREFERENCES,
    InMemoryKeyValueStore,
    KeyValueStore,
    SqlKeyValueStore,
    build_store,
)
from .history import MealPlanHistory, PreferencesStore, RecipeBook
from .pantry import PantryMergeStore, import_extracted_items

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "MEAL_PLANS",
    "MealPlanHistory",
    "PANTRY_ITEMS",
    "PantryMergeStore",
    "PreferencesStore",
    "RecipeBook",
    "SAVED_RECIPES",
    "SqlKeyValueStore",
    "USER_PREFERENCES",
    "build_store",
    "import_extracted_items",
]
