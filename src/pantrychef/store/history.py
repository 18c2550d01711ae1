"""Saved meal plans, the recipe book, and user preferences."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from pantrychef.models.meal_plan import MealPlan, SavedMealPlan
from pantrychef.models.preferences import UserPreferences
from pantrychef.models.recipe import Recipe, SavedRecipe

from .backends import MEAL_PLANS, SAVED_RECIPES, USER_PREFERENCES, KeyValueStore

logger = logging.getLogger(__name__)

MEAL_PLAN_HISTORY_LIMIT = 10
RECIPE_BOOK_LIMIT = 50


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class MealPlanHistory:
    """Most-recent-first list of saved meal plans, capped at ``limit`` entries."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        limit: int = MEAL_PLAN_HISTORY_LIMIT,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._store = store
        self._limit = limit
        self._clock = clock
        self._id_factory = id_factory

    def save(self, plan: MealPlan) -> SavedMealPlan:
        saved = SavedMealPlan(
            **plan.model_dump(),
            id=self._id_factory(),
            created_at=self._clock(),
        )
        records = self._store.get(MEAL_PLANS)
        records.insert(0, saved.model_dump(mode="json", by_alias=True))
        self._store.set(MEAL_PLANS, records[: self._limit])
        return saved

    def list(self) -> List[SavedMealPlan]:
        plans: List[SavedMealPlan] = []
        for record in self._store.get(MEAL_PLANS):
            try:
                plans.append(SavedMealPlan.model_validate(record))
            except PydanticValidationError:
                logger.warning("Skipping malformed meal plan id=%s", record.get("id"))
        return plans

    def latest(self) -> Optional[SavedMealPlan]:
        plans = self.list()
        return plans[0] if plans else None


class RecipeBook:
    """Most-recent-first list of saved recipes, capped at ``limit`` entries."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        limit: int = RECIPE_BOOK_LIMIT,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._store = store
        self._limit = limit
        self._clock = clock
        self._id_factory = id_factory

    def save(self, recipe: Recipe) -> SavedRecipe:
        saved = SavedRecipe(
            **recipe.model_dump(),
            id=self._id_factory(),
            saved_at=self._clock(),
        )
        records = self._store.get(SAVED_RECIPES)
        records.insert(0, saved.model_dump(mode="json", by_alias=True))
        self._store.set(SAVED_RECIPES, records[: self._limit])
        return saved

    def list(self) -> List[SavedRecipe]:
        recipes: List[SavedRecipe] = []
        for record in self._store.get(SAVED_RECIPES):
            try:
                recipes.append(SavedRecipe.model_validate(record))
            except PydanticValidationError:
                logger.warning("Skipping malformed recipe id=%s", record.get("id"))
        return recipes

    def remove(self, recipe_id: str) -> bool:
        records = self._store.get(SAVED_RECIPES)
        remaining = [record for record in records if record.get("id") != recipe_id]
        if len(remaining) == len(records):
            return False
        self._store.set(SAVED_RECIPES, remaining)
        return True


class PreferencesStore:
    """Single preferences record with defaults when nothing has been saved."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def load(self) -> UserPreferences:
        records = self._store.get(USER_PREFERENCES)
        if not records:
            return UserPreferences()
        try:
            return UserPreferences.model_validate(records[0])
        except PydanticValidationError:
            logger.warning("Stored preferences are invalid; using defaults")
            return UserPreferences()

    def save(self, preferences: UserPreferences) -> UserPreferences:
        self._store.set(USER_PREFERENCES, [preferences.model_dump(mode="json", by_alias=True)])
        return preferences


__all__ = [
    "MEAL_PLAN_HISTORY_LIMIT",
    "MealPlanHistory",
    "PreferencesStore",
    "RECIPE_BOOK_LIMIT",
    "RecipeBook",
]
