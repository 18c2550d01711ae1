"""Meal plan models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MealType = Literal["breakfast", "lunch", "dinner", "snack"]

MEAL_TYPES: tuple[str, ...] = ("breakfast", "lunch", "dinner", "snack")


class MealEntry(BaseModel):
    """One meal within a day."""

    name: str = Field(min_length=1)
    ingredients: list[str] = Field(default_factory=list)
    prep_time: str = Field(default="", alias="prepTime")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("prep_time", mode="before")
    @classmethod
    def _coerce_prep_time(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value} minutes"
        return value


class DayPlan(BaseModel):
    """Meals scheduled for a single day."""

    day: int = Field(ge=1)
    date: date
    meals: dict[MealType, MealEntry] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class ShoppingListEntry(BaseModel):
    """Item to buy alongside a meal plan."""

    item: str = Field(min_length=1)
    quantity: str = ""
    category: str = "other"

    model_config = ConfigDict(frozen=True)

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class MealPlan(BaseModel):
    """Multi-day meal plan with its shopping list."""

    meal_plan: list[DayPlan] = Field(alias="mealPlan", min_length=1)
    shopping_list: list[ShoppingListEntry] = Field(default_factory=list, alias="shoppingList")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def _check_contiguous_days(self) -> "MealPlan":
        expected = list(range(1, len(self.meal_plan) + 1))
        actual = [entry.day for entry in self.meal_plan]
        if actual != expected:
            raise ValueError(f"meal plan days must be 1-based and contiguous, got {actual}")
        return self


class SavedMealPlan(MealPlan):
    """Meal plan persisted in the plan history."""

    id: str
    created_at: datetime = Field(alias="createdAt")


__all__ = [
    "DayPlan",
    "MEAL_TYPES",
    "MealEntry",
    "MealPlan",
    "MealType",
    "SavedMealPlan",
    "ShoppingListEntry",
]
