"""Recipe models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class RecipeIngredient(BaseModel):
    """Single ingredient line of a recipe."""

    item: str = Field(min_length=1)
    amount: str = ""
    optional: bool = False

    model_config = ConfigDict(frozen=True)

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> Any:
        return _as_text(value)


class Nutrition(BaseModel):
    """Per-serving nutrition estimate, kept as free text."""

    calories: str = ""
    protein: str = ""
    carbs: str = ""
    fat: str = ""

    model_config = ConfigDict(frozen=True)

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        return _as_text(value)


class Recipe(BaseModel):
    """Generated recipe. Immutable once produced."""

    title: str = Field(min_length=1)
    description: str = ""
    prep_time: str = Field(default="", alias="prepTime")
    cook_time: str = Field(default="", alias="cookTime")
    servings: int = Field(default=4, ge=1)
    ingredients: list[RecipeIngredient] = Field(min_length=1)
    instructions: list[str] = Field(min_length=1)
    nutrition: Nutrition = Field(default_factory=Nutrition)
    tips: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("prep_time", "cook_time", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)


class SavedRecipe(Recipe):
    """Recipe persisted in the recipe book."""

    id: str
    saved_at: datetime = Field(alias="savedAt")


__all__ = ["Nutrition", "Recipe", "RecipeIngredient", "SavedRecipe"]
