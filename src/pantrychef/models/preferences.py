"""User preference models used to shape generation prompts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserPreferences(BaseModel):
    """Household preferences persisted between sessions."""

    dietary_restrictions: str = Field(default="", alias="dietaryRestrictions")
    favorite_cuisines: list[str] = Field(default_factory=list, alias="favoriteCuisines")
    serving_size: int = Field(default=4, ge=1, alias="servingSize")
    meals_per_day: int = Field(default=3, ge=1, le=4, alias="mealsPerDay")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class RecipePreferences(BaseModel):
    """Options for a single recipe generation request."""

    dietary_restrictions: str = Field(default="", alias="dietaryRestrictions")
    cuisine: str = ""
    servings: int = Field(default=4, ge=1)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class MealPlanPreferences(BaseModel):
    """Options for a single meal plan generation request.

    Counts are range-checked by the resolver so that bad values surface as
    ``pantrychef.errors.ValidationError`` rather than pydantic errors.
    """

    days: int = 7
    dietary_restrictions: str = Field(default="", alias="dietaryRestrictions")
    meals_per_day: int = Field(default=3, alias="mealsPerDay")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


__all__ = ["MealPlanPreferences", "RecipePreferences", "UserPreferences"]
