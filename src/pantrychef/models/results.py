"""Result envelopes returned by the structured result resolver."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from pantrychef.models.items import ExtractedItem
from pantrychef.models.meal_plan import MealPlan
from pantrychef.models.recipe import Recipe

Provenance = Literal["model", "fallback"]


class ReceiptExtraction(BaseModel):
    """Items recovered from a receipt image together with the OCR text they came from."""

    text: str
    items: list[ExtractedItem] = Field(default_factory=list)
    message: str
    provenance: Provenance

    model_config = ConfigDict(frozen=True)


class RecipeResult(BaseModel):
    recipe: Recipe
    message: str = "Recipe generated successfully"
    provenance: Provenance

    model_config = ConfigDict(frozen=True)


class MealPlanResult(BaseModel):
    meal_plan: MealPlan = Field(alias="mealPlan")
    message: str = "Meal plan generated successfully"
    provenance: Provenance

    model_config = ConfigDict(frozen=True, populate_by_name=True)


__all__ = ["MealPlanResult", "Provenance", "ReceiptExtraction", "RecipeResult"]
