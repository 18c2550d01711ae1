"""Pydantic models defining shared data contracts."""

from pantrychef.models.items import (
    CATEGORIES,
    Category,
    ExtractedItem,
    ItemSource,
    PantryItem,
)
from pantrychef.models.meal_plan import (
    MEAL_TYPES,
    DayPlan,
    MealEntry,
    MealPlan,
    MealType,
    SavedMealPlan,
    ShoppingListEntry,
)
from pantrychef.models.preferences import (
    MealPlanPreferences,
    RecipePreferences,
    UserPreferences,
)
from pantrychef.models.recipe import Nutrition, Recipe, RecipeIngredient, SavedRecipe
from pantrychef.models.results import (
    MealPlanResult,
    Provenance,
    ReceiptExtraction,
    RecipeResult,
)

__all__ = [
    "CATEGORIES",
    "Category",
    "ExtractedItem",
    "ItemSource",
    "PantryItem",
    "MEAL_TYPES",
    "DayPlan",
    "MealEntry",
    "MealPlan",
    "MealType",
    "SavedMealPlan",
    "ShoppingListEntry",
    "MealPlanPreferences",
    "RecipePreferences",
    "UserPreferences",
    "Nutrition",
    "Recipe",
    "RecipeIngredient",
    "SavedRecipe",
    "MealPlanResult",
    "Provenance",
    "ReceiptExtraction",
    "RecipeResult",
]
