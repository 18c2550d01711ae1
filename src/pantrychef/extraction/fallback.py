"""Deterministic meal plan and recipe generation used when model output is unusable."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Dict, Optional, Sequence

from pantrychef.errors import ValidationError
from pantrychef.models.meal_plan import MEAL_TYPES, DayPlan, MealEntry, MealPlan, ShoppingListEntry
from pantrychef.models.recipe import Nutrition, Recipe, RecipeIngredient

MAX_MEALS_PER_DAY = len(MEAL_TYPES)

_PREP_TIMES = {
    "breakfast": "10 minutes",
    "lunch": "15 minutes",
}
_DEFAULT_PREP_TIME = "25 minutes"

STAPLE_SHOPPING_LIST: tuple[ShoppingListEntry, ...] = (
    ShoppingListEntry(item="Salt", quantity="1 container", category="pantry"),
    ShoppingListEntry(item="Pepper", quantity="1 container", category="pantry"),
    ShoppingListEntry(item="Oil", quantity="1 bottle", category="pantry"),
)

FALLBACK_INSTRUCTIONS: tuple[str, ...] = (
    "Prepare all ingredients.",
    "Cook according to your preference.",
    "Season to taste and serve.",
)


def validate_plan_request(names: Sequence[str], days: int, meals_per_day: int) -> None:
    """Raise ``ValidationError`` unless the plan request can be satisfied."""

    if not names:
        raise ValidationError("No pantry items provided")
    if days < 1:
        raise ValidationError(f"Meal plans need at least one day, got {days}")
    if not 1 <= meals_per_day <= MAX_MEALS_PER_DAY:
        raise ValidationError(
            f"Meals per day must be between 1 and {MAX_MEALS_PER_DAY}, got {meals_per_day}"
        )


class FallbackMealPlanGenerator:
    """Rotate through pantry item names to build a plan without a model call.

    Day ``i`` slot ``j`` uses ``names[(i + j) % n]`` as the main ingredient and
    the next name (wrapping) as the second one. The shopping list is a fixed set
    of staples rather than anything inferred from the plan.
    """

    def __init__(self, clock: Callable[[], date] = date.today) -> None:
        self._clock = clock

    def generate(
        self,
        names: Sequence[str],
        days: int,
        meals_per_day: int,
        *,
        today: Optional[date] = None,
    ) -> MealPlan:
        validate_plan_request(names, days, meals_per_day)
        start = today or self._clock()
        meal_types = MEAL_TYPES[:meals_per_day]
        count = len(names)

        plan: list[DayPlan] = []
        for day_index in range(days):
            meals: Dict[str, MealEntry] = {}
            for slot, meal_type in enumerate(meal_types):
                primary_index = (day_index + slot) % count
                primary = names[primary_index]
                secondary = names[(primary_index + 1) % count]
                meals[meal_type] = MealEntry(
                    name=f"{primary} {meal_type}",
                    ingredients=[primary, secondary],
                    prep_time=_PREP_TIMES.get(meal_type, _DEFAULT_PREP_TIME),
                )
            plan.append(
                DayPlan(
                    day=day_index + 1,
                    date=start + timedelta(days=day_index),
                    meals=meals,
                )
            )

        return MealPlan(meal_plan=plan, shopping_list=list(STAPLE_SHOPPING_LIST))


def fallback_recipe(ingredients: Sequence[str], servings: int = 4) -> Recipe:
    """Build a generic recipe listing every supplied ingredient once."""

    if not ingredients:
        raise ValidationError("No ingredients provided")
    return Recipe(
        title=f"Recipe with {', '.join(ingredients)}",
        description="A delicious recipe created from your ingredients.",
        prep_time="15 minutes",
        cook_time="30 minutes",
        servings=max(1, servings),
        ingredients=[
            RecipeIngredient(item=ingredient, amount="1 cup", optional=False)
            for ingredient in ingredients
        ],
        instructions=list(FALLBACK_INSTRUCTIONS),
        nutrition=Nutrition(calories="300", protein="15g", carbs="30g", fat="10g"),
        tips=["Taste and adjust seasonings as needed."],
    )


__all__ = [
    "FALLBACK_INSTRUCTIONS",
    "FallbackMealPlanGenerator",
    "STAPLE_SHOPPING_LIST",
    "fallback_recipe",
    "validate_plan_request",
]
