"""Prompt templates sent to the generative text collaborator."""

from __future__ import annotations

from typing import Sequence

from pantrychef.models.preferences import MealPlanPreferences, RecipePreferences

MAX_RECEIPT_TEXT_CHARS = 4000

RECEIPT_PROMPT = (
    "Analyze this receipt text and extract grocery items with quantities and categories:\n\n"
    "{ocr_text}\n\n"
    "Return a JSON array of items in this format:\n"
    "[\n"
    "  {{\n"
    '    "name": "item name",\n'
    '    "quantity": "amount with unit",\n'
    '    "category": "produce/dairy/meat/seafood/pantry/frozen/bakery/beverages/snacks/other",\n'
    '    "price": "price if available"\n'
    "  }}\n"
    "]\n\n"
    "Only return the JSON array, no other text."
)

RECIPE_PROMPT = (
    "Create a delicious recipe using these ingredients: {ingredients}\n\n"
    "Preferences:\n"
    "- Dietary restrictions: {dietary}\n"
    "- Cuisine style: {cuisine}\n"
    "- Servings: {servings}\n\n"
    "Return a JSON object with this structure:\n"
    "{{\n"
    '  "title": "Recipe Name",\n'
    '  "description": "Brief description",\n'
    '  "prepTime": "15 minutes",\n'
    '  "cookTime": "30 minutes",\n'
    '  "servings": {servings},\n'
    '  "ingredients": [\n'
    '    {{"item": "ingredient name", "amount": "quantity with unit", "optional": false}}\n'
    "  ],\n"
    '  "instructions": ["Step 1 description", "Step 2 description"],\n'
    '  "nutrition": {{"calories": "per serving", "protein": "grams", "carbs": "grams", "fat": "grams"}},\n'
    '  "tips": ["cooking tip 1", "cooking tip 2"]\n'
    "}}\n\n"
    "Only return the JSON object, no other text."
)

MEAL_PLAN_PROMPT = (
    "Create a {days}-day meal plan using these pantry items: {pantry_items}\n\n"
    "Preferences:\n"
    "- Dietary restrictions: {dietary}\n"
    "- Meals per day: {meals_per_day} ({meal_types})\n\n"
    "Return a JSON object with this structure:\n"
    "{{\n"
    '  "mealPlan": [\n'
    "    {{\n"
    '      "day": 1,\n'
    '      "date": "{start_date}",\n'
    '      "meals": {{\n'
    '        "breakfast": {{"name": "Meal name", "ingredients": ["ingredient1", "ingredient2"], '
    '"prepTime": "15 minutes"}}\n'
    "      }}\n"
    "    }}\n"
    "  ],\n"
    '  "shoppingList": [\n'
    '    {{"item": "needed item", "quantity": "amount", "category": "produce"}}\n'
    "  ]\n"
    "}}\n\n"
    "Generate {days} days of meals starting on {start_date}. "
    "Only return the JSON object, no other text."
)


def render_receipt_prompt(ocr_text: str) -> str:
    trimmed = ocr_text.strip()
    if len(trimmed) > MAX_RECEIPT_TEXT_CHARS:
        trimmed = trimmed[:MAX_RECEIPT_TEXT_CHARS] + "\n...[truncated]"
    return RECEIPT_PROMPT.format(ocr_text=trimmed)


def render_recipe_prompt(ingredients: Sequence[str], preferences: RecipePreferences) -> str:
    return RECIPE_PROMPT.format(
        ingredients=", ".join(ingredients),
        dietary=preferences.dietary_restrictions or "None",
        cuisine=preferences.cuisine or "Any",
        servings=preferences.servings,
    )


def render_meal_plan_prompt(
    pantry_items: Sequence[str],
    preferences: MealPlanPreferences,
    *,
    meal_types: Sequence[str],
    start_date: str,
) -> str:
    return MEAL_PLAN_PROMPT.format(
        days=preferences.days,
        pantry_items=", ".join(pantry_items),
        dietary=preferences.dietary_restrictions or "None",
        meals_per_day=preferences.meals_per_day,
        meal_types=", ".join(meal_types),
        start_date=start_date,
    )


__all__ = [
    "MEAL_PLAN_PROMPT",
    "RECEIPT_PROMPT",
    "RECIPE_PROMPT",
    "render_meal_plan_prompt",
    "render_receipt_prompt",
    "render_recipe_prompt",
]
