from __future__ import annotations

import pytest
from pydantic import ValidationError

from pantrychef.models.items import ExtractedItem, PantryItem, is_summary_token
from pantrychef.models.meal_plan import MealPlan
from pantrychef.models.recipe import Recipe


@pytest.mark.parametrize("token", ["TOTAL", "tax", " Subtotal ", "Cash", "CARD", "receipt"])
def test_summary_tokens_match_whole_names(token):
    assert is_summary_token(token)


def test_names_containing_summary_words_are_items():
    assert not is_summary_token("Total Wine Merlot")
    assert ExtractedItem(name="Cardamom").name == "Cardamom"


def test_extracted_item_normalises_fields():
    item = ExtractedItem(name="  Green   Apples ", quantity=3, category="PRODUCE", price="")

    assert item.name == "Green Apples"
    assert item.quantity == "3"
    assert item.category == "produce"
    assert item.price is None


def test_extracted_item_unknown_category_becomes_other():
    assert ExtractedItem(name="Widget", category="hardware").category == "other"


@pytest.mark.parametrize("name", ["", "   ", "TOTAL"])
def test_extracted_item_rejects_bad_names(name):
    with pytest.raises(ValidationError):
        ExtractedItem(name=name)


def test_pantry_item_round_trips_camel_case_record():
    item = PantryItem.model_validate(
        {
            "id": "abc",
            "name": " Eggs ",
            "expiryDate": "",
            "addedDate": "2025-01-04T12:00:00+00:00",
            "quantity": None,
        }
    )

    assert item.name == "Eggs"
    assert item.expiry_date is None
    assert item.quantity == ""
    assert item.identity == "eggs"
    assert "addedDate" in item.model_dump(by_alias=True)


def test_recipe_requires_ingredients_and_instructions():
    with pytest.raises(ValidationError):
        Recipe.model_validate({"title": "Soup", "ingredients": [], "instructions": ["Boil."]})
    with pytest.raises(ValidationError):
        Recipe.model_validate(
            {"title": "Soup", "ingredients": [{"item": "water"}], "instructions": []}
        )


def test_meal_plan_days_must_be_contiguous():
    day = {"date": "2025-01-04", "meals": {}}
    MealPlan.model_validate({"mealPlan": [{**day, "day": 1}, {**day, "day": 2}]})

    with pytest.raises(ValidationError):
        MealPlan.model_validate({"mealPlan": [{**day, "day": 2}]})
    with pytest.raises(ValidationError):
        MealPlan.model_validate({"mealPlan": []})


def test_meal_plan_rejects_unknown_meal_types():
    with pytest.raises(ValidationError):
        MealPlan.model_validate(
            {"mealPlan": [{"day": 1, "date": "2025-01-04", "meals": {"brunch": {"name": "Eggs"}}}]}
        )
