"""Tests for the strict-parse / carve / fallback resolver."""

from __future__ import annotations

import json

import pytest

from pantrychef.errors import UpstreamUnavailable, ValidationError
from pantrychef.extraction.carve import BalancedSpanStrategy, JsonCarveExtractor
from pantrychef.extraction.receipt_heuristic import ReceiptLineHeuristic
from pantrychef.extraction.resolver import NO_TEXT_MESSAGE
from pantrychef.upstream.interface import StaticOcrEngine, StaticTextGenerator

RECEIPT_TEXT = """
FRESH MART
Milk 3.99
Eggs $2.49
TOTAL 6.48
""".strip()

RECIPE_REPLY = {
    "title": "Garlic Rice",
    "description": "Fragrant rice side dish.",
    "prepTime": "5 minutes",
    "cookTime": "20 minutes",
    "servings": 2,
    "ingredients": [
        {"item": "rice", "amount": "1 cup", "optional": False},
        {"item": "garlic", "amount": 3, "optional": False},
    ],
    "instructions": ["Rinse rice.", "Cook with garlic."],
    "nutrition": {"calories": 250, "protein": "5g", "carbs": "50g", "fat": "3g"},
    "tips": ["Toast the garlic first."],
}

MEAL_PLAN_REPLY = {
    "mealPlan": [
        {
            "day": 1,
            "date": "2025-01-04",
            "meals": {
                "breakfast": {
                    "name": "Rice porridge",
                    "ingredients": ["rice", "milk"],
                    "prepTime": "15 minutes",
                }
            },
        },
        {
            "day": 2,
            "date": "2025-01-05",
            "meals": {
                "breakfast": {"name": "Bean toast", "ingredients": ["beans"], "prepTime": 10}
            },
        },
    ],
    "shoppingList": [{"item": "bread", "quantity": "1 loaf", "category": "bakery"}],
}


class _FailingGenerator:
    def __init__(self) -> None:
        self.calls = 0

    def generate(self, prompt: str) -> str:
        self.calls += 1
        raise UpstreamUnavailable("llm", "Failed to analyze receipt")


class _FailingOcr:
    def detect_text(self, image_base64: str) -> str:
        raise UpstreamUnavailable("ocr", "Failed to process image with Google Vision API")


# Receipt extraction


def test_receipt_items_come_from_model_reply(make_resolver):
    reply = (
        "Here you go:\n"
        '[{"name": "Whole Milk", "quantity": "1 gallon", "category": "Dairy", "price": 3.99},'
        ' {"name": "TOTAL", "quantity": "1"}]'
    )
    resolver = make_resolver(reply=reply, ocr_text=RECEIPT_TEXT)

    result = resolver.extract_receipt("data:image/png;base64,aGVsbG8=")

    assert result.provenance == "model"
    assert result.text == RECEIPT_TEXT
    assert [(item.name, item.category, item.price) for item in result.items] == [
        ("Whole Milk", "dairy", "3.99")
    ]
    assert result.message == "Extracted 1 items from receipt"


def test_receipt_strips_data_url_before_ocr(make_resolver):
    ocr = StaticOcrEngine(RECEIPT_TEXT)
    resolver = make_resolver(reply="[]", ocr=ocr)

    resolver.extract_receipt("data:image/jpeg;base64,QUJD")

    assert ocr.calls == ["QUJD"]


def test_receipt_falls_back_to_heuristics_over_ocr_text(make_resolver):
    generator = StaticTextGenerator("Sorry, I cannot read this receipt. Milk 100.00")
    resolver = make_resolver(ocr_text=RECEIPT_TEXT, generator=generator)

    result = resolver.extract_receipt("aGVsbG8=")

    assert result.provenance == "fallback"
    assert [(item.name, item.price) for item in result.items] == [
        ("Milk", None),
        ("Eggs", "$2.49"),
    ]
    assert RECEIPT_TEXT.splitlines()[1] in generator.prompts[0]


def test_receipt_reply_without_usable_entries_falls_back(make_resolver):
    resolver = make_resolver(reply='[{"quantity": 2}, 7]', ocr_text=RECEIPT_TEXT)

    result = resolver.extract_receipt("aGVsbG8=")

    assert result.provenance == "fallback"
    assert [item.name for item in result.items] == ["Milk", "Eggs"]


def test_receipt_accepts_plain_string_entries(make_resolver):
    resolver = make_resolver(reply='["Bananas", "Yogurt"]', ocr_text=RECEIPT_TEXT)

    result = resolver.extract_receipt("aGVsbG8=")

    assert result.provenance == "model"
    assert [(item.name, item.category) for item in result.items] == [
        ("Bananas", "other"),
        ("Yogurt", "other"),
    ]


def test_receipt_without_text_skips_generative_call(make_resolver):
    generator = _FailingGenerator()
    resolver = make_resolver(ocr_text="  \n", generator=generator)

    result = resolver.extract_receipt("aGVsbG8=")

    assert result.items == []
    assert result.text == ""
    assert result.message == NO_TEXT_MESSAGE
    assert generator.calls == 0


def test_receipt_requires_image(make_resolver):
    generator = _FailingGenerator()
    resolver = make_resolver(ocr=_FailingOcr(), generator=generator)

    with pytest.raises(ValidationError):
        resolver.extract_receipt("")
    with pytest.raises(ValidationError):
        resolver.extract_receipt(None)
    assert generator.calls == 0


def test_receipt_upstream_failures_propagate(make_resolver):
    with pytest.raises(UpstreamUnavailable) as excinfo:
        make_resolver(ocr=_FailingOcr()).extract_receipt("aGVsbG8=")
    assert excinfo.value.upstream == "ocr"

    resolver = make_resolver(ocr_text=RECEIPT_TEXT, generator=_FailingGenerator())
    with pytest.raises(UpstreamUnavailable) as excinfo:
        resolver.extract_receipt("aGVsbG8=")
    assert excinfo.value.upstream == "llm"


def test_receipt_heuristic_can_be_swapped(make_resolver):
    resolver = make_resolver(
        reply="nothing useful",
        ocr_text="Milk 3.99\nBread 2.00\nJam 4.00",
        receipt_heuristic=ReceiptLineHeuristic(max_items=1),
    )

    result = resolver.extract_receipt("aGVsbG8=")

    assert [item.name for item in result.items] == ["Milk"]


# Recipe generation


def test_recipe_from_model_reply(make_resolver):
    reply = "Here is a recipe!\n" + json.dumps(RECIPE_REPLY) + "\nBon appetit."
    generator = StaticTextGenerator(reply)
    resolver = make_resolver(generator=generator)

    result = resolver.generate_recipe(
        ["rice", "garlic"], {"cuisine": "thai", "servings": 2, "dietaryRestrictions": "vegan"}
    )

    assert result.provenance == "model"
    assert result.recipe.title == "Garlic Rice"
    assert result.recipe.ingredients[1].amount == "3"
    assert result.recipe.nutrition.calories == "250"
    assert "rice, garlic" in generator.prompts[0]
    assert "Cuisine style: thai" in generator.prompts[0]
    assert "Dietary restrictions: vegan" in generator.prompts[0]


def test_recipe_prose_reply_falls_back_with_one_ingredient_per_name(make_resolver):
    resolver = make_resolver(reply="A lovely stew would work nicely with these ingredients.")

    result = resolver.generate_recipe(["beef", "carrot", "onion", "potato"])

    assert result.provenance == "fallback"
    assert len(result.recipe.ingredients) == 4
    assert [entry.item for entry in result.recipe.ingredients] == [
        "beef",
        "carrot",
        "onion",
        "potato",
    ]
    assert result.recipe.servings == 4


def test_recipe_reply_missing_required_fields_falls_back(make_resolver):
    resolver = make_resolver(reply='{"title": "Mystery dish"}')

    result = resolver.generate_recipe(["tofu"], {"servings": 3})

    assert result.provenance == "fallback"
    assert result.recipe.servings == 3
    assert result.recipe.title == "Recipe with tofu"


def test_recipe_requires_ingredients(make_resolver):
    generator = _FailingGenerator()
    resolver = make_resolver(generator=generator)

    with pytest.raises(ValidationError):
        resolver.generate_recipe([])
    with pytest.raises(ValidationError):
        resolver.generate_recipe(["  ", ""])
    with pytest.raises(ValidationError):
        resolver.generate_recipe(["rice"], {"servings": 0})
    assert generator.calls == 0


def test_recipe_upstream_failure_is_not_hidden(make_resolver):
    with pytest.raises(UpstreamUnavailable):
        make_resolver(generator=_FailingGenerator()).generate_recipe(["rice"])


# Meal plans


def test_meal_plan_from_model_reply(make_resolver):
    generator = StaticTextGenerator("```json\n" + json.dumps(MEAL_PLAN_REPLY) + "\n```")
    resolver = make_resolver(generator=generator)

    result = resolver.generate_meal_plan(["rice", "beans"], {"days": 2, "mealsPerDay": 1})

    assert result.provenance == "model"
    assert len(result.meal_plan.meal_plan) == 2
    assert result.meal_plan.meal_plan[1].meals["breakfast"].prep_time == "10 minutes"
    assert result.meal_plan.shopping_list[0].item == "bread"
    assert "2-day meal plan" in generator.prompts[0]
    assert "2025-01-04" in generator.prompts[0]


def test_meal_plan_prose_reply_uses_rotation_fallback(make_resolver):
    resolver = make_resolver(reply="Day 1: eat rice. Day 2: eat beans.")

    result = resolver.generate_meal_plan(["Rice", "Beans"], {"days": 3, "mealsPerDay": 2})

    assert result.provenance == "fallback"
    plan = result.meal_plan.meal_plan
    assert len(plan) == 3
    assert plan[0].date.isoformat() == "2025-01-04"
    assert plan[0].meals["breakfast"].ingredients[0] == "Rice"
    assert set(plan[2].meals) == {"breakfast", "lunch"}


def test_meal_plan_with_gapped_days_falls_back(make_resolver):
    reply = json.loads(json.dumps(MEAL_PLAN_REPLY))
    reply["mealPlan"][1]["day"] = 5
    resolver = make_resolver(reply=json.dumps(reply))

    result = resolver.generate_meal_plan(["rice"], {"days": 2, "mealsPerDay": 1})

    assert result.provenance == "fallback"


def test_meal_plan_uses_default_preferences(make_resolver):
    resolver = make_resolver(reply="no plan")

    result = resolver.generate_meal_plan(["Rice"])

    assert len(result.meal_plan.meal_plan) == 7
    assert list(result.meal_plan.meal_plan[0].meals) == ["breakfast", "lunch", "dinner"]


@pytest.mark.parametrize(
    "items, preferences",
    [
        ([], None),
        (["rice"], {"days": 0}),
        (["rice"], {"mealsPerDay": 5}),
        (["rice"], {"days": "many"}),
    ],
)
def test_meal_plan_validation_happens_before_upstream_call(make_resolver, items, preferences):
    generator = _FailingGenerator()
    resolver = make_resolver(generator=generator)

    with pytest.raises(ValidationError):
        resolver.generate_meal_plan(items, preferences)
    assert generator.calls == 0


def test_balanced_carver_recovers_first_object(make_resolver):
    reply = json.dumps(RECIPE_REPLY) + "\nAlternative: " + json.dumps({"title": "Other"})
    resolver = make_resolver(reply=reply, carver=JsonCarveExtractor(BalancedSpanStrategy()))

    result = resolver.generate_recipe(["rice", "garlic"])

    assert result.provenance == "model"
    assert result.recipe.title == "Garlic Rice"


def test_non_string_names_are_dropped(make_resolver):
    generator = StaticTextGenerator("no recipe today")
    resolver = make_resolver(generator=generator)

    result = resolver.generate_recipe(["rice", None, 3])

    assert [entry.item for entry in result.recipe.ingredients] == ["rice"]
    assert result.recipe.title == "Recipe with rice"
    assert "rice, None" not in generator.prompts[0]

    with pytest.raises(ValidationError):
        resolver.generate_recipe([None])
    with pytest.raises(ValidationError):
        resolver.generate_meal_plan([None, 7])
