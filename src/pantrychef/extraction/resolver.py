"""Strict parse, then carved parse, then deterministic fallback for every extraction use case."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, List, Mapping, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pantrychef import metrics
from pantrychef.config import Settings, get_settings
from pantrychef.errors import ExtractionFailed, ValidationError
from pantrychef.extraction.carve import JsonCarveExtractor, build_carver
from pantrychef.extraction.fallback import (
    FallbackMealPlanGenerator,
    fallback_recipe,
    validate_plan_request,
)
from pantrychef.extraction.receipt_heuristic import ReceiptLineHeuristic
from pantrychef.models.items import ExtractedItem, PantryItem
from pantrychef.models.meal_plan import MEAL_TYPES, MealPlan
from pantrychef.models.preferences import MealPlanPreferences, RecipePreferences
from pantrychef.models.recipe import Recipe
from pantrychef.models.results import (
    MealPlanResult,
    Provenance,
    ReceiptExtraction,
    RecipeResult,
)
from pantrychef.store.pantry import PantryMergeStore, import_extracted_items
from pantrychef.upstream.interface import OcrEngine, TextGenerator
from pantrychef.upstream.llm_client import build_text_generator
from pantrychef.upstream.prompts import (
    render_meal_plan_prompt,
    render_receipt_prompt,
    render_recipe_prompt,
)
from pantrychef.upstream.vision import build_ocr_engine, strip_data_url

logger = logging.getLogger(__name__)

NO_TEXT_MESSAGE = "No text detected in the image"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _clean_names(names: Optional[Sequence[str]]) -> List[str]:
    return [name.strip() for name in (names or []) if isinstance(name, str) and name.strip()]


def _parse_preferences(
    model_cls: Type[ModelT], preferences: Union[ModelT, Mapping[str, Any], None]
) -> ModelT:
    if preferences is None:
        return model_cls()
    if isinstance(preferences, model_cls):
        return preferences
    try:
        return model_cls.model_validate(preferences)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid preferences: {exc}") from exc


def _validate_as(model_cls: Type[ModelT], payload: Any, raw_text: str) -> ModelT:
    try:
        return model_cls.model_validate(payload)
    except PydanticValidationError as exc:
        raise ExtractionFailed(
            f"model reply does not match {model_cls.__name__}: {exc.error_count()} error(s)",
            raw_text,
        ) from exc


def _record(use_case: str, provenance: Provenance) -> None:
    metrics.EXTRACTIONS.labels(use_case=use_case, provenance=provenance).inc()


class StructuredResultResolver:
    """Run an upstream call and turn its text into a structured result.

    Upstream failures propagate as ``UpstreamUnavailable``. Replies that cannot
    be parsed are replaced with deterministic fallback output, and the result's
    ``provenance`` says which path produced it.
    """

    def __init__(
        self,
        *,
        ocr: OcrEngine,
        generator: TextGenerator,
        carver: Optional[JsonCarveExtractor] = None,
        receipt_heuristic: Optional[ReceiptLineHeuristic] = None,
        plan_generator: Optional[FallbackMealPlanGenerator] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._ocr = ocr
        self._generator = generator
        self._carver = carver or JsonCarveExtractor()
        self._receipt_heuristic = receipt_heuristic or ReceiptLineHeuristic()
        self._plan_generator = plan_generator or FallbackMealPlanGenerator(clock=clock)
        self._clock = clock

    def extract_receipt(self, image: Optional[str]) -> ReceiptExtraction:
        """OCR a base64 receipt image and extract grocery items from the detected text."""

        if not image or not image.strip():
            raise ValidationError("No image provided")

        ocr_text = self._ocr.detect_text(strip_data_url(image))
        if not ocr_text.strip():
            logger.info("OCR detected no text; skipping item extraction")
            _record("receipt", "model")
            return ReceiptExtraction(
                text="", items=[], message=NO_TEXT_MESSAGE, provenance="model"
            )

        reply = self._generator.generate(render_receipt_prompt(ocr_text))
        provenance: Provenance = "model"
        try:
            payload = self._carver.extract(reply, "array")
            items = self._coerce_items(payload, reply)
        except ExtractionFailed as exc:
            logger.warning(
                "Receipt reply unusable (%s); falling back to line heuristics",
                exc.reason,
                extra={"use_case": "receipt", "provenance": "fallback"},
            )
            items = self._receipt_heuristic.extract(ocr_text)
            provenance = "fallback"

        _record("receipt", provenance)
        return ReceiptExtraction(
            text=ocr_text,
            items=items,
            message=f"Extracted {len(items)} items from receipt",
            provenance=provenance,
        )

    def generate_recipe(
        self,
        ingredients: Optional[Sequence[str]],
        preferences: Union[RecipePreferences, Mapping[str, Any], None] = None,
    ) -> RecipeResult:
        """Ask the model for a recipe using ``ingredients``; fall back to a generic one."""

        names = _clean_names(ingredients)
        if not names:
            raise ValidationError("No ingredients provided")
        prefs = _parse_preferences(RecipePreferences, preferences)

        reply = self._generator.generate(render_recipe_prompt(names, prefs))
        provenance: Provenance = "model"
        try:
            recipe = _validate_as(Recipe, self._carver.extract(reply, "object"), reply)
        except ExtractionFailed as exc:
            logger.warning(
                "Recipe reply unusable (%s); using fallback recipe",
                exc.reason,
                extra={"use_case": "recipe", "provenance": "fallback"},
            )
            recipe = fallback_recipe(names, prefs.servings)
            provenance = "fallback"

        _record("recipe", provenance)
        return RecipeResult(recipe=recipe, provenance=provenance)

    def generate_meal_plan(
        self,
        pantry_items: Optional[Sequence[str]],
        preferences: Union[MealPlanPreferences, Mapping[str, Any], None] = None,
    ) -> MealPlanResult:
        """Ask the model for a multi-day plan; fall back to a rotation-based plan."""

        names = _clean_names(pantry_items)
        prefs = _parse_preferences(MealPlanPreferences, preferences)
        validate_plan_request(names, prefs.days, prefs.meals_per_day)

        today = self._clock()
        prompt = render_meal_plan_prompt(
            names,
            prefs,
            meal_types=MEAL_TYPES[: prefs.meals_per_day],
            start_date=today.isoformat(),
        )
        reply = self._generator.generate(prompt)
        provenance: Provenance = "model"
        try:
            plan = _validate_as(MealPlan, self._carver.extract(reply, "object"), reply)
        except ExtractionFailed as exc:
            logger.warning(
                "Meal plan reply unusable (%s); generating fallback plan",
                exc.reason,
                extra={"use_case": "meal_plan", "provenance": "fallback"},
            )
            plan = self._plan_generator.generate(
                names, prefs.days, prefs.meals_per_day, today=today
            )
            provenance = "fallback"

        _record("meal_plan", provenance)
        return MealPlanResult(meal_plan=plan, provenance=provenance)

    @staticmethod
    def import_receipt_items(
        items: Sequence[ExtractedItem], pantry: PantryMergeStore
    ) -> List[PantryItem]:
        """Upsert extracted receipt items into the pantry."""

        return import_extracted_items(pantry, items)

    @staticmethod
    def _coerce_items(payload: List[Any], raw_text: str) -> List[ExtractedItem]:
        items: List[ExtractedItem] = []
        for entry in payload:
            candidate = {"name": entry} if isinstance(entry, str) else entry
            if not isinstance(candidate, dict):
                continue
            try:
                items.append(ExtractedItem.model_validate(candidate))
            except PydanticValidationError:
                logger.debug("Dropping unusable receipt entry: %r", entry)
        if payload and not items:
            raise ExtractionFailed("model reply contained no usable items", raw_text)
        return items


def build_resolver(
    settings: Optional[Settings] = None,
    *,
    ocr: Optional[OcrEngine] = None,
    generator: Optional[TextGenerator] = None,
) -> StructuredResultResolver:
    """Wire a resolver from settings, building HTTP clients for any collaborator not given."""

    settings = settings or get_settings()
    return StructuredResultResolver(
        ocr=ocr if ocr is not None else build_ocr_engine(settings),
        generator=generator if generator is not None else build_text_generator(settings),
        carver=build_carver(settings.carve_strategy),
        receipt_heuristic=ReceiptLineHeuristic(
            max_items=settings.receipt_max_items,
            dedupe=settings.receipt_dedupe,
        ),
    )


__all__ = ["NO_TEXT_MESSAGE", "StructuredResultResolver", "build_resolver"]
