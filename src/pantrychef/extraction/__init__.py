"""Structured extraction from OCR text and generative model replies."""

from .carve import BalancedSpanStrategy, GreedySpanStrategy, JsonCarveExtractor, build_carver
from .fallback import FallbackMealPlanGenerator, fallback_recipe
from .receipt_heuristic import ReceiptLineHeuristic
from .resolver import StructuredResultResolver, build_resolver

__all__ = [
    "BalancedSpanStrategy",
    "FallbackMealPlanGenerator",
    "GreedySpanStrategy",
    "JsonCarveExtractor",
    "ReceiptLineHeuristic",
    "StructuredResultResolver",
    "build_carver",
    "build_resolver",
    "fallback_recipe",
]
