"""Recover a JSON value embedded in noisy model output."""

from __future__ import annotations

import json
import logging
from typing import Any, Literal, Optional, Protocol

from pantrychef.errors import ExtractionFailed

logger = logging.getLogger(__name__)

Shape = Literal["object", "array"]

_DELIMITERS: dict[str, tuple[str, str]] = {
    "object": ("{", "}"),
    "array": ("[", "]"),
}


class SpanStrategy(Protocol):
    """Locate a candidate JSON substring for the requested shape."""

    def find_span(self, text: str, shape: Shape) -> Optional[str]:
        """Return the candidate substring, or None when nothing looks like JSON."""


class GreedySpanStrategy:
    """Slice from the first opening bracket to the last closing bracket in the text.

    No bracket counting is done, so two separate objects in one reply are sliced
    together and fail to parse.
    """

    def find_span(self, text: str, shape: Shape) -> Optional[str]:
        opener, closer = _DELIMITERS[shape]
        start = text.find(opener)
        end = text.rfind(closer)
        if start == -1 or end == -1 or end <= start:
            return None
        return text[start : end + 1]


class BalancedSpanStrategy:
    """Return the first bracket-balanced span, ignoring brackets inside string literals."""

    def find_span(self, text: str, shape: Shape) -> Optional[str]:
        opener, _ = _DELIMITERS[shape]
        start = text.find(opener)
        while start != -1:
            end = self._match_end(text, start)
            if end is not None:
                return text[start : end + 1]
            start = text.find(opener, start + 1)
        return None

    @staticmethod
    def _match_end(text: str, start: int) -> Optional[int]:
        pairs = {"{": "}", "[": "]"}
        stack: list[str] = []
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char in pairs:
                stack.append(pairs[char])
            elif char in ("}", "]"):
                if not stack or stack.pop() != char:
                    return None
                if not stack:
                    return index
        return None


STRATEGIES: dict[str, type] = {
    "greedy": GreedySpanStrategy,
    "balanced": BalancedSpanStrategy,
}


def _has_shape(value: Any, shape: Shape) -> bool:
    if shape == "object":
        return isinstance(value, dict)
    return isinstance(value, list)


class JsonCarveExtractor:
    """Parse model output as JSON, carving the value out of surrounding prose when needed."""

    def __init__(self, strategy: Optional[SpanStrategy] = None) -> None:
        self._strategy = strategy or GreedySpanStrategy()

    def extract(self, text: str, shape: Shape) -> Any:
        """Return the parsed value of the expected shape or raise ``ExtractionFailed``."""

        raw_text = text or ""
        try:
            value = json.loads(raw_text)
        except (ValueError, TypeError, RecursionError):
            pass
        else:
            if _has_shape(value, shape):
                return value

        span = self._strategy.find_span(raw_text, shape)
        if span is None:
            raise ExtractionFailed(f"no JSON {shape} found in text", raw_text)

        try:
            value = json.loads(span)
        except (ValueError, RecursionError) as exc:
            snippet = span.strip().replace("\n", " ")[:200]
            logger.debug("Carved span is not valid JSON: %s: payload=%s", exc, snippet)
            raise ExtractionFailed(f"carved {shape} is not valid JSON: {exc}", raw_text) from exc

        if not _has_shape(value, shape):
            raise ExtractionFailed(f"carved value is not a JSON {shape}", raw_text)
        return value


def build_carver(strategy_name: str = "greedy") -> JsonCarveExtractor:
    """Create an extractor using the named span strategy (greedy or balanced)."""

    normalized = (strategy_name or "greedy").strip().lower()
    strategy_cls = STRATEGIES.get(normalized)
    if strategy_cls is None:
        logger.warning("Unknown carve strategy %r; using greedy", strategy_name)
        strategy_cls = GreedySpanStrategy
    return JsonCarveExtractor(strategy_cls())


__all__ = [
    "BalancedSpanStrategy",
    "GreedySpanStrategy",
    "JsonCarveExtractor",
    "Shape",
    "SpanStrategy",
    "build_carver",
]
