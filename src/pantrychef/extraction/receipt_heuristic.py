"""Line-oriented fallback parser for raw receipt text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from pantrychef.models.items import ExtractedItem, is_summary_token

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 20
MIN_NAME_LENGTH = 3


@dataclass(frozen=True)
class LinePattern:
    """Detector applied to every receipt line."""

    name: str
    regex: re.Pattern[str]
    price_prefix: Optional[str] = None


LINE_PATTERNS: tuple[LinePattern, ...] = (
    LinePattern("name_amount", re.compile(r"([A-Za-z\s]+)\s+([0-9]+\.?[0-9]*)")),
    LinePattern(
        "name_dollar_amount",
        re.compile(r"([A-Za-z\s]+)\s+\$([0-9]+\.?[0-9]*)"),
        price_prefix="$",
    ),
)


class ReceiptLineHeuristic:
    """Best-effort name/price extraction used when the model reply cannot be parsed.

    Every line is run through each pattern independently, so one line can yield
    more than one item. With ``dedupe`` enabled only the first item per
    case-insensitive name is kept.
    """

    def __init__(
        self,
        *,
        max_items: int = DEFAULT_MAX_ITEMS,
        dedupe: bool = False,
        patterns: tuple[LinePattern, ...] = LINE_PATTERNS,
    ) -> None:
        self._max_items = max(0, int(max_items))
        self._dedupe = dedupe
        self._patterns = patterns

    def extract(self, text: str) -> List[ExtractedItem]:
        lines = [line for line in (text or "").splitlines() if line.strip()]
        items: List[ExtractedItem] = []
        seen: set[str] = set()

        for line in lines:
            for pattern in self._patterns:
                item = self._match(pattern, line)
                if item is None:
                    continue
                key = item.name.lower()
                if self._dedupe and key in seen:
                    continue
                seen.add(key)
                items.append(item)

        if len(items) > self._max_items:
            logger.debug(
                "Receipt heuristic truncated %s candidates to %s", len(items), self._max_items
            )
        return items[: self._max_items]

    @staticmethod
    def _match(pattern: LinePattern, line: str) -> Optional[ExtractedItem]:
        match = pattern.regex.search(line)
        if not match or len(match.group(1)) < MIN_NAME_LENGTH:
            return None
        name = match.group(1).strip()
        if not name or is_summary_token(name):
            return None
        price = None
        if pattern.price_prefix is not None:
            price = f"{pattern.price_prefix}{match.group(2)}"
        return ExtractedItem(name=name, quantity="1", category="other", price=price)


__all__ = ["LINE_PATTERNS", "LinePattern", "ReceiptLineHeuristic"]
