"""Pydantic models for grocery items extracted from receipts and stored in the pantry."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Category = Literal[
    "produce",
    "dairy",
    "meat",
    "seafood",
    "pantry",
    "frozen",
    "bakery",
    "beverages",
    "snacks",
    "other",
]
ItemSource = Literal["manual", "receipt", "api"]

CATEGORIES: tuple[str, ...] = (
    "produce",
    "dairy",
    "meat",
    "seafood",
    "pantry",
    "frozen",
    "bakery",
    "beverages",
    "snacks",
    "other",
)

SUMMARY_TOKENS = frozenset({"total", "tax", "subtotal", "cash", "card", "receipt"})


def is_summary_token(name: str) -> bool:
    """Return True when the whole name is a receipt summary token such as TOTAL or TAX."""

    return name.strip().lower() in SUMMARY_TOKENS


def normalize_category(value: Any) -> str:
    """Map free-form category text onto a known category, defaulting to ``other``."""

    if isinstance(value, str) and value.strip().lower() in CATEGORIES:
        return value.strip().lower()
    return "other"


def _stringify(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class ExtractedItem(BaseModel):
    """Grocery item recovered from a receipt."""

    name: str
    quantity: str = ""
    category: Category = "other"
    price: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        name = re.sub(r"\s+", " ", value).strip()
        if not name:
            raise ValueError("item name must not be empty")
        if is_summary_token(name):
            raise ValueError(f"{name!r} is a receipt summary line, not an item")
        return name

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> Any:
        if value is None:
            return ""
        return _stringify(value)

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return _stringify(value)

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> str:
        return normalize_category(value)


class PantryItem(BaseModel):
    """Item stored in the household pantry. Identity for merging is the case-folded name."""

    id: str
    name: str
    quantity: str = ""
    category: Category = "other"
    price: Optional[str] = None
    expiry_date: Optional[date] = Field(default=None, alias="expiryDate")
    notes: str = ""
    added_date: datetime = Field(alias="addedDate")
    source: ItemSource = "manual"

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("item name must not be empty")
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> str:
        return normalize_category(value)

    @field_validator("quantity", "notes", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        return _stringify(value)

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> Any:
        return _stringify(value)

    @field_validator("expiry_date", mode="before")
    @classmethod
    def _blank_expiry(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def identity(self) -> str:
        return self.name.strip().lower()


__all__ = [
    "CATEGORIES",
    "Category",
    "ExtractedItem",
    "ItemSource",
    "PantryItem",
    "SUMMARY_TOKENS",
    "is_summary_token",
    "normalize_category",
]
