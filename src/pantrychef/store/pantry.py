"""Pantry collection with case-insensitive upsert-by-name semantics."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union
from uuid import uuid4

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pantrychef import metrics
from pantrychef.errors import ValidationError
from pantrychef.models.items import ExtractedItem, ItemSource, PantryItem

from .backends import PANTRY_ITEMS, KeyValueStore, Record

logger = logging.getLogger(__name__)

EXPIRING_SOON_DAYS = 3

ItemInput = Union[Mapping[str, Any], BaseModel]

_ALIASES = {
    field.alias: name for name, field in PantryItem.model_fields.items() if field.alias
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_patch(value: ItemInput) -> dict[str, Any]:
    """Normalise an item or patch to field names, dropping unset and ``None`` values."""

    if isinstance(value, BaseModel):
        raw = value.model_dump(exclude_unset=True)
    else:
        raw = dict(value)
    patch: dict[str, Any] = {}
    for key, entry in raw.items():
        if entry is None:
            continue
        patch[_ALIASES.get(key, key)] = entry
    return patch


def _identity(name: Any) -> str:
    return str(name or "").strip().lower()


class PantryMergeStore:
    """Pantry items kept as one collection in a key-value store.

    Items are matched by name, case-insensitively. Every operation reads the whole
    collection, modifies it and writes it back.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = lambda: uuid4().hex,
    ) -> None:
        self._store = store
        self._clock = clock
        self._id_factory = id_factory

    def list(self) -> List[PantryItem]:
        loaded = (self._load_record(record) for record in self._store.get(PANTRY_ITEMS))
        return [item for item in loaded if item is not None]

    def get(self, item_id: str) -> Optional[PantryItem]:
        return next((item for item in self.list() if item.id == item_id), None)

    def names(self) -> List[str]:
        return [item.name for item in self.list()]

    def upsert(self, item: ItemInput, *, source: Optional[ItemSource] = None) -> PantryItem:
        """Insert ``item`` or merge it into the record with the same name."""

        patch = _as_patch(item)
        name = str(patch.get("name") or "").strip()
        if not name:
            raise ValidationError("Item name is required")
        patch["name"] = name
        if source is not None:
            patch["source"] = source

        records = self._store.get(PANTRY_ITEMS)
        key = _identity(name)
        index = next(
            (idx for idx, record in enumerate(records) if _identity(record.get("name")) == key),
            None,
        )

        if index is not None:
            patch.pop("id", None)
            patch.pop("name", None)
            merged = self._merge(records[index], patch)
            records[index] = self._dump(merged)
            result = "merged"
        else:
            patch["id"] = self._id_factory()
            patch.setdefault("added_date", self._clock())
            merged = self._validate(patch)
            records.append(self._dump(merged))
            result = "created"

        self._store.set(PANTRY_ITEMS, records)
        metrics.PANTRY_UPSERTS.labels(result=result).inc()
        logger.debug("Pantry upsert %s name=%s id=%s", result, merged.name, merged.id)
        return merged

    def upsert_many(
        self, items: Iterable[ItemInput], *, source: Optional[ItemSource] = None
    ) -> List[PantryItem]:
        return [self.upsert(item, source=source) for item in items]

    def update(self, item_id: str, patch: ItemInput) -> Optional[PantryItem]:
        """Merge ``patch`` into the record with ``item_id``; no-op when it does not exist."""

        records = self._store.get(PANTRY_ITEMS)
        for index, record in enumerate(records):
            if record.get("id") != item_id:
                continue
            changes = _as_patch(patch)
            changes.pop("id", None)
            merged = self._merge(record, changes)
            records[index] = self._dump(merged)
            self._store.set(PANTRY_ITEMS, records)
            return merged
        logger.debug("Pantry update ignored; no item with id=%s", item_id)
        return None

    def remove(self, item_id: str) -> bool:
        """Delete by id. Returns False, without writing, when the id is unknown."""

        records = self._store.get(PANTRY_ITEMS)
        remaining = [record for record in records if record.get("id") != item_id]
        if len(remaining) == len(records):
            return False
        self._store.set(PANTRY_ITEMS, remaining)
        return True

    def expiring_soon(
        self, today: Optional[date] = None, within_days: int = EXPIRING_SOON_DAYS
    ) -> List[PantryItem]:
        today = today or self._clock().date()
        return [
            item
            for item in self.list()
            if item.expiry_date is not None
            and 0 <= (item.expiry_date - today).days <= within_days
        ]

    def expired(self, today: Optional[date] = None) -> List[PantryItem]:
        today = today or self._clock().date()
        return [
            item for item in self.list() if item.expiry_date is not None and item.expiry_date < today
        ]

    def _merge(self, record: Record, patch: dict[str, Any]) -> PantryItem:
        try:
            payload = PantryItem.model_validate(record).model_dump()
        except PydanticValidationError:
            return self._repair(record, patch)
        payload.update(patch)
        return self._validate(payload)

    def _repair(self, record: Record, patch: dict[str, Any]) -> PantryItem:
        """Merge into a stored record that no longer validates, replacing it if needed."""

        logger.warning("Repairing malformed pantry record id=%s", record.get("id"))
        base = {
            "id": record.get("id") or self._id_factory(),
            "added_date": self._clock(),
        }
        payload = dict(base)
        payload.update(_as_patch(record))
        payload.update(patch)
        try:
            return PantryItem.model_validate(payload)
        except PydanticValidationError:
            if "name" in record and "name" not in patch:
                base["name"] = record["name"]
            return self._validate({**base, **patch})

    @staticmethod
    def _validate(payload: Mapping[str, Any]) -> PantryItem:
        try:
            return PantryItem.model_validate(payload)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid pantry item: {exc}") from exc

    @staticmethod
    def _dump(item: PantryItem) -> Record:
        return item.model_dump(mode="json", by_alias=True)

    @staticmethod
    def _load_record(record: Record) -> Optional[PantryItem]:
        try:
            return PantryItem.model_validate(record)
        except PydanticValidationError:
            logger.warning("Skipping malformed pantry record id=%s", record.get("id"))
            return None


def import_extracted_items(
    pantry: PantryMergeStore, items: Iterable[ExtractedItem]
) -> List[PantryItem]:
    """Add receipt items to the pantry, tagging them with the ``receipt`` source."""

    payloads = (
        {"name": item.name, "quantity": item.quantity, "category": item.category}
        for item in items
    )
    return pantry.upsert_many(payloads, source="receipt")


__all__ = ["EXPIRING_SOON_DAYS", "PantryMergeStore", "import_extracted_items"]
