"""Key-value persistence backends for pantry items, meal plans, recipes and preferences."""

from __future__ import annotations

import copy
import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Protocol

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from pantrychef.config import Settings, get_settings

from .orm import Base, CollectionORM

logger = logging.getLogger(__name__)

PANTRY_ITEMS = "pantry_items"
MEAL_PLANS = "meal_plans"
SAVED_RECIPES = "saved_recipes"
USER_PREFERENCES = "user_preferences"

Record = Dict[str, Any]


class KeyValueStore(Protocol):
    """Whole-collection read/write store. No transactions and no queries."""

    def get(self, collection: str) -> List[Record]:
        """Return every record in the collection (empty when unset)."""

    def set(self, collection: str, records: List[Record]) -> None:
        """Replace the collection with ``records``."""


class InMemoryKeyValueStore:
    """Dictionary-backed store; records are deep-copied in and out."""

    def __init__(self, initial: Optional[Dict[str, List[Record]]] = None) -> None:
        self._data: Dict[str, List[Record]] = copy.deepcopy(initial or {})

    def get(self, collection: str) -> List[Record]:
        return copy.deepcopy(self._data.get(collection, []))

    def set(self, collection: str, records: List[Record]) -> None:
        self._data[collection] = copy.deepcopy(list(records))


class SqlKeyValueStore:
    """Store each collection as a JSON document in a SQL table.

    The store is constructed explicitly and must be initialised with :meth:`init`
    before use; :meth:`close` disposes the engine.
    """

    def __init__(self, url: str) -> None:
        self._url = url
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @classmethod
    def for_path(cls, database_path: Path) -> "SqlKeyValueStore":
        database_path.parent.mkdir(parents=True, exist_ok=True)
        return cls(f"sqlite:///{database_path}")

    def init(self) -> "SqlKeyValueStore":
        """Create the engine and schema. Safe to call more than once."""

        if self._engine is None:
            self._engine = create_engine(self._url, future=True, echo=False)
            Base.metadata.create_all(self._engine)
            self._session_factory = sessionmaker(
                bind=self._engine, autoflush=False, autocommit=False, future=True
            )
            logger.debug("Key-value store initialised at %s", self._url)
        return self

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Yield a session with automatic commit/rollback."""

        if self._session_factory is None:
            raise RuntimeError("SqlKeyValueStore.init() must be called before use")
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get(self, collection: str) -> List[Record]:
        with self.session_scope() as session:
            row = session.get(CollectionORM, collection)
            if row is None:
                return []
            try:
                records = json.loads(row.payload)
            except json.JSONDecodeError:
                logger.warning("Collection %s holds invalid JSON; treating as empty", collection)
                return []
            return records if isinstance(records, list) else []

    def set(self, collection: str, records: List[Record]) -> None:
        payload = json.dumps(list(records), default=str)
        with self.session_scope() as session:
            row = session.get(CollectionORM, collection)
            if row is None:
                session.add(CollectionORM(name=collection, payload=payload))
            else:
                row.payload = payload


def build_store(settings: Optional[Settings] = None) -> SqlKeyValueStore:
    """Create and initialise the SQLite-backed store configured in settings."""

    settings = settings or get_settings()
    return SqlKeyValueStore.for_path(settings.database_path).init()


__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "MEAL_PLANS",
    "PANTRY_ITEMS",
    "Record",
    "SAVED_RECIPES",
    "SqlKeyValueStore",
    "USER_PREFERENCES",
    "build_store",
]
