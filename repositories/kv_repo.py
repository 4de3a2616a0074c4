from typing import Callable, Protocol

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from models.kv_entry import KeyValueEntry


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class SqlKeyValueStore:
    """Durable store backed by the ``kv_store`` table.

    The trainer outlives any single request, so every call opens its own
    short-lived session from ``session_factory``.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, key: str) -> str | None:
        with self.session_factory() as db:
            entity = db.get(KeyValueEntry, key)
            return entity.value if entity else None

    def set(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            entity = db.get(KeyValueEntry, key)
            if entity:
                entity.value = value
            else:
                db.add(KeyValueEntry(key=key, value=value))
            db.commit()

    def remove(self, key: str) -> None:
        with self.session_factory() as db:
            db.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            db.commit()

    def keys(self) -> list[str]:
        with self.session_factory() as db:
            stmt = select(KeyValueEntry.key).order_by(KeyValueEntry.key)
            return list(db.execute(stmt).scalars())


class MemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
