"""Key-value records persisted as JSON in the application database."""
from __future__ import annotations

import json
from typing import Any, Callable, Optional

from sqlmodel import Session

from datetime_utils import local_now
from models.kv_record import KVRecord
from storage.db import get_session


def _serialise(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True)


class KeyValueStore:
    """Whole-value reads and writes under fixed keys; the last writer wins."""

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory

    def get_json(self, key: str) -> Optional[Any]:
        """Return the decoded value or ``None`` when the key is absent.

        Undecodable payloads raise :class:`json.JSONDecodeError`; callers decide
        how to recover.
        """
        with self._session_factory() as session:
            row = session.get(KVRecord, key)
            if row is None:
                return None
            return json.loads(row.value_json)

    def set_json(self, key: str, value: Any) -> None:
        payload = _serialise(value)
        with self._session_factory() as session:
            row = session.get(KVRecord, key)
            if row is None:
                row = KVRecord(key=key, value_json=payload)
            else:
                row.value_json = payload
                row.updated_at = local_now()
            session.add(row)
            session.commit()

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get_json(key)
        if value is None:
            return default
        return bool(value)

    def set_bool(self, key: str, value: bool) -> None:
        self.set_json(key, bool(value))

    def remove(self, key: str) -> None:
        with self._session_factory() as session:
            row = session.get(KVRecord, key)
            if row is not None:
                session.delete(row)
                session.commit()


__all__ = ["KeyValueStore"]
