"""
Key-value backends for session storage.

Values are JSON-compatible structures grouped by namespace (one namespace per
workspace). Reads always hand back a fresh copy.
"""
import copy
import json
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from research_assistant.logger import get_logger

logger = get_logger("Store")


class KeyValueBackend(Protocol):
    def get(self, namespace: str, key: str) -> Optional[Any]: ...

    def put(self, namespace: str, key: str, value: Any) -> None: ...

    def delete(self, namespace: str, key: str) -> None: ...


class InMemoryKeyValueBackend:
    """Process-local backend. Suitable for tests and throwaway runs."""

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, namespace: str, key: str) -> Optional[Any]:
        with self._lock:
            value = self._data.get(namespace, {}).get(key)
            return copy.deepcopy(value)

    def put(self, namespace: str, key: str, value: Any) -> None:
        with self._lock:
            self._data.setdefault(namespace, {})[key] = copy.deepcopy(value)

    def delete(self, namespace: str, key: str) -> None:
        with self._lock:
            self._data.get(namespace, {}).pop(key, None)


class SQLiteKeyValueBackend:
    """
    SQLite-backed key-value storage.

    Each value is stored as JSON text in a single table keyed by
    (namespace, key).
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path)
        self._init_db()

    def _init_db(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            with conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_entries (
                        namespace TEXT NOT NULL,
                        key TEXT NOT NULL,
                        value_json TEXT NOT NULL,
                        PRIMARY KEY (namespace, key)
                    )
                """)
        finally:
            conn.close()
        logger.info("Session database ready at %s", self._db_path)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def get(self, namespace: str, key: str) -> Optional[Any]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT value_json FROM kv_entries WHERE namespace = ? AND key = ?",
                (namespace, key),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return json.loads(row[0])

    def put(self, namespace: str, key: str, value: Any) -> None:
        payload = json.dumps(value)
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    "INSERT OR REPLACE INTO kv_entries (namespace, key, value_json) VALUES (?, ?, ?)",
                    (namespace, key, payload),
                )
        finally:
            conn.close()

    def delete(self, namespace: str, key: str) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    "DELETE FROM kv_entries WHERE namespace = ? AND key = ?",
                    (namespace, key),
                )
        finally:
            conn.close()


def build_backend(kind: str, path: Optional[Path] = None) -> KeyValueBackend:
    """Create the backend named by STORE_BACKEND ("sqlite" or "memory")."""
    if kind == "memory":
        return InMemoryKeyValueBackend()
    if kind == "sqlite":
        if path is None:
            raise ValueError("sqlite backend requires a database path")
        return SQLiteKeyValueBackend(path)
    raise ValueError(f"Unknown store backend: {kind}")
