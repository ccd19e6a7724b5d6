import threading
import time
import uuid
from typing import Dict, List, Optional

from research_assistant import config
from research_assistant.kv_store import KeyValueBackend, build_backend
from research_assistant.logger import get_logger
from research_assistant.models import ChatMessage, Session

logger = get_logger("Store")

INDEX_KEY = "sessions_list"
ROLES = ("user", "assistant")


class SessionNotFoundError(LookupError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


def _now_ms() -> int:
    return int(time.time() * 1000)


def _session_key(session_id: str) -> str:
    return f"session:{session_id}"


class SessionStore:
    """
    Sessions and their message history for one workspace.

    Each session is a single record in the backend; the session index lists
    every stored id. Record and index are always changed together under the
    workspace lock. Read-modify-write of a single record (rename, append)
    holds that session's lock, so appends to one session never interleave.
    """

    def __init__(self, backend: KeyValueBackend, workspace_id: str) -> None:
        self.backend = backend
        self.workspace_id = workspace_id
        self._index_lock = threading.RLock()
        self._locks_guard = threading.Lock()
        self._session_locks: Dict[str, threading.RLock] = {}

    def _lock_for(self, session_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._session_locks.get(session_id)
            if lock is None:
                lock = threading.RLock()
                self._session_locks[session_id] = lock
            return lock

    def _forget_lock(self, session_id: str) -> None:
        with self._locks_guard:
            self._session_locks.pop(session_id, None)

    def _load_index(self) -> List[str]:
        return self.backend.get(self.workspace_id, INDEX_KEY) or []

    def _save(self, session: Session) -> None:
        self.backend.put(self.workspace_id, _session_key(session.id), session.to_record())

    def create_session(self, title: Optional[str] = None) -> Session:
        now = _now_ms()
        session = Session(
            id=str(uuid.uuid4()),
            title=(title or "").strip() or config.DEFAULT_TITLE,
            messages=[],
            created_at=now,
            updated_at=now,
        )
        with self._index_lock:
            # Index first so a failed write never leaves an unindexed record
            index = self._load_index()
            self.backend.put(self.workspace_id, INDEX_KEY, [session.id, *index])
            try:
                self._save(session)
            except Exception:
                self.backend.put(self.workspace_id, INDEX_KEY, index)
                raise
        logger.info("Created session %s (%s)", session.id, session.title)
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        record = self.backend.get(self.workspace_id, _session_key(session_id))
        if record is None:
            return None
        return Session.model_validate(record)

    def list_sessions(self) -> List[Session]:
        """All sessions in the workspace, most recently updated first."""
        sessions: List[Session] = []
        for session_id in self._load_index():
            session = self.get_session(session_id)
            if session is None:
                # Left in the index; see DESIGN.md on dangling entries
                logger.warning("Index entry %s has no session record", session_id)
                continue
            sessions.append(session)
        return sorted(sessions, key=lambda s: s.updated_at, reverse=True)

    def delete_session(self, session_id: str) -> bool:
        with self._index_lock, self._lock_for(session_id):
            self.backend.delete(self.workspace_id, _session_key(session_id))
            index = self._load_index()
            remaining = [sid for sid in index if sid != session_id]
            if len(remaining) != len(index):
                self.backend.put(self.workspace_id, INDEX_KEY, remaining)
        self._forget_lock(session_id)
        logger.info("Deleted session %s", session_id)
        return True

    def rename_session(self, session_id: str, title: str) -> bool:
        with self._lock_for(session_id):
            session = self.get_session(session_id)
            if session is None:
                self._forget_lock(session_id)
                return False
            session.title = title
            session.updated_at = max(_now_ms(), session.updated_at)
            self._save(session)
        return True

    def append_message(self, session_id: str, role: str, content: str) -> ChatMessage:
        if role not in ROLES:
            raise ValueError(f"Unsupported role: {role}")
        with self._lock_for(session_id):
            session = self.get_session(session_id)
            if session is None:
                self._forget_lock(session_id)
                raise SessionNotFoundError(session_id)
            message = ChatMessage(
                id=str(uuid.uuid4()),
                role=role,
                content=content,
                timestamp=_now_ms(),
            )
            session.messages.append(message)
            session.updated_at = max(message.timestamp, session.updated_at)
            self._save(session)
        return message

    def get_history(self, session_id: str) -> List[ChatMessage]:
        session = self.get_session(session_id)
        if session is None:
            return []
        return session.messages


class StoreRegistry:
    """One SessionStore per workspace id, all sharing a single backend."""

    def __init__(self, backend: KeyValueBackend) -> None:
        self.backend = backend
        self._stores: Dict[str, SessionStore] = {}
        self._lock = threading.Lock()

    def for_workspace(self, workspace_id: str) -> SessionStore:
        with self._lock:
            store = self._stores.get(workspace_id)
            if store is None:
                store = SessionStore(self.backend, workspace_id)
                self._stores[workspace_id] = store
            return store


_registry: Optional[StoreRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> StoreRegistry:
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = StoreRegistry(build_backend(config.STORE_BACKEND, config.STORE_PATH))
        return _registry


def get_store() -> SessionStore:
    return get_registry().for_workspace(config.WORKSPACE_ID)
