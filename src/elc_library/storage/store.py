"""
Key-value persistence with cross-context change notification.

A ``StorageArea`` is the durable store shared by everything that uses the
same database file, the way every tab of a browser profile shares one local
storage. Each user of the area opens its own ``PersistentStore`` context.
When a context writes or clears a key, every *other* context attached to the
area is told which key changed and what its new serialized value is. The
writing context is not notified; it already knows.

Other processes open their own area on the same file. Their commits are
picked up by ``StorageArea.sync``, which runs before every read and
whenever a context asks to ``refresh``, and are dispatched as events too.

Values are stored as JSON text. The store does not interpret them.
"""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .schema import StoredRecord
from .session import DatabaseManager, get_db_manager

logger = logging.getLogger(__name__)

BOOKS_KEY = "elc_books"
RECORDS_KEY = "elc_records"
USER_KEY = "elc_user"

# listener(key, new raw value or None when cleared)
ChangeListener = Callable[[str, str | None], None]


class StorageError(Exception):
    """Raised when the storage area cannot be written."""


@dataclass(frozen=True)
class StorageEvent:
    """A key changed in the storage area."""

    key: str
    new_value: str | None
    source_id: str


class StorageArea:
    """
    Durable key-value area shared by several contexts.

    Writes go through one database transaction; events are dispatched only
    after the commit succeeds and only for keys whose stored text changed.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager
        self._contexts: list["PersistentStore"] = []
        # Stored text per key as of the last sync or local write
        self._known: dict[str, str] | None = None
        self._data_version: int | None = None

    def open_context(self, context_id: str | None = None) -> "PersistentStore":
        """Attach a new context (a "tab") to this area."""
        return PersistentStore(self, context_id=context_id)

    def attach(self, context: "PersistentStore") -> None:
        if context not in self._contexts:
            self._contexts.append(context)

    def detach(self, context: "PersistentStore") -> None:
        if context in self._contexts:
            self._contexts.remove(context)

    @property
    def context_count(self) -> int:
        return len(self._contexts)

    def read(self, key: str) -> str | None:
        """Return the raw stored text for ``key``, or None if never written."""
        self.sync()
        session = self.db_manager.create_session()
        try:
            row = session.get(StoredRecord, key)
            return row.value if row is not None else None
        finally:
            session.close()

    def sync(self) -> list[StorageEvent]:
        """
        Dispatch changes committed to the database by other processes.

        SQLite bumps ``PRAGMA data_version`` only for commits made on other
        connections, so an unchanged version means nothing needs reading. The
        first call records a baseline and dispatches nothing.

        Returns:
            The events dispatched to attached contexts

        Raises:
            StorageError: If the database cannot be read
        """
        session = self.db_manager.create_session()
        try:
            version = self._read_data_version(session)
            if self._known is not None and version is not None and version == self._data_version:
                return []
            rows = {
                row.key: (row.value, row.writer_id)
                for row in session.scalars(select(StoredRecord))
            }
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read storage area: {e!s}") from e
        finally:
            session.close()

        known = self._known
        self._known = {key: value for key, (value, _) in rows.items()}
        self._data_version = version
        if known is None:
            return []

        events: list[StorageEvent] = []
        for key in [*rows, *(key for key in known if key not in rows)]:
            value, writer_id = rows.get(key, (None, ""))
            if known.get(key) != value:
                events.append(StorageEvent(key=key, new_value=value, source_id=writer_id))

        if events:
            logger.info(
                "Picked up external changes to %s", ", ".join(event.key for event in events)
            )
        for event in events:
            self._dispatch(event)
        return events

    def _read_data_version(self, session: Session) -> int | None:
        if self.db_manager.engine.dialect.name != "sqlite":
            return None
        return session.execute(text("PRAGMA data_version")).scalar()

    def write(self, items: dict[str, str | None], source_id: str) -> list[StorageEvent]:
        """
        Write several keys atomically. A value of None removes the key.

        Returns:
            The events dispatched to other contexts

        Raises:
            StorageError: If the transaction fails; nothing is written and
                no event is dispatched
        """
        events: list[StorageEvent] = []
        try:
            with self.db_manager.session_scope() as session:
                for key, raw in items.items():
                    row = session.get(StoredRecord, key)
                    previous = row.value if row is not None else None

                    if raw is None:
                        if row is not None:
                            session.delete(row)
                    elif row is None:
                        session.add(StoredRecord(key=key, value=raw, writer_id=source_id))
                    else:
                        row.value = raw
                        row.writer_id = source_id

                    if previous != raw:
                        events.append(StorageEvent(key=key, new_value=raw, source_id=source_id))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write {', '.join(items)}: {e!s}") from e

        if self._known is not None:
            for key, raw in items.items():
                if raw is None:
                    self._known.pop(key, None)
                else:
                    self._known[key] = raw

        for event in events:
            self._dispatch(event)
        return events

    def _dispatch(self, event: StorageEvent) -> None:
        for context in list(self._contexts):
            if context.context_id != event.source_id:
                context.deliver(event)


class PersistentStore:
    """
    One context's view of a storage area.

    ``load``/``save``/``clear`` work on JSON-serializable values;
    ``subscribe`` registers listeners for changes made by other contexts.
    """

    def __init__(self, area: StorageArea, context_id: str | None = None):
        self.area = area
        self.context_id = context_id or uuid4().hex
        self._listeners: list[ChangeListener] = []
        area.attach(self)

    def load(self, key: str) -> Any | None:
        """Deserialize a named record; None if absent or unreadable."""
        raw = self.area.read(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed stored value for %s", key)
            return None

    def save(self, key: str, value: Any) -> None:
        """Serialize and write a named record, replacing any previous value."""
        self.save_many({key: value})

    def save_many(self, values: dict[str, Any]) -> None:
        """Serialize and write several named records in one transaction."""
        self.area.write({key: json.dumps(value) for key, value in values.items()}, self.context_id)

    def clear(self, key: str) -> None:
        """Remove a named record."""
        self.area.write({key: None}, self.context_id)

    def refresh(self) -> None:
        """Pick up changes other processes committed to the storage area."""
        self.area.sync()

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a listener for changes written by other contexts.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def deliver(self, event: StorageEvent) -> None:
        """Hand an external change to every listener of this context."""
        for listener in list(self._listeners):
            try:
                listener(event.key, event.new_value)
            except Exception:
                logger.exception("Storage listener failed for key %s", event.key)

    def close(self) -> None:
        """Detach from the area; no further events are delivered."""
        self._listeners.clear()
        self.area.detach(self)


_storage_area: StorageArea | None = None


def get_storage_area(database_url: str | None = None) -> StorageArea:
    """
    Get the storage area shared by every context of this process.

    Args:
        database_url: Database URL (only used on first call)
    """
    global _storage_area  # noqa: PLW0603

    if _storage_area is None:
        _storage_area = StorageArea(get_db_manager(database_url))

    return _storage_area


def reset_storage_area() -> None:
    """Forget the shared storage area (useful for testing)."""
    global _storage_area  # noqa: PLW0603
    _storage_area = None
