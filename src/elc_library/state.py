"""
Domain state manager for the ELC Library.

``LibraryState`` owns the in-memory catalog, the loan ledger and the session
user of one context. It is the only code that changes books or loan records.

Every change to the catalog or the ledger goes through ``_commit``, which
persists both collections in a single storage transaction and only then
swaps the in-memory copies. Other contexts of the same storage area receive
the change as a storage event; this context's local listeners (views) are
told which keys changed so they can re-render.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date, timedelta
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from .catalog import starter_catalog
from .config import get_config
from .models import (
    Book,
    BookList,
    CheckoutRecord,
    LoanStats,
    RecordList,
    User,
    UserRole,
    dump_books,
    dump_records,
    dump_user,
)
from .storage import (
    BOOKS_KEY,
    RECORDS_KEY,
    USER_KEY,
    PersistentStore,
    StorageError,
    get_storage_area,
)

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"

# listener(keys that changed)
StateListener = Callable[[frozenset[str]], None]


class CirculationError(Exception):
    """Base exception for rejected circulation operations."""


class BookUnavailableError(CirculationError):
    """Raised when checking out a book that is already out."""


def new_record_id() -> str:
    """Generate an opaque loan record id."""
    return f"loan_{uuid4().hex[:12]}"


class LibraryState:
    """
    Catalog, loan ledger and session of one context.

    Args:
        store: The context's persistent store
        loan_period_days: Loan length; defaults to the configured value
        today: Clock used for checkout and overdue dates
        default_catalog: Catalog used when none is stored; defaults to the
            starter collection (or an empty catalog when seeding is disabled)
    """

    def __init__(
        self,
        store: PersistentStore,
        *,
        loan_period_days: int | None = None,
        today: Callable[[], date] = date.today,
        default_catalog: Sequence[Book] | None = None,
    ):
        config = get_config()
        self._store = store
        if loan_period_days is None:
            loan_period_days = config.loan_period_days
        self._loan_period = timedelta(days=loan_period_days)
        self._today = today
        self._listeners: list[StateListener] = []

        if default_catalog is None:
            default_catalog = starter_catalog() if config.seed_catalog else []

        books = self._parse_books(store.load(BOOKS_KEY))
        records = self._parse_records(store.load(RECORDS_KEY))
        self._user = self._parse_user(store.load(USER_KEY))

        self._books: list[Book] = list(default_catalog) if books is None else books
        self._records: list[CheckoutRecord] = [] if records is None else records

        if books is None or records is None:
            logger.info("Initializing storage with %d books", len(self._books))
            self._persist(self._books, self._records)

        self._unsubscribe = store.subscribe(self._on_external_change)

    # ------------------------------------------------------------------ #
    # Read side
    # ------------------------------------------------------------------ #

    @property
    def store(self) -> PersistentStore:
        return self._store

    @property
    def books(self) -> list[Book]:
        return list(self._books)

    @property
    def records(self) -> list[CheckoutRecord]:
        return list(self._records)

    @property
    def current_user(self) -> User | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def loan_period_days(self) -> int:
        return self._loan_period.days

    def today(self) -> date:
        return self._today()

    def get_book(self, book_id: str) -> Book | None:
        return next((book for book in self._books if book.id == book_id), None)

    def active_record_for(self, book_id: str) -> CheckoutRecord | None:
        """The active loan of a book, if it is out."""
        return next(
            (record for record in self._records if record.book_id == book_id and record.is_active),
            None,
        )

    def search_books(self, term: str = "", category: str | None = None) -> list[Book]:
        """
        Filter the catalog the way the inventory view does.

        Args:
            term: Matched against title and author (case-insensitive) and ISBN
            category: Category name; None or "All" keeps every category
        """
        term = term.strip()
        return [
            book
            for book in self._books
            if book.matches(term)
            and (category in (None, ALL_CATEGORIES) or book.category == category)
        ]

    def categories(self) -> list[str]:
        """The "All" filter followed by every category present, in catalog order."""
        seen = dict.fromkeys(book.category.value for book in self._books)
        return [ALL_CATEGORIES, *seen]

    def active_loans(self) -> list[CheckoutRecord]:
        return [record for record in self._records if record.is_active]

    def returned_loans(self) -> list[CheckoutRecord]:
        """Returned loans, most recent checkout first."""
        return [record for record in reversed(self._records) if not record.is_active]

    def overdue_loans(self) -> list[CheckoutRecord]:
        today = self._today()
        return [record for record in self._records if record.is_overdue(today)]

    def loan_stats(self) -> LoanStats:
        return LoanStats(
            total_active=len(self.active_loans()),
            overdue=len(self.overdue_loans()),
            total_returns=len(self.returned_loans()),
        )

    # ------------------------------------------------------------------ #
    # Circulation
    # ------------------------------------------------------------------ #

    def checkout(self, book_id: str, borrower_id: str, borrower_name: str) -> CheckoutRecord | None:
        """
        Lend a book to a teacher.

        Returns:
            The new active record, or None if the book does not exist

        Raises:
            BookUnavailableError: If the book is already checked out
            pydantic.ValidationError: If the borrower id or name is empty
        """
        self.refresh()
        book = self.get_book(book_id)
        if book is None:
            logger.warning("Checkout ignored - no book with id %s", book_id)
            return None

        if not book.is_available or self.active_record_for(book_id) is not None:
            raise BookUnavailableError(
                f"'{book.title}' is already checked out to {book.checked_out_to}"
            )

        checkout_date = self._today()
        record = CheckoutRecord(
            id=new_record_id(),
            book_id=book_id,
            borrower_id=borrower_id,
            borrower_name=borrower_name,
            checkout_date=checkout_date,
            due_date=checkout_date + self._loan_period,
        )

        books = [
            b.lend_to(record.borrower_name, record.due_date) if b.id == book_id else b
            for b in self._books
        ]
        self._commit(books, [*self._records, record])

        logger.info(
            "Checked out %s to %s (%s), due %s",
            book_id,
            record.borrower_name,
            record.borrower_id,
            record.due_date,
        )
        return record

    def return_book(self, book_id: str) -> CheckoutRecord | None:
        """
        Take a book back.

        Closes the book's active loan and resets the book to available. A
        checked-out book with no active loan is still reset.

        Returns:
            The record that was closed, or None if there was none
        """
        self.refresh()
        book = self.get_book(book_id)
        if book is None:
            logger.warning("Return ignored - no book with id %s", book_id)
            return None

        closed: CheckoutRecord | None = None
        records: list[CheckoutRecord] = []
        for record in self._records:
            if record.book_id == book_id and record.is_active:
                record = record.mark_returned()
                closed = record
            records.append(record)

        if closed is None and book.is_available:
            logger.debug("Return of %s is a no-op - book is not out", book_id)
            return None

        if closed is None:
            logger.warning("Book %s was checked out without an active loan; resetting", book_id)

        books = [b.mark_available() if b.id == book_id else b for b in self._books]
        self._commit(books, records)

        logger.info("Returned %s", book_id)
        return closed

    # ------------------------------------------------------------------ #
    # Session
    # ------------------------------------------------------------------ #

    def login(self, user_id: str, name: str) -> User:
        """Start an admin session. There is no credential check."""
        self.refresh()
        user = User(id=user_id, name=name, role=UserRole.ADMIN)
        try:
            self._store.save(USER_KEY, dump_user(user))
        except StorageError:
            logger.exception("Could not persist session for %s", user.id)
        self._user = user
        self._notify([USER_KEY])
        logger.info("Session started for %s", user.name)
        return user

    def logout(self) -> None:
        """End the session."""
        self.refresh()
        try:
            self._store.clear(USER_KEY)
        except StorageError:
            logger.exception("Could not clear the stored session")
        self._user = None
        self._notify([USER_KEY])
        logger.info("Session ended")

    # ------------------------------------------------------------------ #
    # Listeners and replication
    # ------------------------------------------------------------------ #

    def refresh(self) -> None:
        """Apply changes that other processes committed to the storage area."""
        try:
            self._store.refresh()
        except StorageError:
            logger.exception("Could not check the storage area for external changes")

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a view listener called with the keys that changed.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Stop receiving changes from other contexts."""
        self._unsubscribe()
        self._listeners.clear()

    def _commit(self, books: list[Book], records: list[CheckoutRecord]) -> None:
        self._persist(books, records)
        self._books = books
        self._records = records
        self._notify([BOOKS_KEY, RECORDS_KEY])

    def _persist(self, books: list[Book], records: list[CheckoutRecord]) -> None:
        try:
            self._store.save_many(
                {BOOKS_KEY: dump_books(books), RECORDS_KEY: dump_records(records)}
            )
        except StorageError:
            logger.exception("Could not persist catalog and loan records")

    def _notify(self, keys: Iterable[str]) -> None:
        changed = frozenset(keys)
        for listener in list(self._listeners):
            try:
                listener(changed)
            except Exception:
                logger.exception("State listener failed")

    def _on_external_change(self, key: str, raw: str | None) -> None:
        if key == BOOKS_KEY:
            books = self._parse_books_json(raw)
            if books is None:
                return
            self._books = books
        elif key == RECORDS_KEY:
            records = self._parse_records_json(raw)
            if records is None:
                return
            self._records = records
        elif key == USER_KEY:
            self._user = self._parse_user_json(raw)
        else:
            return

        logger.info("Applied external change to %s", key)
        self._notify([key])

    # ------------------------------------------------------------------ #
    # Decoding stored values
    # ------------------------------------------------------------------ #

    @staticmethod
    def _parse_books(data: Any) -> list[Book] | None:
        if data is None:
            return None
        try:
            return BookList.validate_python(data)
        except ValidationError:
            logger.warning("Stored catalog is invalid; falling back to default")
            return None

    @staticmethod
    def _parse_records(data: Any) -> list[CheckoutRecord] | None:
        if data is None:
            return None
        try:
            return RecordList.validate_python(data)
        except ValidationError:
            logger.warning("Stored loan records are invalid; starting empty")
            return None

    @staticmethod
    def _parse_user(data: Any) -> User | None:
        if data is None:
            return None
        try:
            return User.model_validate(data)
        except ValidationError:
            logger.warning("Stored session is invalid; treating as logged out")
            return None

    @staticmethod
    def _parse_books_json(raw: str | None) -> list[Book] | None:
        if not raw:
            return None
        try:
            return BookList.validate_json(raw)
        except ValidationError:
            logger.warning("Ignoring malformed catalog from another context")
            return None

    @staticmethod
    def _parse_records_json(raw: str | None) -> list[CheckoutRecord] | None:
        if not raw:
            return None
        try:
            return RecordList.validate_json(raw)
        except ValidationError:
            logger.warning("Ignoring malformed loan records from another context")
            return None

    @staticmethod
    def _parse_user_json(raw: str | None) -> User | None:
        if not raw:
            return None
        try:
            return User.model_validate_json(raw)
        except ValidationError:
            logger.warning("Ignoring malformed session from another context")
            return None


class _StateStore:
    """Internal storage for the process-wide state."""

    _instance: LibraryState | None = None


def get_library_state() -> LibraryState:
    """
    Get or create the state of this process's context.

    An existing state first applies changes made by other processes, so every
    request sees the current catalog.
    """
    state = _StateStore._instance  # type: ignore[reportPrivateUsage]
    if state is None:
        state = LibraryState(get_storage_area().open_context())
        _StateStore._instance = state  # type: ignore[reportPrivateUsage]
    else:
        state.refresh()
    return state


def reset_library_state() -> None:
    """Close and drop the process-wide state (useful for testing)."""
    state = _StateStore._instance  # type: ignore[reportPrivateUsage]
    if state is not None:
        state.close()
        state.store.close()
    _StateStore._instance = None  # type: ignore[reportPrivateUsage]
