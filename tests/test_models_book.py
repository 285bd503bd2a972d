"""
Tests for the Book model.

These tests verify that the Book model correctly:
1. Keeps status, borrower and due date consistent
2. Produces lent and returned copies without mutation
3. Serializes with the stored camelCase layout
4. Matches search terms
"""

from datetime import date

import pytest
from pydantic import ValidationError

from elc_library.catalog import starter_catalog
from elc_library.models import Book, BookCategory, BookLevel, BookList, BookStatus, dump_books


def make_book(**overrides) -> Book:
    data = {
        "id": "elc-001",
        "title": "Learning Teaching",
        "author": "Jim Scrivener",
        "isbn": "9780230729841",
        "category": BookCategory.PEDAGOGY,
        "level": BookLevel.PROFESSIONAL,
    }
    data.update(overrides)
    return Book(**data)


class TestBookValidation:
    """Loan-state fields agree with each other."""

    def test_new_book_is_available(self):
        book = make_book()

        assert book.status == BookStatus.AVAILABLE
        assert book.is_available
        assert book.checked_out_to is None
        assert book.due_date is None
        assert book.description == ""

    def test_checked_out_book_requires_borrower_and_due_date(self):
        with pytest.raises(ValidationError, match="borrower and a due date"):
            make_book(status=BookStatus.CHECKED_OUT, checked_out_to="Sarah")

        with pytest.raises(ValidationError):
            make_book(status=BookStatus.CHECKED_OUT, due_date=date(2026, 4, 1))

    def test_available_book_cannot_carry_borrower(self):
        with pytest.raises(ValidationError, match="cannot have a borrower"):
            make_book(checked_out_to="Sarah")

    def test_category_must_be_known(self):
        with pytest.raises(ValidationError):
            make_book(category="Fiction")

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            make_book(title="")


class TestBookTransitions:
    """lend_to and mark_available return updated copies."""

    def test_lend_to(self):
        book = make_book()
        lent = book.lend_to("Sarah J. Mitchell", date(2026, 4, 1))

        assert lent.status == BookStatus.CHECKED_OUT
        assert lent.checked_out_to == "Sarah J. Mitchell"
        assert lent.due_date == date(2026, 4, 1)
        assert book.is_available

    def test_lend_checked_out_book_fails(self):
        lent = make_book().lend_to("Sarah", date(2026, 4, 1))

        with pytest.raises(ValueError, match="already checked out"):
            lent.lend_to("Omar", date(2026, 4, 2))

    def test_mark_available_clears_borrower(self):
        returned = make_book().lend_to("Sarah", date(2026, 4, 1)).mark_available()

        assert returned.is_available
        assert returned.checked_out_to is None
        assert returned.due_date is None

    def test_books_are_frozen(self):
        book = make_book()
        with pytest.raises(ValidationError):
            book.title = "Changed"


class TestBookSerialization:
    """Stored layout uses camelCase and omits empty loan fields."""

    def test_checked_out_book_uses_aliases(self):
        lent = make_book().lend_to("Sarah", date(2026, 4, 1))
        (data,) = dump_books([lent])

        assert data["checkedOutTo"] == "Sarah"
        assert data["dueDate"] == "2026-04-01"
        assert data["status"] == "Checked Out"
        assert "checked_out_to" not in data

    def test_available_book_omits_loan_fields(self):
        (data,) = dump_books([make_book()])

        assert "checkedOutTo" not in data
        assert "dueDate" not in data

    def test_stored_layout_parses(self):
        raw = (
            '[{"id": "x1", "title": "T", "author": "A", "isbn": "1", "category": "ESP", '
            '"level": "Advanced", "status": "Checked Out", "checkedOutTo": "Sarah", '
            '"dueDate": "2026-04-01"}]'
        )
        (book,) = BookList.validate_json(raw)

        assert book.checked_out_to == "Sarah"
        assert book.due_date == date(2026, 4, 1)


class TestBookSearch:
    """Book.matches is the inventory search predicate."""

    def test_title_and_author_are_case_insensitive(self):
        book = make_book()

        assert book.matches("learning")
        assert book.matches("SCRIVENER")

    def test_isbn_substring(self):
        assert make_book().matches("0230729")

    def test_empty_term_matches_everything(self):
        assert make_book().matches("")

    def test_no_match(self):
        assert not make_book().matches("phonology")


class TestStarterCatalog:
    def test_ids_are_unique_and_books_available(self):
        books = starter_catalog()

        assert len({book.id for book in books}) == len(books)
        assert all(book.is_available for book in books)
        assert books[0].id == "elc-001"

    def test_every_category_is_represented(self):
        categories = {book.category for book in starter_catalog()}
        assert categories == set(BookCategory)
