"""
Book model for the ELC Library.

A Book is one physical title in the ELC collection. Its loan-state fields
(``status``, ``checked_out_to``, ``due_date``) always agree with each other;
the model refuses any combination where a checked-out book has no borrower
or an available book still carries one.

Books are frozen. The state manager produces updated copies with
``lend_to()`` and ``mark_available()`` instead of mutating in place.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BookCategory(str, Enum):
    """Collection shelves used by the ELC."""

    ESP = "ESP"
    GENERAL_ENGLISH = "General English"
    TEACHER_RESOURCE = "Teacher Resource"
    ACADEMIC_SKILLS = "Academic Skills"
    PEDAGOGY = "Pedagogy"
    TESTING = "Testing"


class BookLevel(str, Enum):
    """Proficiency level a title is written for."""

    STARTER_ELEMENTARY = "Starter/Elementary"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    PROFESSIONAL = "Professional"


class BookStatus(str, Enum):
    """Loan state of a book."""

    AVAILABLE = "Available"
    CHECKED_OUT = "Checked Out"


class Book(BaseModel):
    """
    Represents a title in the ELC catalog.

    Serialized with camelCase aliases (``checkedOutTo``, ``dueDate``), the
    layout of the stored catalog.
    """

    id: str = Field(
        ...,
        description="Opaque identifier, stable for the lifetime of the entry",
        min_length=1,
        examples=["elc-001"],
    )

    title: str = Field(
        ...,
        description="The title of the book",
        min_length=1,
        max_length=500,
        examples=["Speakout Intermediate Teacher's Book"],
    )

    author: str = Field(
        ...,
        description="Author or authors as printed on the cover",
        examples=["J. J. Wilson, Antonia Clare"],
    )

    isbn: str = Field(
        ...,
        description="ISBN as printed; not normalized",
        examples=["9781447976851"],
    )

    category: BookCategory = Field(..., description="Collection shelf")

    level: BookLevel = Field(..., description="Target proficiency level")

    status: BookStatus = Field(
        default=BookStatus.AVAILABLE,
        description="Current loan state",
    )

    checked_out_to: str | None = Field(
        default=None,
        alias="checkedOutTo",
        description="Display name of the borrower while checked out",
    )

    due_date: date | None = Field(
        default=None,
        alias="dueDate",
        description="Date the book is due back while checked out",
    )

    description: str = Field(
        default="",
        description="Free-text description",
        max_length=2000,
    )

    @model_validator(mode="after")
    def validate_loan_fields(self) -> "Book":
        """Borrower and due date are present exactly when the book is out."""
        has_loan_fields = self.checked_out_to is not None and self.due_date is not None
        has_any_loan_field = self.checked_out_to is not None or self.due_date is not None

        if self.status == BookStatus.CHECKED_OUT and not has_loan_fields:
            raise ValueError("A checked out book needs a borrower and a due date")
        if self.status == BookStatus.AVAILABLE and has_any_loan_field:
            raise ValueError("An available book cannot have a borrower or due date")
        return self

    @property
    def is_available(self) -> bool:
        """Check if the book can be checked out."""
        return self.status == BookStatus.AVAILABLE

    def lend_to(self, borrower_name: str, due_date: date) -> "Book":
        """Return a checked-out copy of this book.

        Raises:
            ValueError: If the book is already checked out
        """
        if not self.is_available:
            raise ValueError(f"'{self.title}' is already checked out")
        return self.model_copy(
            update={
                "status": BookStatus.CHECKED_OUT,
                "checked_out_to": borrower_name,
                "due_date": due_date,
            }
        )

    def mark_available(self) -> "Book":
        """Return an available copy of this book with the borrower fields cleared."""
        return self.model_copy(
            update={
                "status": BookStatus.AVAILABLE,
                "checked_out_to": None,
                "due_date": None,
            }
        )

    def matches(self, term: str) -> bool:
        """Search predicate: title or author (case-insensitive), or ISBN substring."""
        needle = term.lower()
        return needle in self.title.lower() or needle in self.author.lower() or term in self.isbn

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "elc-001",
                "title": "Speakout Intermediate Teacher's Book",
                "author": "J. J. Wilson, Antonia Clare",
                "isbn": "9781447976851",
                "category": "Teacher Resource",
                "level": "Intermediate",
                "status": "Checked Out",
                "checkedOutTo": "Sarah J. Mitchell",
                "dueDate": "2026-11-17",
                "description": "Teacher's notes, photocopiables and tests.",
            }
        },
    )
