"""
Circulation models for the ELC Library.

A CheckoutRecord is one line of the loan ledger: who took which book, when,
and when it is due back. Records are created by a checkout, never deleted,
and change only once, from ``Active`` to ``Returned``.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LoanStatus(str, Enum):
    """Status of a loan record."""

    ACTIVE = "Active"
    RETURNED = "Returned"


class CheckoutRecord(BaseModel):
    """
    Represents a loan of one book to one teacher.

    Borrower fields keep their stored names (``teacherId``,
    ``teacherName``) as aliases.
    """

    id: str = Field(
        ...,
        description="Unique identifier generated at checkout time",
        min_length=1,
        examples=["loan_3f9a1c2b7d4e"],
    )

    book_id: str = Field(
        ...,
        alias="bookId",
        description="Id of the borrowed book",
        min_length=1,
    )

    borrower_id: str = Field(
        ...,
        alias="teacherId",
        description="Staff id of the borrowing teacher",
        min_length=1,
        examples=["T-12345"],
    )

    borrower_name: str = Field(
        ...,
        alias="teacherName",
        description="Display name of the borrowing teacher",
        min_length=1,
        examples=["Sarah J. Mitchell"],
    )

    checkout_date: date = Field(
        ...,
        alias="checkoutDate",
        description="Calendar date of the checkout",
    )

    due_date: date = Field(
        ...,
        alias="dueDate",
        description="Calendar date the book is due back",
    )

    status: LoanStatus = Field(
        default=LoanStatus.ACTIVE,
        description="Whether the book is still out",
    )

    @model_validator(mode="after")
    def validate_dates(self) -> "CheckoutRecord":
        """A loan cannot be due before it started."""
        if self.due_date < self.checkout_date:
            raise ValueError("Due date cannot be before checkout date")
        return self

    @property
    def is_active(self) -> bool:
        """Check if the book is still out on this loan."""
        return self.status == LoanStatus.ACTIVE

    @property
    def loan_period_days(self) -> int:
        """Length of the loan in days."""
        return (self.due_date - self.checkout_date).days

    def is_overdue(self, today: date | None = None) -> bool:
        """Check if an active loan is past its due date."""
        if not self.is_active:
            return False
        return self.due_date < (today or date.today())

    def days_overdue(self, today: date | None = None) -> int:
        """Number of days an active loan is past its due date."""
        today = today or date.today()
        if not self.is_overdue(today):
            return 0
        return (today - self.due_date).days

    def mark_returned(self) -> "CheckoutRecord":
        """Return the closed copy of this record.

        Raises:
            ValueError: If the record was already returned
        """
        if not self.is_active:
            raise ValueError(f"Loan {self.id} was already returned")
        return self.model_copy(update={"status": LoanStatus.RETURNED})

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "loan_3f9a1c2b7d4e",
                "bookId": "elc-001",
                "teacherId": "T-12345",
                "teacherName": "Sarah J. Mitchell",
                "checkoutDate": "2026-10-18",
                "dueDate": "2026-11-17",
                "status": "Active",
            }
        },
    )


class LoanStats(BaseModel):
    """Headline numbers of the loan dashboard."""

    total_active: int = Field(..., description="Loans currently out", ge=0)
    overdue: int = Field(..., description="Active loans past their due date", ge=0)
    total_returns: int = Field(..., description="Loans returned to the ELC", ge=0)
