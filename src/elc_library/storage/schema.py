"""
SQLAlchemy schema for the ELC Library storage area.

The storage area is a plain key-value table. Each row is one named record
(the catalog, the loan ledger or the session user) stored as JSON text, so
the table mirrors browser local storage rather than the domain model. All
domain rules live in the state manager.
"""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class StoredRecord(Base):
    """One named record in the storage area."""

    __tablename__ = "storage_records"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)

    # Context that performed the last write
    writer_id = Column(String(64), nullable=False)

    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<StoredRecord(key='{self.key}', writer='{self.writer_id}')>"
