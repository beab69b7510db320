"""SQLAlchemy declarative base and the document mixin shared by all records."""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import DateTime, TypeDecorator, Uuid, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime that always loads as UTC.

    SQLite keeps no offset, so naive values read back are tagged as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class DocumentBase(DeclarativeBase):
    """Base class for all persisted record models."""


class DocumentMixin:
    """Identifier and creation stamp carried by every record.

    ``id`` is assigned on insert. ``created_at`` is stamped by the
    repository and has no column default so that a record can never be
    created without going through it.
    """

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )

    def as_document(self) -> dict[str, Any]:
        """Return the record as a plain mapping of column name to value."""
        mapper = inspect(self).mapper
        return {attr.key: getattr(self, attr.key) for attr in mapper.column_attrs}
