"""Generic document repository over an async SQLAlchemy session.

A *collection* is a mapped table and a *record shape* is a model class
mixing in :class:`~flag_store.base.DocumentMixin`. The repository knows
nothing about the records it stores beyond their columns and unique
constraints; uniqueness rules, authentication and field validation belong
to its callers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import UniqueConstraint, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from flag_store.base import DocumentBase, DocumentMixin
from flag_store.exceptions import DuplicateKeyError
from flag_store.time import utc_now

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=DocumentMixin)

IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class DocumentRepository(Generic[ModelT]):
    """Create/read/update primitives for one collection.

    Parameters
    ----------
    session
        The unit-of-work session. The repository flushes but never
        commits; the caller owns the transaction.
    model
        The record model bound to this repository. Its table is the
        collection.

    Examples
    --------
    >>> repo = DocumentRepository(session, UserModel)
    >>> user = await repo.create_and_return({"email": "jane@example.com", ...})
    >>> await repo.find_one({"email": "jane@example.com"}) is user
    True
    """

    def __init__(self, session: AsyncSession, model: type[ModelT]):
        if not issubclass(model, DocumentBase):
            msg = f"{model.__name__} is not a mapped record model"
            raise TypeError(msg)
        self._session = session
        self._model = model
        self._fields = frozenset(model.__table__.columns.keys())

    @property
    def collection_name(self) -> str:
        return self._model.__tablename__

    async def create_and_return(self, candidate: Mapping[str, Any]) -> ModelT:
        """Insert a record stamped with ``created_at`` and return it.

        The candidate mapping is copied, never mutated. Any ``id`` in it is
        discarded since identifiers are assigned on insert. The returned
        instance is the authoritative persisted form.

        Raises
        ------
        DuplicateKeyError
            If the insert violates a unique constraint. The session is
            rolled back, discarding every uncommitted write made through it.
        ValueError
            If the candidate names a field the collection does not have
        """
        values = dict(candidate)
        values.pop("id", None)
        self._check_fields(values)
        values["created_at"] = utc_now()

        record = self._model(**values)
        self._session.add(record)
        await self._flush()

        logger.debug("Created record %s in %s", record.id, self.collection_name)
        return record

    async def find_one(self, filters: Mapping[str, Any]) -> ModelT | None:
        """Return the first record whose fields equal ``filters``, or None.

        No ordering is defined between several matches.
        """
        self._check_fields(filters)
        stmt = select(self._model).filter_by(**filters).limit(1)
        result = await self._session.execute(stmt)
        return result.scalars().first()

    async def update_and_return_one(
        self,
        filters: Mapping[str, Any],
        patch: Mapping[str, Any],
    ) -> ModelT | None:
        """Apply ``patch`` to the first match and return its updated state.

        Returns None when no record matches.

        Raises
        ------
        DuplicateKeyError
            If the update violates a unique constraint. The session is
            rolled back, discarding every uncommitted write made through it.
        ValueError
            If the patch touches ``id``/``created_at`` or an unknown field
        """
        immutable = IMMUTABLE_FIELDS.intersection(patch)
        if immutable:
            msg = f"Cannot patch immutable field(s): {', '.join(sorted(immutable))}"
            raise ValueError(msg)
        self._check_fields(patch)

        record = await self.find_one(filters)
        if record is None:
            return None

        for field, value in patch.items():
            setattr(record, field, value)
        await self._flush()

        logger.debug("Updated record %s in %s", record.id, self.collection_name)
        return record

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except IntegrityError as exc:
            # Keep session usable after a failed flush
            await self._session.rollback()

            fields = self._violated_unique_fields(str(getattr(exc, "orig", exc)))
            if fields is None:
                raise
            raise DuplicateKeyError(self.collection_name, fields) from exc

    def _violated_unique_fields(self, message: str) -> tuple[str, ...] | None:
        """Identify the unique constraint named in a driver error message.

        Supports SQLite ("UNIQUE constraint failed: users.email") and
        PostgreSQL ('violates unique constraint "uq_users_email"' followed
        by 'Key (email)=...'). Returns None when the error is not a unique
        violation at all.
        """
        table = self.collection_name
        lowered = message.lower()
        if "unique" not in lowered and "duplicate key" not in lowered:
            return None

        for constraint in self._model.__table__.constraints:
            if not isinstance(constraint, UniqueConstraint):
                continue
            columns = tuple(column.name for column in constraint.columns)
            if constraint.name and f'"{constraint.name}"' in message:
                return columns
            if ", ".join(f"{table}.{column}" for column in columns) in message:
                return columns
            if f"Key ({', '.join(columns)})=" in message:
                return columns

        return ()

    def _check_fields(self, values: Mapping[str, Any]) -> None:
        unknown = set(values) - self._fields
        if unknown:
            msg = (
                f"Unknown field(s) for {self.collection_name}: "
                f"{', '.join(sorted(unknown))}"
            )
            raise ValueError(msg)
