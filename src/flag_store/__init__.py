"""Flag Store - generic document persistence.

Provides a repository parameterised by record model with create/read/update
primitives and automatic creation timestamps, plus the engine, session and
schema helpers used to reach the database.
"""

from flag_store.base import DocumentBase, DocumentMixin
from flag_store.exceptions import DuplicateKeyError, StoreError
from flag_store.repository import DocumentRepository

__all__ = [
    "DocumentBase",
    "DocumentMixin",
    "DocumentRepository",
    "DuplicateKeyError",
    "StoreError",
]
