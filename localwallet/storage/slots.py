"""
Durable storage slots.

A slot is one named location holding one serialized document. The card
store reads the whole document, changes it in memory and writes the
whole document back; slots never see individual records.
"""

import logging
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from localwallet.models.db import StorageSlotDB

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the backing store cannot be read or written."""

    pass


class StorageSlot(Protocol):
    """A single named document location."""

    key: str

    def read(self) -> str | None:
        """Return the stored document, or None if the slot is empty."""
        ...

    def write(self, value: str) -> None:
        """Replace the stored document."""
        ...

    def clear(self) -> None:
        """Remove the stored document."""
        ...


class InMemoryStorageSlot:
    """
    Slot kept in process memory.

    Used by tests and by callers that don't need persistence across runs.
    """

    def __init__(self, key: str, value: str | None = None) -> None:
        self.key = key
        self._value = value

    def read(self) -> str | None:
        return self._value

    def write(self, value: str) -> None:
        self._value = value

    def clear(self) -> None:
        self._value = None


class SqlStorageSlot:
    """Slot stored as one row of the storage_slots table."""

    def __init__(self, key: str, session_factory: sessionmaker[Session]) -> None:
        self.key = key
        self._session_factory = session_factory

    def read(self) -> str | None:
        """
        Return the stored document, or None if no row exists.

        Raises:
            StorageError: If the database cannot be queried
        """
        try:
            with self._session_factory() as session:
                result = session.execute(
                    select(StorageSlotDB.value).where(StorageSlotDB.key == self.key)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read slot {self.key}: {e}") from e

    def write(self, value: str) -> None:
        """
        Insert or replace the stored document in a single transaction.

        Raises:
            StorageError: If the transaction fails (nothing is changed)
        """
        try:
            with self._session_factory.begin() as session:
                row = session.get(StorageSlotDB, self.key)
                if row is None:
                    session.add(StorageSlotDB(key=self.key, value=value))
                else:
                    row.value = value
        except SQLAlchemyError as e:
            logger.error("Failed to write slot %s: %s", self.key, e)
            raise StorageError(f"Failed to write slot {self.key}: {e}") from e

    def clear(self) -> None:
        """
        Delete the stored document.

        Raises:
            StorageError: If the transaction fails
        """
        try:
            with self._session_factory.begin() as session:
                session.execute(delete(StorageSlotDB).where(StorageSlotDB.key == self.key))
        except SQLAlchemyError as e:
            logger.error("Failed to clear slot %s: %s", self.key, e)
            raise StorageError(f"Failed to clear slot {self.key}: {e}") from e
