"""
Persistence media - durable key -> string stores.

Every medium exposes the same three awaitable operations:

    value = await medium.get_item(key)      # None when never written
    await medium.set_item(key, value)
    await medium.remove_item(key)

Read failures raise StorageUnavailableError, write failures raise
StorageWriteFailedError. A failed write never leaves a partial value behind.
"""

import abc
import asyncio
import threading
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from EquipTrack.database.crud import get_value, remove_item, set_value
from EquipTrack.database.session import get_db_context
from EquipTrack.exceptions import StorageUnavailableError, StorageWriteFailedError
from EquipTrack.logging_config import get_logger

logger = get_logger(__name__)


class PersistenceMedium(abc.ABC):
    """Interface shared by all key/value media."""

    @abc.abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        ...

    @abc.abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        ...

    @abc.abstractmethod
    async def remove_item(self, key: str) -> None:
        ...


class SqlAlchemyMedium(PersistenceMedium):
    """
    Key/value medium backed by the ``storage_item`` table.

    Sessions are blocking, so every call runs in a worker thread through
    ``asyncio.to_thread`` and the event loop keeps running meanwhile. One
    session at a time: in-memory databases share a single connection.
    """

    def __init__(self, session_factory: sessionmaker = None):
        self._session_factory = session_factory
        self._session_lock = threading.Lock()

    async def get_item(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._get, key)
        except SQLAlchemyError as e:
            logger.error(f"Error reading '{key}': {e}")
            raise StorageUnavailableError(f"Could not read '{key}' from storage") from e

    async def set_item(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._set, key, value)
        except SQLAlchemyError as e:
            logger.error(f"Error writing '{key}': {e}")
            raise StorageWriteFailedError(f"Could not write '{key}' to storage") from e

    async def remove_item(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove, key)
        except SQLAlchemyError as e:
            logger.error(f"Error removing '{key}': {e}")
            raise StorageWriteFailedError(f"Could not remove '{key}' from storage") from e

    def _get(self, key):
        with self._session_lock, get_db_context(self._session_factory) as db:
            return get_value(db, key)

    def _set(self, key, value):
        with self._session_lock, get_db_context(self._session_factory) as db:
            set_value(db, key, value)
            db.commit()

    def _remove(self, key):
        with self._session_lock, get_db_context(self._session_factory) as db:
            if remove_item(db, key):
                db.commit()


class InMemoryMedium(PersistenceMedium):
    """Non-durable medium for tests and throwaway sessions."""

    def __init__(self, initial: Dict[str, str] = None):
        self._items: Dict[str, str] = dict(initial or {})

    @property
    def items(self) -> Dict[str, str]:
        return dict(self._items)

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageWriteFailedError(f"Value for '{key}' must be a string")
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
