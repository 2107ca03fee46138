import asyncio
from typing import Optional

from .lock import FifoLock
from .log import get_logger
from .merge import (
    effective_items,
    effective_settings,
    merge_global_settings,
    reconcile_items,
    settings_overlay,
)
from .models import DataView, DataWrite, StoreData, UserData, default_store
from .storage import Corrupt, JsonFileStore, Loaded, Missing

logger = get_logger(__name__)


class LinkStore:
    """Read-merge and write-diff over a :class:`JsonFileStore`.

    Writes are serialized through *lock*; reads never wait for it and may
    observe a write in progress.
    """

    def __init__(
        self,
        storage: JsonFileStore,
        lock: Optional[FifoLock] = None,
        admin_user: str = "admin",
    ):
        self.storage = storage
        self.lock = lock or FifoLock()
        self.admin_user = admin_user

    def load(self) -> StoreData:
        result = self.storage.load()
        if isinstance(result, Missing):
            data = default_store(self.admin_user)
            if self.storage.create(data):
                logger.info("Created store with defaults at %s", self.storage.path)
                return data
            # a writer got there first
            result = self.storage.load()
            if isinstance(result, Missing):
                return data
        if isinstance(result, Loaded):
            return result.data
        # left on disk untouched so it can be repaired by hand
        logger.error("Store %s is unreadable, serving defaults: %s", self.storage.path, result.error)
        return default_store(self.admin_user)

    def view(self, user: str) -> DataView:
        data = self.load()
        record = data.users.get(user) or UserData()
        return DataView(
            settings=effective_settings(data.global_settings, record.settings),
            items=effective_items(data.common.items, record.items),
            global_settings=data.global_settings,
        )

    def apply(self, user: str, payload: DataWrite) -> StoreData:
        """Read, modify and write the whole document. Caller must hold the lock."""
        result = self.storage.load()
        if isinstance(result, Loaded):
            data = result.data
        else:
            if isinstance(result, Corrupt) and result.raw.strip():
                self.storage.backup_corrupt(result.raw)
            data = default_store(self.admin_user)

        record = data.users.setdefault(user, UserData())
        changes = payload.settings.changes() if payload.settings is not None else None

        if user == self.admin_user:
            if changes is not None:
                data.global_settings = merge_global_settings(data.global_settings, changes)
            if payload.items is not None:
                data.common.items = list(payload.items)
                record.items = []
        else:
            if changes is not None:
                record.settings = settings_overlay(data.global_settings, record.settings, changes)
            if payload.items is not None:
                record.items = reconcile_items(data.common.items, payload.items)

        self.storage.save(data)
        logger.info(
            "Saved store for %s (items=%s, settings=%s)",
            user,
            payload.items is not None,
            changes is not None,
        )
        return data

    async def read(self, user: str) -> DataView:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.view, user)

    async def write(self, user: str, payload: DataWrite) -> StoreData:
        async with self.lock:
            loop = asyncio.get_running_loop()
            fut = loop.run_in_executor(None, self.apply, user, payload)
            try:
                return await asyncio.shield(fut)
            except asyncio.CancelledError:
                # the thread cannot be stopped; keep the lock until it is done
                while not fut.done():
                    try:
                        await asyncio.wait({fut})
                    except asyncio.CancelledError:
                        continue
                if not fut.cancelled() and fut.exception() is not None:
                    logger.error("Write for %s failed after its caller went away: %s", user, fut.exception())
                raise
