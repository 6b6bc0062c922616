"""Per-name mutual exclusion for cache population."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING
from weakref import WeakValueDictionary

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


class NameLocks:
    """Serialise every resolution of one name, whatever its type or category.

    The partition a record lands in follows its resolved type, so it is not known
    until the search returns; keying on the name alone covers all five. Locks
    only live while someone holds or waits for them. The guarantee is per
    process; several server processes sharing one store can still race.
    """

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    @staticmethod
    def key(name: str) -> str:
        return name.strip().casefold()

    @asynccontextmanager
    async def hold(self, name: str) -> AsyncIterator[None]:
        key = self.key(name)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)
