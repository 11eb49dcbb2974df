"""Per-event run locks.

Generation and dispatch runs on the same event are serialized so the daily
trigger, per-event jobs and manual runs never build their pending sets from
the same state. Single process only.
"""

import asyncio
from uuid import UUID
from weakref import WeakValueDictionary


class EventLocks:
    def __init__(self) -> None:
        self._locks: WeakValueDictionary[UUID, asyncio.Lock] = WeakValueDictionary()

    def for_event(self, event_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(event_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[event_id] = lock
        return lock


event_locks = EventLocks()
