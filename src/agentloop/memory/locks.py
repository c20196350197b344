import asyncio
import weakref


class SessionLocks:
    """One ``asyncio.Lock`` per session id.

    Entries are weakly held, so a session's lock disappears once no task holds
    or waits on it and the map does not grow with every session ever seen.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._locks
