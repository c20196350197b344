import logging

from agentloop.ledger import MessageLedger
from agentloop.memory.locks import SessionLocks
from agentloop.memory.window import apply_window
from agentloop.messages import Message

logger = logging.getLogger(__name__)


class InMemoryMemoryStore:
    """Process-local MemoryStore.

    Each session has its own lock, so concurrent operations on one session
    are serialized while different sessions proceed independently. A lock is
    only held for a single load, save or clear; Orchestrator serializes whole
    requests on a session.

    Args:
        max_messages: Optional window size applied when saving.
    """

    def __init__(self, max_messages: int | None = None) -> None:
        if max_messages is not None and max_messages < 1:
            raise ValueError("max_messages must be at least 1")
        self._max_messages = max_messages
        self._sessions: dict[str, list[Message]] = {}
        self._locks = SessionLocks()

    async def load(self, session_id: str) -> MessageLedger:
        async with self._locks.lock(session_id):
            return MessageLedger(self._sessions.get(session_id, []))

    async def save(self, session_id: str, ledger: MessageLedger) -> None:
        messages = apply_window(list(ledger.snapshot()), self._max_messages)
        async with self._locks.lock(session_id):
            self._sessions[session_id] = messages
        logger.debug("save session=%s messages=%d", session_id, len(messages))

    async def clear(self, session_id: str) -> None:
        async with self._locks.lock(session_id):
            self._sessions.pop(session_id, None)

    def sessions(self) -> list[str]:
        return list(self._sessions)
