from typing import Protocol

from agentloop.ledger import MessageLedger


class MemoryStore(Protocol):
    """Protocol for session-scoped conversation persistence.

    The orchestrator treats a store as an opaque key -> ledger mapping. Any
    eviction, windowing or TTL policy, and any locking needed for concurrent
    requests on the same session, belongs to the implementation.
    """

    async def load(self, session_id: str) -> MessageLedger:
        """Load the ledger for a session. Unknown sessions yield an empty ledger."""
        ...

    async def save(self, session_id: str, ledger: MessageLedger) -> None:
        """Persist the ledger for a session, replacing what was stored."""
        ...

    async def clear(self, session_id: str) -> None:
        """Forget everything stored for a session."""
        ...
