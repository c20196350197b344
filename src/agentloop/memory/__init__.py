from agentloop.memory.in_memory import InMemoryMemoryStore
from agentloop.memory.kuzu_store import KuzuMemoryStore
from agentloop.memory.locks import SessionLocks
from agentloop.memory.protocol import MemoryStore
from agentloop.memory.window import apply_window

__all__ = [
    "InMemoryMemoryStore",
    "KuzuMemoryStore",
    "MemoryStore",
    "SessionLocks",
    "apply_window",
]
