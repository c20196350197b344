"""Kùzu embedded graph database implementation of MemoryStore."""

import asyncio
import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

import kuzu

from agentloop.ledger import MessageLedger
from agentloop.memory.locks import SessionLocks
from agentloop.memory.window import apply_window
from agentloop.messages import Message, parse_messages

logger = logging.getLogger(__name__)


def _result_to_dicts(result: kuzu.QueryResult) -> list[dict[str, Any]]:
    """Convert a Kùzu QueryResult to a list of dicts keyed by column name."""
    columns = result.get_column_names()
    rows = []
    while result.has_next():
        values = result.get_next()
        rows.append(dict(zip(columns, values)))
    return rows


def _single(result: kuzu.QueryResult) -> dict[str, Any] | None:
    """Get a single result row as a dict, or None."""
    columns = result.get_column_names()
    if result.has_next():
        values = result.get_next()
        return dict(zip(columns, values))
    return None


class KuzuMemoryStore:
    """Kùzu embedded graph database implementation of MemoryStore.

    Each session is a ``Session`` node linked by ``CONTAINS`` edges to its
    ``ChatMessage`` nodes, which hold the serialized message and its position
    (``seq``) in the ledger. Saving replaces the session's messages.

    All operations are synchronous in Kùzu and wrapped with asyncio.to_thread().
    A per-session lock serializes writers within this process.

    Usage:
        ```python
        async with KuzuMemoryStore(db_path=Path("~/.agentloop/memory")) as store:
            ledger = await store.load("session-1")
        ```
    """

    def __init__(self, db_path: Path, max_messages: int | None = None) -> None:
        self._db_path = db_path
        self._max_messages = max_messages
        self._db: kuzu.Database | None = None
        self._conn: kuzu.Connection | None = None
        self._locks = SessionLocks()

    async def __aenter__(self) -> "KuzuMemoryStore":
        await self.connect()
        await self.initialize_schema()
        return self

    async def __aexit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        await self.close()

    async def connect(self) -> None:
        """Connect to the Kùzu database."""
        self._db_path.mkdir(parents=True, exist_ok=True)
        # Kùzu needs a non-existing subpath or existing DB directory
        graph_dir = self._db_path / "kuzu_db"

        def _connect() -> tuple[kuzu.Database, kuzu.Connection]:
            db = kuzu.Database(str(graph_dir))
            conn = kuzu.Connection(db)
            return db, conn

        self._db, self._conn = await asyncio.to_thread(_connect)

    async def close(self) -> None:
        """Close the connection."""
        self._conn = None
        self._db = None

    async def initialize_schema(self) -> None:
        """Create node and relationship tables."""
        if not self._conn:
            raise RuntimeError("Not connected")

        def _init_schema(conn: kuzu.Connection) -> None:
            conn.execute("""
                CREATE NODE TABLE IF NOT EXISTS Session(
                    id STRING,
                    updated_at STRING,
                    PRIMARY KEY(id)
                )
            """)
            conn.execute("""
                CREATE NODE TABLE IF NOT EXISTS ChatMessage(
                    id STRING,
                    session_id STRING,
                    seq INT64,
                    role STRING,
                    payload STRING,
                    created_at STRING,
                    PRIMARY KEY(id)
                )
            """)
            conn.execute("""
                CREATE REL TABLE IF NOT EXISTS CONTAINS(
                    FROM Session TO ChatMessage
                )
            """)

        await asyncio.to_thread(_init_schema, self._conn)

    async def load(self, session_id: str) -> MessageLedger:
        """Load a session's ledger in stored order."""
        if not self._conn:
            raise RuntimeError("Not connected")

        def _load(conn: kuzu.Connection) -> list[dict[str, Any]]:
            result = conn.execute(
                "MATCH (s:Session)-[:CONTAINS]->(m:ChatMessage) "
                "WHERE s.id = $session_id "
                "RETURN m.payload AS payload ORDER BY m.seq ASC",
                {"session_id": session_id},
            )
            return _result_to_dicts(result)

        async with self._locks.lock(session_id):
            rows = await asyncio.to_thread(_load, self._conn)

        messages = parse_messages([json.loads(row["payload"]) for row in rows])
        logger.debug("load session=%s messages=%d", session_id, len(messages))
        return MessageLedger(messages)

    async def save(self, session_id: str, ledger: MessageLedger) -> None:
        """Replace a session's stored messages with the ledger's contents."""
        if not self._conn:
            raise RuntimeError("Not connected")

        messages: list[Message] = apply_window(list(ledger.snapshot()), self._max_messages)
        now = datetime.now(UTC).isoformat()

        def _save(conn: kuzu.Connection) -> None:
            existing = _single(
                conn.execute(
                    "MATCH (s:Session) WHERE s.id = $session_id RETURN s.id",
                    {"session_id": session_id},
                )
            )
            if existing:
                conn.execute(
                    "MATCH (s:Session) WHERE s.id = $session_id SET s.updated_at = $now",
                    {"session_id": session_id, "now": now},
                )
                conn.execute(
                    "MATCH (m:ChatMessage) WHERE m.session_id = $session_id DETACH DELETE m",
                    {"session_id": session_id},
                )
            else:
                conn.execute(
                    "CREATE (s:Session {id: $session_id, updated_at: $now})",
                    {"session_id": session_id, "now": now},
                )

            for seq, message in enumerate(messages):
                message_id = str(uuid4())
                conn.execute(
                    """
                    CREATE (m:ChatMessage {
                        id: $id,
                        session_id: $session_id,
                        seq: $seq,
                        role: $role,
                        payload: $payload,
                        created_at: $created_at
                    })
                    """,
                    {
                        "id": message_id,
                        "session_id": session_id,
                        "seq": seq,
                        "role": message.role,
                        "payload": message.model_dump_json(),
                        "created_at": now,
                    },
                )
                conn.execute(
                    "MATCH (s:Session), (m:ChatMessage) "
                    "WHERE s.id = $session_id AND m.id = $id "
                    "CREATE (s)-[:CONTAINS]->(m)",
                    {"session_id": session_id, "id": message_id},
                )

        async with self._locks.lock(session_id):
            await asyncio.to_thread(_save, self._conn)
        logger.debug("save session=%s messages=%d", session_id, len(messages))

    async def clear(self, session_id: str) -> None:
        """Delete a session and all of its messages."""
        if not self._conn:
            raise RuntimeError("Not connected")

        def _clear(conn: kuzu.Connection) -> None:
            conn.execute(
                "MATCH (m:ChatMessage) WHERE m.session_id = $session_id DETACH DELETE m",
                {"session_id": session_id},
            )
            conn.execute(
                "MATCH (s:Session) WHERE s.id = $session_id DETACH DELETE s",
                {"session_id": session_id},
            )

        async with self._locks.lock(session_id):
            await asyncio.to_thread(_clear, self._conn)

    async def sessions(self) -> list[str]:
        """Ids of all stored sessions."""
        if not self._conn:
            raise RuntimeError("Not connected")

        def _sessions(conn: kuzu.Connection) -> list[dict[str, Any]]:
            return _result_to_dicts(
                conn.execute("MATCH (s:Session) RETURN s.id AS id ORDER BY s.id")
            )

        rows = await asyncio.to_thread(_sessions, self._conn)
        return [row["id"] for row in rows]
