import asyncio

import pytest

from agentloop.memory.locks import SessionLocks


class TestSessionLocks:
    """Test SessionLocks."""

    @pytest.mark.asyncio
    async def test_same_session_shares_lock(self) -> None:
        """A session id maps to one lock while it is in use."""
        locks = SessionLocks()

        async with locks.lock("s1"):
            assert locks.lock("s1").locked()
            assert not locks.lock("s2").locked()
            assert "s1" in locks

    @pytest.mark.asyncio
    async def test_unused_locks_are_dropped(self) -> None:
        """Entries go away once nothing holds the lock."""
        locks = SessionLocks()

        async with locks.lock("s1"):
            assert len(locks) == 1

        assert len(locks) == 0
        assert "s1" not in locks

    @pytest.mark.asyncio
    async def test_waiters_are_serialized(self) -> None:
        """Tasks on one session run their critical sections in turn."""
        locks = SessionLocks()
        order: list[str] = []

        async def worker(name: str) -> None:
            async with locks.lock("s1"):
                order.append(f"{name} start")
                await asyncio.sleep(0)
                order.append(f"{name} end")

        await asyncio.gather(worker("a"), worker("b"))

        assert order == ["a start", "a end", "b start", "b end"]
