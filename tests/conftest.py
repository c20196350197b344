from collections.abc import Sequence
from pathlib import Path
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from agentloop.config import AgentLoopConfig
from agentloop.messages import ChatResponse, Message, ToolCallRequest
from agentloop.tools.context import ExecutionContext
from agentloop.tools.source import TaggedToolSource
from agentloop.tools.specification import ToolSpecification


class ScriptedGateway:
    """Fake ModelGateway that replays canned responses.

    Each call records the messages and tools it received. Once the script
    runs out, the last response is repeated. An exception in the script is
    raised instead of returned.
    """

    def __init__(self, responses: Sequence[ChatResponse | Exception]) -> None:
        if not responses:
            raise ValueError("ScriptedGateway needs at least one response")
        self._responses = list(responses)
        self.calls: list[tuple[list[Message], list[ToolSpecification] | None]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def chat(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSpecification] | None = None,
    ) -> ChatResponse:
        self.calls.append((list(messages), list(tools) if tools is not None else None))
        index = min(len(self.calls), len(self._responses)) - 1
        response = self._responses[index]
        if isinstance(response, Exception):
            raise response
        return response


def tool_call(name: str, arguments: str | None = "{}", call_id: str | None = None) -> ToolCallRequest:
    """Build a tool call request with a unique id."""
    return ToolCallRequest(id=call_id or f"call_{uuid4().hex[:8]}", name=name, arguments=arguments)


def tool_response(*calls: ToolCallRequest, text: str = "") -> ChatResponse:
    """A model turn that requests tools."""
    return ChatResponse(text=text, tool_calls=list(calls), finish_reason="tool_calls")


def text_response(text: str) -> ChatResponse:
    """A model turn with a final answer."""
    return ChatResponse(text=text, finish_reason="stop")


@pytest.fixture
def weather_calls() -> list[dict]:
    """Records the context each weather tool invocation saw."""
    return []


@pytest.fixture
def weather_source(weather_calls: list[dict]) -> TaggedToolSource:
    """Tool source with a weather tool and a few others under separate tags."""
    source = TaggedToolSource()

    @source.tool("weather", description="Current weather for a city", city="string")
    def get_weather(ctx: ExecutionContext) -> str:
        weather_calls.append(dict(ctx))
        return f"Sunny in {ctx['city']}"

    @source.tool("weather", description="Forecast for the next days", city="string", days="integer")
    async def get_forecast(ctx: ExecutionContext) -> dict:
        return {"city": ctx["city"], "days": ctx["days"], "forecast": "sunny"}

    @source.tool("users", description="Look up a user")
    def get_user(ctx: ExecutionContext) -> None:
        return None

    @source.tool("broken", description="Always fails")
    def explode(ctx: ExecutionContext) -> str:
        raise RuntimeError("boom")

    return source


@pytest.fixture
def config() -> AgentLoopConfig:
    """Default config, isolated from any AGENTLOOP_ environment."""
    return AgentLoopConfig(_env_file=None)


@pytest.fixture
def memory_path(tmp_path: Path) -> Path:
    """Provide a temporary path for the Kùzu memory store."""
    return tmp_path / "memory"


@pytest.fixture
def sample_session_id() -> str:
    """Provide a sample session ID."""
    return f"session-{uuid4()}"


@pytest.fixture
def mock_memory_store(mocker) -> AsyncMock:
    """Provide a mock memory store."""
    from agentloop.ledger import MessageLedger

    mock = AsyncMock()
    mock.load = AsyncMock(return_value=MessageLedger())
    mock.save = AsyncMock()
    mock.clear = AsyncMock()
    return mock
