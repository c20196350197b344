"""Internal message representation for agentloop.

This module provides framework-agnostic message types. Gateways and adapters
convert between these and provider formats (OpenAI, LangChain, etc.).
"""

from collections.abc import Iterable
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ToolCallRequest(BaseModel):
    """A tool invocation requested by the model.

    Attributes:
        id: Correlation id echoed back by the matching tool result.
        name: Name of the requested tool.
        arguments: Raw JSON arguments string. Empty or None means no arguments.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    arguments: str | None = None


class SystemMessage(BaseModel):
    """Instructions that govern the rest of the conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system"] = "system"
    content: str


class UserMessage(BaseModel):
    """A message from the caller."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user"] = "user"
    content: str


class AssistantMessage(BaseModel):
    """A model turn, including any tool calls it issued."""

    model_config = ConfigDict(frozen=True)

    role: Literal["assistant"] = "assistant"
    content: str = ""
    tool_calls: list[ToolCallRequest] = Field(default_factory=list)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


class ToolResultMessage(BaseModel):
    """The textual outcome of one tool call, correlated by call id."""

    model_config = ConfigDict(frozen=True)

    role: Literal["tool"] = "tool"
    tool_call_id: str
    tool_name: str
    content: str


Message = Annotated[
    SystemMessage | UserMessage | AssistantMessage | ToolResultMessage,
    Field(discriminator="role"),
]

_message_list = TypeAdapter(list[Message])


def parse_messages(data: object) -> list[Message]:
    """Validate raw dicts (or message objects) into typed messages."""
    return _message_list.validate_python(data)


def dump_messages(messages: list[Message]) -> str:
    """Serialize messages to a JSON array."""
    return _message_list.dump_json(messages).decode()


def load_messages(payload: str | bytes) -> list[Message]:
    """Deserialize a JSON array produced by dump_messages."""
    return _message_list.validate_json(payload)


def answered_call_ids(messages: Iterable[Message]) -> set[str]:
    """Ids of the tool calls that have a tool result among ``messages``."""
    return {m.tool_call_id for m in messages if isinstance(m, ToolResultMessage)}


class ChatResponse(BaseModel):
    """Result of a single Model Gateway call.

    Attributes:
        text: Assistant text. May be empty when only tool calls were issued.
        tool_calls: Tool invocations requested by the model, in emitted order.
        finish_reason: Provider termination hint ("stop", "tool_calls", ...).
    """

    text: str = ""
    tool_calls: list[ToolCallRequest] = Field(default_factory=list)
    finish_reason: str | None = None

    def to_message(self) -> AssistantMessage:
        return AssistantMessage(content=self.text, tool_calls=list(self.tool_calls))
