"""Inbound conversation requests and payload coercion."""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from agentloop.errors import InvalidPayloadError
from agentloop.ledger import MessageLedger
from agentloop.messages import Message, SystemMessage, UserMessage, parse_messages


class ConversationRequest(BaseModel):
    """The body submitted by a caller.

    Either a single user string (plus optional system text), or a pre-built
    ordered list of messages. When ``messages`` is non-empty it wins over the
    string fields.

    Attributes:
        user_message: The user's text.
        system_message: Instructions placed before the user message.
        memory_id: Session key for memory-backed conversations.
        tags: Comma-separated tool selector overriding the configured one.
        messages: Pre-built conversation.
    """

    user_message: str | None = None
    system_message: str | None = None
    memory_id: str | None = None
    tags: str | None = None
    messages: list[Message] = Field(default_factory=list)

    @field_validator("user_message", "system_message")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @classmethod
    def from_text(
        cls,
        user_message: str,
        system_message: str | None = None,
        **kwargs: Any,
    ) -> "ConversationRequest":
        return cls(user_message=user_message, system_message=system_message, **kwargs)

    @classmethod
    def from_messages(cls, messages: Sequence[Message], **kwargs: Any) -> "ConversationRequest":
        return cls(messages=list(messages), **kwargs)

    @property
    def has_messages(self) -> bool:
        return bool(self.messages) or self.user_message is not None

    def conversation(self) -> list[Message]:
        """Ordered messages this request contributes to the ledger."""
        if self.messages:
            return list(self.messages)
        built: list[Message] = []
        if self.system_message:
            built.append(SystemMessage(content=self.system_message))
        if self.user_message:
            built.append(UserMessage(content=self.user_message))
        return built

    def to_ledger(self) -> MessageLedger:
        return MessageLedger(self.conversation())


def _from_langchain(items: list[Any]) -> list[Any]:
    from langchain_core.messages import BaseMessage

    if not any(isinstance(item, BaseMessage) for item in items):
        return items

    from agentloop.adapters.langchain import LangChainAdapter

    adapter = LangChainAdapter()
    return [
        adapter.convert_single(item) if isinstance(item, BaseMessage) else item
        for item in items
    ]


def coerce_request(payload: object, **overrides: Any) -> ConversationRequest:
    """Turn an inbound payload into a ConversationRequest.

    Accepts a bare string, a ConversationRequest, a mapping that validates as
    one, or a sequence of messages. LangChain messages in a sequence are
    converted with LangChainAdapter. ``overrides`` fill fields the payload left
    unset (e.g. a system message supplied alongside a bare string).

    Raises:
        InvalidPayloadError: The payload has an unsupported type, fails
            validation, or contains no messages.
    """
    overrides = {k: v for k, v in overrides.items() if v is not None}

    if isinstance(payload, str):
        request = ConversationRequest(user_message=payload, **overrides)
    elif isinstance(payload, ConversationRequest):
        missing = {k: v for k, v in overrides.items() if getattr(payload, k) is None}
        request = payload.model_copy(update=missing) if missing else payload
    elif isinstance(payload, Mapping):
        try:
            request = ConversationRequest.model_validate({**overrides, **payload})
        except ValidationError as e:
            raise InvalidPayloadError(payload, str(e)) from e
    elif isinstance(payload, Sequence) and not isinstance(payload, bytes | bytearray):
        try:
            messages = parse_messages(_from_langchain(list(payload)))
        except ValidationError as e:
            raise InvalidPayloadError(payload, str(e)) from e
        request = ConversationRequest(messages=messages, **overrides)
    else:
        raise InvalidPayloadError(payload)

    if not request.has_messages:
        raise InvalidPayloadError(payload, "request contains no messages")
    return request
