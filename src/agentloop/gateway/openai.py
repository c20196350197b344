import logging
from collections.abc import Sequence
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from agentloop.errors import ModelTransportError
from agentloop.messages import (
    AssistantMessage,
    ChatResponse,
    Message,
    SystemMessage,
    ToolCallRequest,
    ToolResultMessage,
    UserMessage,
    answered_call_ids,
)
from agentloop.tools.specification import ToolSpecification

logger = logging.getLogger(__name__)


def to_openai_message(
    message: Message, answered: set[str] | None = None
) -> dict[str, Any]:
    """Convert an internal message to a Chat Completions message dict.

    When ``answered`` is given, assistant tool calls without a matching tool
    result (e.g. skipped unknown tools) are left out, since the API rejects
    unanswered calls.
    """
    if isinstance(message, SystemMessage | UserMessage):
        return {"role": message.role, "content": message.content}
    if isinstance(message, AssistantMessage):
        calls = [
            tc for tc in message.tool_calls if answered is None or tc.id in answered
        ]
        # content may only be null alongside tool_calls
        payload: dict[str, Any] = {"role": "assistant", "content": message.content}
        if calls:
            payload["content"] = message.content or None
            payload["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.name, "arguments": tc.arguments or "{}"},
                }
                for tc in calls
            ]
        return payload
    if isinstance(message, ToolResultMessage):
        return {
            "role": "tool",
            "tool_call_id": message.tool_call_id,
            "content": message.content,
        }
    raise TypeError(f"Unknown message type: {type(message)}")


class OpenAIChatGateway:
    """OpenAI Chat Completions implementation of ModelGateway."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        base_url: str | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._model = model
        self._temperature = temperature
        self._client = client or AsyncOpenAI(
            api_key=api_key, base_url=base_url, timeout=timeout
        )

    @property
    def model(self) -> str:
        return self._model

    async def chat(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSpecification] | None = None,
    ) -> ChatResponse:
        """Run one chat completion."""
        answered = answered_call_ids(messages)
        request: dict[str, Any] = {
            "model": self._model,
            "messages": [to_openai_message(m, answered) for m in messages],
        }
        if tools:
            request["tools"] = [spec.to_openai_tool() for spec in tools]
        if self._temperature is not None:
            request["temperature"] = self._temperature

        try:
            response = await self._client.chat.completions.create(**request)
        except OpenAIError as e:
            raise ModelTransportError(f"OpenAI chat completion failed: {e}") from e

        if not response.choices:
            raise ModelTransportError("OpenAI chat completion returned no choices")

        choice = response.choices[0]
        tool_calls = [
            ToolCallRequest(
                id=tc.id,
                name=tc.function.name,
                arguments=tc.function.arguments,
            )
            for tc in (choice.message.tool_calls or [])
            if tc.type == "function"
        ]
        logger.debug(
            "chat model=%s finish_reason=%s tool_calls=%d",
            self._model,
            choice.finish_reason,
            len(tool_calls),
        )
        return ChatResponse(
            text=choice.message.content or "",
            tool_calls=tool_calls,
            finish_reason=choice.finish_reason,
        )
