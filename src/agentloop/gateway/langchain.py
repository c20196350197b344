"""ModelGateway backed by any LangChain chat model.

Usage:
    ```python
    from langchain_openai import ChatOpenAI
    from agentloop.gateway.langchain import LangChainChatGateway

    gateway = LangChainChatGateway(ChatOpenAI(model="gpt-4o-mini"))
    ```
"""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from agentloop.adapters.langchain import LangChainAdapter
from agentloop.errors import ModelTransportError
from agentloop.messages import AssistantMessage, ChatResponse, Message, answered_call_ids
from agentloop.tools.specification import ToolSpecification

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel
    from langchain_core.messages import AIMessage

logger = logging.getLogger(__name__)


class LangChainChatGateway:
    """Adapts a LangChain ``BaseChatModel`` to the ModelGateway protocol."""

    def __init__(
        self,
        model: "BaseChatModel",
        adapter: LangChainAdapter | None = None,
    ) -> None:
        self._model = model
        self._adapter = adapter or LangChainAdapter()

    async def chat(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSpecification] | None = None,
    ) -> ChatResponse:
        lc_messages = self._adapter.to_langchain(
            list(messages), answered_call_ids(messages)
        )
        runnable = (
            self._model.bind_tools([spec.to_openai_tool() for spec in tools])
            if tools
            else self._model
        )
        try:
            response = await runnable.ainvoke(lc_messages)
        except Exception as e:
            raise ModelTransportError(f"LangChain chat model failed: {e}") from e
        return self._to_response(response)

    def _to_response(self, message: "AIMessage") -> ChatResponse:
        converted = self._adapter.convert_single(message)
        if isinstance(converted, AssistantMessage):
            tool_calls = converted.tool_calls
        else:
            tool_calls = []
        metadata = getattr(message, "response_metadata", None) or {}
        finish_reason = metadata.get("finish_reason") or metadata.get("stop_reason")
        logger.debug(
            "chat finish_reason=%s tool_calls=%d", finish_reason, len(tool_calls)
        )
        return ChatResponse(
            text=self._adapter.extract_content(message),
            tool_calls=tool_calls,
            finish_reason=finish_reason,
        )
