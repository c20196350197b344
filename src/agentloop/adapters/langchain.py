"""LangChain message adapter.

Converts LangChain messages (HumanMessage, AIMessage, ToolMessage, etc.)
to agentloop's internal message types and back.
"""

import json
from typing import TYPE_CHECKING

from agentloop.messages import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolCallRequest,
    ToolResultMessage,
    UserMessage,
)

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage


class LangChainAdapter:
    """Converts between LangChain messages and internal messages.

    Usage:
        ```python
        from langchain_core.messages import HumanMessage, AIMessage
        from agentloop.adapters.langchain import LangChainAdapter

        adapter = LangChainAdapter()
        messages = adapter.convert([
            HumanMessage(content="What's the weather in Paris?"),
            AIMessage(content="", tool_calls=[...]),
        ])
        ```
    """

    def convert(self, messages: list["BaseMessage"]) -> list[Message]:
        """Convert a list of LangChain messages.

        Args:
            messages: List of LangChain BaseMessage objects.

        Returns:
            List of internal Message objects.
        """
        return [self.convert_single(msg) for msg in messages]

    def convert_single(self, message: "BaseMessage") -> Message:
        """Convert a single LangChain message.

        Args:
            message: A LangChain BaseMessage object.

        Returns:
            Internal Message object.
        """
        from langchain_core.messages import (
            AIMessage,
            HumanMessage,
            SystemMessage as LCSystemMessage,
            ToolMessage,
        )

        content = self.extract_content(message)

        if isinstance(message, HumanMessage):
            return UserMessage(content=content)

        elif isinstance(message, LCSystemMessage):
            return SystemMessage(content=content)

        elif isinstance(message, AIMessage):
            tool_calls = [
                ToolCallRequest(
                    id=tc.get("id") or "",
                    name=tc.get("name", ""),
                    arguments=json.dumps(tc.get("args", {})),
                )
                for tc in (message.tool_calls or [])
            ]
            # Malformed calls keep their raw arguments so the executor can report them.
            tool_calls.extend(
                ToolCallRequest(
                    id=tc.get("id") or "",
                    name=tc.get("name") or "",
                    arguments=tc.get("args"),
                )
                for tc in (message.invalid_tool_calls or [])
            )
            return AssistantMessage(content=content, tool_calls=tool_calls)

        elif isinstance(message, ToolMessage):
            return ToolResultMessage(
                tool_call_id=message.tool_call_id,
                tool_name=message.name or "",
                content=content,
            )

        else:
            return UserMessage(content=content)

    def to_langchain(
        self, messages: list[Message], answered: set[str] | None = None
    ) -> list["BaseMessage"]:
        """Convert internal messages to LangChain messages.

        When ``answered`` is given, assistant tool calls without a matching
        tool result are left out (see ``to_langchain_single``).
        """
        return [self.to_langchain_single(msg, answered) for msg in messages]

    def to_langchain_single(
        self, message: Message, answered: set[str] | None = None
    ) -> "BaseMessage":
        """Convert one internal message to its LangChain counterpart.

        Tool calls whose arguments are not a JSON object are carried as
        ``invalid_tool_calls`` so the raw text is not lost. Calls whose id is
        not in ``answered`` (when given) are dropped, since providers reject
        tool calls that have no tool result.
        """
        from langchain_core.messages import (
            AIMessage,
            HumanMessage,
            SystemMessage as LCSystemMessage,
            ToolMessage,
        )

        if isinstance(message, SystemMessage):
            return LCSystemMessage(content=message.content)

        elif isinstance(message, UserMessage):
            return HumanMessage(content=message.content)

        elif isinstance(message, AssistantMessage):
            tool_calls = []
            invalid_tool_calls = []
            for tc in message.tool_calls:
                if answered is not None and tc.id not in answered:
                    continue
                try:
                    args = json.loads(tc.arguments) if tc.arguments else {}
                except (ValueError, RecursionError) as e:
                    args = None
                    error = str(e)
                else:
                    error = "expected a JSON object"
                if isinstance(args, dict):
                    tool_calls.append({"id": tc.id, "name": tc.name, "args": args})
                else:
                    invalid_tool_calls.append(
                        {"id": tc.id, "name": tc.name, "args": tc.arguments, "error": error}
                    )
            return AIMessage(
                content=message.content,
                tool_calls=tool_calls,
                invalid_tool_calls=invalid_tool_calls,
            )

        elif isinstance(message, ToolResultMessage):
            return ToolMessage(
                content=message.content,
                tool_call_id=message.tool_call_id,
                name=message.tool_name,
            )

        raise TypeError(f"Unknown message type: {type(message)}")

    def extract_content(self, message: "BaseMessage") -> str:
        """Extract text content from a message.

        Handles both simple string content and complex content lists
        (for multimodal messages).

        Args:
            message: A LangChain BaseMessage object.

        Returns:
            Text content as a string.
        """
        if isinstance(message.content, str):
            return message.content
        elif isinstance(message.content, list):
            texts = []
            for block in message.content:
                if isinstance(block, str):
                    texts.append(block)
                elif isinstance(block, dict) and block.get("type") == "text":
                    texts.append(block.get("text", ""))
            return "\n".join(texts)
        return str(message.content)
