"""Adapters for converting framework-specific messages to agentloop's internal format.

Available adapters:
    - LangChainAdapter: Converts LangChain messages (HumanMessage, AIMessage, etc.)

``coerce_request`` applies the adapter to LangChain message lists, and
``LangChainChatGateway`` uses it in both directions.

Usage:
    ```python
    from agentloop.adapters.langchain import LangChainAdapter
    from langchain_core.messages import HumanMessage, AIMessage

    adapter = LangChainAdapter()
    messages = adapter.convert([
        HumanMessage(content="Hello"),
        AIMessage(content="Hi there!"),
    ])
    ```
"""

from agentloop.adapters.langchain import LangChainAdapter

__all__ = ["LangChainAdapter"]
