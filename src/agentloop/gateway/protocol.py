from collections.abc import Sequence
from typing import Protocol

from agentloop.messages import ChatResponse, Message
from agentloop.tools.specification import ToolSpecification


class ModelGateway(Protocol):
    """Protocol for a single request/response call to a chat model.

    Gateways are stateless: they never hold or mutate conversation history.
    Transport failures must surface as ``ModelTransportError``.
    """

    async def chat(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSpecification] | None = None,
    ) -> ChatResponse:
        """Send the ordered messages, optionally advertising tools."""
        ...
