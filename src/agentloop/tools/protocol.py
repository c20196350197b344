"""Protocol for tool sources."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

from agentloop.tools.context import ExecutionContext
from agentloop.tools.specification import ToolSpecification

if TYPE_CHECKING:
    from agentloop.tools.executor import ToolExecutor


class ToolSource(Protocol):
    """Protocol for discovering the tools a request may use.

    Implementations map a comma-separated tag selector to the matching tools,
    building executors bound to the supplied execution context.
    """

    def discover_tools(
        self,
        selector: str,
        context: ExecutionContext | None = None,
    ) -> Mapping[str, tuple[ToolSpecification, "ToolExecutor"]]:
        """Discover tools for a selector.

        Args:
            selector: Comma-separated list of tags. Matching is exact.
            context: Execution context the executors should populate.
                A fresh context is used when omitted.

        Returns:
            Mapping of tool name to (specification, executor).
        """
        ...
