"""Per-request name -> (specification, executor) lookup."""

import logging
from collections.abc import Iterator, Mapping

from agentloop.errors import UnresolvedToolError
from agentloop.tools.context import ExecutionContext
from agentloop.tools.executor import ToolExecutor
from agentloop.tools.protocol import ToolSource
from agentloop.tools.specification import ToolSpecification

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Tools available to one orchestration run.

    Built fresh for every request, since executors close over that request's
    execution context. Lookup is by exact name.
    """

    def __init__(
        self,
        tools: Mapping[str, tuple[ToolSpecification, ToolExecutor]] | None = None,
    ) -> None:
        self._tools: dict[str, tuple[ToolSpecification, ToolExecutor]] = {}
        for name, (spec, executor) in (tools or {}).items():
            if name != spec.name:
                raise ValueError(f"Registry key '{name}' does not match spec name '{spec.name}'")
            self._tools[name] = (spec, executor)

    @classmethod
    def discover(
        cls,
        source: ToolSource | None,
        selector: str | None,
        context: ExecutionContext | None = None,
    ) -> "ToolRegistry":
        """Build a registry from a tool source and a comma-separated tag selector."""
        if source is None or not selector:
            return cls()
        registry = cls(source.discover_tools(selector, context))
        logger.info("Initialized %d tools for tags: %s", len(registry), selector)
        return registry

    def get(self, name: str) -> ToolExecutor | None:
        entry = self._tools.get(name)
        return entry[1] if entry else None

    def resolve(self, name: str) -> ToolExecutor:
        """Look up an executor by exact name.

        Raises:
            UnresolvedToolError: No tool with that name is registered.
        """
        executor = self.get(name)
        if executor is None:
            raise UnresolvedToolError(name, self.names())
        return executor

    def specification(self, name: str) -> ToolSpecification | None:
        entry = self._tools.get(name)
        return entry[0] if entry else None

    def specifications(self) -> list[ToolSpecification]:
        return [spec for spec, _ in self._tools.values()]

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __bool__(self) -> bool:
        return bool(self._tools)

    def __repr__(self) -> str:
        return f"ToolRegistry({self.names()!r})"
