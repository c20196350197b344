"""In-process tag registry implementing the ToolSource protocol."""

import logging
from collections.abc import Callable, Iterable

from agentloop.tools.context import ExecutionContext
from agentloop.tools.executor import ToolAction, ToolExecutor
from agentloop.tools.specification import ParameterType, ToolParameter, ToolSpecification

logger = logging.getLogger(__name__)


def split_tags(selector: str | None) -> list[str]:
    """Split a comma-separated selector, dropping blanks and surrounding spaces."""
    if not selector:
        return []
    return [tag.strip() for tag in selector.split(",") if tag.strip()]


class TaggedToolSource:
    """Tools grouped under string tags.

    A tool may carry several tags. Discovery matches tags by exact string
    equality and builds a fresh executor per tool, bound to the caller's
    execution context.

    Example:
        ```python
        source = TaggedToolSource()

        @source.tool("weather", description="Current weather", city="string")
        def get_weather(ctx):
            return lookup(ctx["city"])

        tools = source.discover_tools("weather,users")
        ```
    """

    def __init__(self) -> None:
        self._by_tag: dict[str, dict[str, tuple[ToolSpecification, ToolAction]]] = {}

    def register(
        self,
        tags: str | Iterable[str],
        spec: ToolSpecification,
        action: ToolAction,
    ) -> None:
        """Register an action under one or more tags.

        Re-registering a name under the same tag replaces the earlier entry.
        """
        tag_list = split_tags(tags) if isinstance(tags, str) else [t for t in tags if t]
        if not tag_list:
            raise ValueError(f"Tool '{spec.name}' must have at least one tag")
        for tag in tag_list:
            self._by_tag.setdefault(tag, {})[spec.name] = (spec, action)
        logger.debug("registered tool=%s tags=%s", spec.name, tag_list)

    def tool(
        self,
        tags: str | Iterable[str],
        *,
        name: str | None = None,
        description: str | None = None,
        parameters: Iterable[ToolParameter] | None = None,
        **parameter_types: ParameterType,
    ) -> Callable[[ToolAction], ToolAction]:
        """Decorator form of ``register``.

        The tool name defaults to the function name and the description to its
        docstring. Parameters come from ``parameters`` or from keyword
        ``name=type`` pairs.
        """

        def decorator(func: ToolAction) -> ToolAction:
            params = list(parameters or ()) + [
                ToolParameter(name=key, type=value) for key, value in parameter_types.items()
            ]
            spec = ToolSpecification(
                name=name or func.__name__,
                description=description or (func.__doc__ or "").strip(),
                parameters=tuple(params),
            )
            self.register(tags, spec, func)
            return func

        return decorator

    def tags(self) -> list[str]:
        return list(self._by_tag)

    def discover_tools(
        self,
        selector: str,
        context: ExecutionContext | None = None,
    ) -> dict[str, tuple[ToolSpecification, ToolExecutor]]:
        """Collect every tool under a matching tag, bound to ``context``."""
        context = context if context is not None else ExecutionContext()
        found: dict[str, tuple[ToolSpecification, ToolExecutor]] = {}
        for tag in split_tags(selector):
            for tool_name, (spec, action) in self._by_tag.get(tag, {}).items():
                if tool_name in found:
                    continue
                found[tool_name] = (spec, ToolExecutor(tool_name, action, context))
                logger.debug(
                    "Registered tool: %s with description: %s", tool_name, spec.description
                )
        return found
