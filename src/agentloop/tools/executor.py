"""Tool invocation: argument parsing, context binding, result normalization."""

import inspect
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel

from agentloop.errors import ArgumentParseError, ToolExecutionError
from agentloop.tools.context import ExecutionContext

logger = logging.getLogger(__name__)

NO_RESULT = "No result"

ToolAction = Callable[[ExecutionContext], Any | Awaitable[Any]]


def parse_arguments(tool_name: str, arguments: str | None) -> dict[str, Any]:
    """Parse a raw arguments string into a dict.

    Empty or None input means no arguments.

    Raises:
        ArgumentParseError: Not valid JSON, or valid JSON that is not an object.
    """
    if arguments is None or not arguments.strip():
        return {}
    try:
        parsed = json.loads(arguments)
    except (ValueError, RecursionError) as e:
        raise ArgumentParseError(tool_name, arguments, str(e)) from e
    if not isinstance(parsed, dict):
        raise ArgumentParseError(
            tool_name, arguments, f"expected a JSON object, got {type(parsed).__name__}"
        )
    return parsed


def render_result(result: Any) -> str:
    """Render an action's return value as non-empty text."""
    if result is None:
        return NO_RESULT
    try:
        if isinstance(result, BaseModel):
            text = result.model_dump_json()
        elif isinstance(result, str):
            text = result
        elif isinstance(result, dict | list | tuple):
            text = json.dumps(result, default=str)
        else:
            text = str(result)
    except (TypeError, ValueError):
        # Not JSON-serializable (e.g. non-string dict keys)
        text = str(result)
    return text if text.strip() else NO_RESULT


class ToolExecutor:
    """Runs one tool's action against a request-scoped execution context.

    Tool failures are data, not control flow: an exception raised by the
    action is rendered as an error string for the model to read on its next
    turn. Only argument parsing failures escape ``invoke``.
    """

    def __init__(
        self,
        name: str,
        action: ToolAction,
        context: ExecutionContext | None = None,
    ) -> None:
        self._name = name
        self._action = action
        self._context = context if context is not None else ExecutionContext()

    @property
    def name(self) -> str:
        return self._name

    @property
    def context(self) -> ExecutionContext:
        return self._context

    async def invoke(self, arguments: str | None) -> str:
        """Execute the tool with a raw JSON arguments string.

        Returns:
            The action's result text, ``"No result"`` when it produced nothing,
            or ``"Error executing tool '<name>': <message>"`` when it raised.

        Raises:
            ArgumentParseError: If ``arguments`` is not a JSON object.
        """
        args = parse_arguments(self._name, arguments)

        self._context.bind(args)
        self._context[ExecutionContext.TOOL_NAME_KEY] = self._name

        logger.debug("invoke tool=%s args=%s", self._name, sorted(args))
        try:
            result = self._action(self._context)
            if inspect.isawaitable(result):
                result = await result
            text = render_result(result)
        except Exception as e:
            error = ToolExecutionError(self._name, e)
            logger.exception("tool %s failed", self._name)
            return str(error)

        logger.debug("tool=%s result_chars=%d", self._name, len(text))
        return text

    def __repr__(self) -> str:
        return f"ToolExecutor({self._name!r})"
