from agentloop.tools.context import ExecutionContext
from agentloop.tools.executor import NO_RESULT, ToolAction, ToolExecutor, parse_arguments
from agentloop.tools.protocol import ToolSource
from agentloop.tools.registry import ToolRegistry
from agentloop.tools.source import TaggedToolSource, split_tags
from agentloop.tools.specification import ToolParameter, ToolSpecification

__all__ = [
    "NO_RESULT",
    "ExecutionContext",
    "TaggedToolSource",
    "ToolAction",
    "ToolExecutor",
    "ToolParameter",
    "ToolRegistry",
    "ToolSource",
    "ToolSpecification",
    "parse_arguments",
    "split_tags",
]
