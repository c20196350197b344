"""Error taxonomy for agentloop.

Recoverable errors (argument parsing, unresolved tools, tool failures) are
caught inside the orchestration loop and turned into conversation content.
Everything else propagates to the caller.
"""


class AgentLoopError(Exception):
    """Base class for all agentloop errors."""


class LedgerError(AgentLoopError):
    """A message would break the ledger's ordering invariants."""


class ArgumentParseError(AgentLoopError):
    """Tool call arguments are not a valid JSON object."""

    def __init__(self, tool_name: str, arguments: str, reason: str) -> None:
        self.tool_name = tool_name
        self.arguments = arguments
        self.reason = reason
        super().__init__(
            f"Invalid arguments for tool '{tool_name}': {reason}"
        )


class UnresolvedToolError(AgentLoopError):
    """The model requested a tool that is not in the active registry."""

    def __init__(self, tool_name: str, available: list[str] | None = None) -> None:
        self.tool_name = tool_name
        self.available = available or []
        super().__init__(f"Tool not found: {tool_name}")


class ToolExecutionError(AgentLoopError):
    """A tool's bound action raised."""

    def __init__(self, tool_name: str, cause: BaseException) -> None:
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"Error executing tool '{tool_name}': {cause}")


class ModelTransportError(AgentLoopError):
    """The Model Gateway call failed. Never retried by the loop."""


class MissingSessionIdError(AgentLoopError):
    """A memory store is configured but the request carries no memory id."""

    def __init__(self) -> None:
        super().__init__(
            "A memory id is required when a memory store is configured"
        )


class InvalidPayloadError(AgentLoopError):
    """The inbound payload is neither a string nor a conversation request."""

    def __init__(self, payload: object, detail: str | None = None) -> None:
        self.payload = payload
        message = f"Unsupported request payload of type {type(payload).__name__}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class GuardrailError(AgentLoopError):
    """An input or output guardrail rejected the conversation."""

    def __init__(self, stage: str, guardrail: str, reason: str) -> None:
        self.stage = stage
        self.guardrail = guardrail
        self.reason = reason
        super().__init__(f"{stage} guardrail {guardrail} failed: {reason}")
