from agentloop.config import AgentLoopConfig
from agentloop.errors import (
    AgentLoopError,
    ArgumentParseError,
    GuardrailError,
    InvalidPayloadError,
    LedgerError,
    MissingSessionIdError,
    ModelTransportError,
    ToolExecutionError,
    UnresolvedToolError,
)
from agentloop.gateway import ModelGateway, OpenAIChatGateway
from agentloop.guardrails import (
    BlockedPhrasesOutputGuardrail,
    GuardrailResult,
    InputGuardrail,
    MaxLengthInputGuardrail,
    OutputGuardrail,
)
from agentloop.ledger import MessageLedger
from agentloop.memory import InMemoryMemoryStore, KuzuMemoryStore, MemoryStore
from agentloop.messages import (
    AssistantMessage,
    ChatResponse,
    Message,
    SystemMessage,
    ToolCallRequest,
    ToolResultMessage,
    UserMessage,
)
from agentloop.orchestrator import LoopState, OrchestrationResult, Orchestrator
from agentloop.request import ConversationRequest, coerce_request
from agentloop.tools import (
    ExecutionContext,
    TaggedToolSource,
    ToolExecutor,
    ToolRegistry,
    ToolSource,
    ToolSpecification,
)

__all__ = [
    # Main class
    "Orchestrator",
    "OrchestrationResult",
    "LoopState",
    # Config
    "AgentLoopConfig",
    # Messages
    "Message",
    "SystemMessage",
    "UserMessage",
    "AssistantMessage",
    "ToolResultMessage",
    "ToolCallRequest",
    "ChatResponse",
    "MessageLedger",
    # Requests
    "ConversationRequest",
    "coerce_request",
    # Tools
    "ExecutionContext",
    "TaggedToolSource",
    "ToolExecutor",
    "ToolRegistry",
    "ToolSource",
    "ToolSpecification",
    # Gateways
    "ModelGateway",
    "OpenAIChatGateway",
    # Memory
    "MemoryStore",
    "InMemoryMemoryStore",
    "KuzuMemoryStore",
    # Guardrails
    "InputGuardrail",
    "OutputGuardrail",
    "GuardrailResult",
    "MaxLengthInputGuardrail",
    "BlockedPhrasesOutputGuardrail",
    # Errors
    "AgentLoopError",
    "ArgumentParseError",
    "GuardrailError",
    "InvalidPayloadError",
    "LedgerError",
    "MissingSessionIdError",
    "ModelTransportError",
    "ToolExecutionError",
    "UnresolvedToolError",
]
