"""agentloop - tool-calling orchestration for chat models.

Usage:
    ```python
    from agentloop import Orchestrator, TaggedToolSource
    from agentloop.gateway import OpenAIChatGateway

    source = TaggedToolSource()

    @source.tool("weather", description="Current weather for a city", city="string")
    def get_weather(ctx):
        return f"sunny in {ctx['city']}"

    agent = Orchestrator(OpenAIChatGateway(), tool_source=source)
    result = await agent.run("What's the weather in Paris?", tags="weather")
    print(result.text)
    ```

With session memory:
    ```python
    from agentloop.memory import InMemoryMemoryStore

    agent = Orchestrator(gateway, memory_store=InMemoryMemoryStore())
    await agent.run("My name is Alice", memory_id="session-1")
    await agent.run("What is my name?", memory_id="session-1")
    ```
"""

import logging
from collections.abc import Sequence
from contextlib import AsyncExitStack
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field

from agentloop.config import AgentLoopConfig
from agentloop.errors import (
    ArgumentParseError,
    InvalidPayloadError,
    LedgerError,
    MissingSessionIdError,
    ModelTransportError,
    UnresolvedToolError,
)
from agentloop.gateway.protocol import ModelGateway
from agentloop.guardrails import InputGuardrail, OutputGuardrail, check_input, check_output
from agentloop.ledger import MessageLedger
from agentloop.memory.locks import SessionLocks
from agentloop.memory.protocol import MemoryStore
from agentloop.messages import (
    AssistantMessage,
    ChatResponse,
    Message,
    SystemMessage,
    ToolCallRequest,
    ToolResultMessage,
)
from agentloop.request import ConversationRequest, coerce_request
from agentloop.tools.context import ExecutionContext
from agentloop.tools.protocol import ToolSource
from agentloop.tools.registry import ToolRegistry
from agentloop.tools.specification import ToolSpecification

logger = logging.getLogger(__name__)


class LoopState(StrEnum):
    """States of one orchestration run."""

    AWAITING_MODEL = "awaiting_model"
    TOOLS_REQUESTED = "tools_requested"
    TOOLS_EXECUTED = "tools_executed"
    DONE = "done"


class OrchestrationResult(BaseModel):
    """Outcome of one request.

    Attributes:
        text: Final answer text.
        tools_called: Whether at least one tool action was invoked.
        no_tools_available: The registry was empty, so no tools were offered.
        iterations: Number of Model Gateway calls made.
        termination: How the loop ended.
        messages: The final ledger.
    """

    text: str
    tools_called: bool = False
    no_tools_available: bool = False
    iterations: int = 0
    termination: Literal["completed", "no_tools", "iteration_limit"] = "completed"
    messages: list[Message] = Field(default_factory=list)

    @property
    def terminated_normally(self) -> bool:
        return self.termination != "iteration_limit"


class Orchestrator:
    """Drives the model <-> tools loop for one request at a time.

    Every call to ``run`` builds its own ledger, execution context and tool
    registry, so one Orchestrator can serve concurrent requests. Shared state
    lives only in the tool source and memory store.
    Requests that share a memory id run one at a time.

    Loop:
        1. No tools for the selector: one direct model call.
        2. Otherwise call the model with all tool specifications, append its
           message, and stop when it requests no tools (or reports "stop").
           Requested tools run in order; each result is appended before the
           next call is processed. Unknown tool names are skipped.
        3. At most ``max_iterations`` model calls per request. The last one is
           made without tools so the caller always gets an answer.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        tool_source: ToolSource | None = None,
        memory_store: MemoryStore | None = None,
        config: AgentLoopConfig | None = None,
        input_guardrails: Sequence[InputGuardrail] = (),
        output_guardrails: Sequence[OutputGuardrail] = (),
    ) -> None:
        """Initialize the orchestrator.

        Args:
            gateway: Model Gateway used for every chat call.
            tool_source: Where tools are discovered. Without one, every
                request degrades to a direct model call.
            memory_store: Session persistence. When set, every request must
                carry a memory id.
            config: Configuration settings. Uses defaults if not provided.
            input_guardrails: Checked against the last user message.
            output_guardrails: Checked against the final answer.
        """
        self._config = config or AgentLoopConfig()
        self._gateway = gateway
        self._tool_source = tool_source
        self._memory = memory_store
        self._input_guardrails = list(input_guardrails)
        self._output_guardrails = list(output_guardrails)
        self._exit_stack: AsyncExitStack | None = None
        self._session_locks = SessionLocks()

    @classmethod
    def from_config(
        cls,
        config: AgentLoopConfig | None = None,
        gateway: ModelGateway | None = None,
        tool_source: ToolSource | None = None,
        **kwargs: Any,
    ) -> "Orchestrator":
        """Build an orchestrator with the gateway and memory store the config asks for."""
        config = config or AgentLoopConfig()

        if gateway is None:
            from agentloop.gateway.openai import OpenAIChatGateway

            gateway = OpenAIChatGateway(
                model=config.openai_model,
                api_key=config.openai_api_key,
                base_url=config.openai_base_url,
                temperature=config.temperature,
                timeout=config.request_timeout,
            )

        memory_store: MemoryStore | None = None
        if config.memory_backend == "memory":
            from agentloop.memory.in_memory import InMemoryMemoryStore

            memory_store = InMemoryMemoryStore(max_messages=config.memory_window)
        elif config.memory_backend == "kuzu":
            from agentloop.memory.kuzu_store import KuzuMemoryStore

            memory_store = KuzuMemoryStore(
                db_path=config.get_memory_path(),
                max_messages=config.memory_window,
            )

        return cls(
            gateway,
            tool_source=tool_source,
            memory_store=memory_store,
            config=config,
            **kwargs,
        )

    async def __aenter__(self) -> "Orchestrator":
        """Async context manager entry - opens the memory store if it needs it."""
        self._exit_stack = AsyncExitStack()
        if hasattr(self._memory, "__aenter__"):
            await self._exit_stack.enter_async_context(self._memory)
        return self

    async def __aexit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        """Async context manager exit - closes the memory store."""
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
            self._exit_stack = None

    @property
    def config(self) -> AgentLoopConfig:
        return self._config

    @property
    def memory_store(self) -> MemoryStore | None:
        return self._memory

    async def chat(self, payload: object, **kwargs: Any) -> str:
        """Run a request and return only the final text."""
        result = await self.run(payload, **kwargs)
        return result.text

    async def run(
        self,
        payload: object,
        *,
        tags: str | None = None,
        memory_id: str | None = None,
        system_message: str | None = None,
        context: ExecutionContext | None = None,
    ) -> OrchestrationResult:
        """Turn a request into a final answer.

        Args:
            payload: A user string, a ConversationRequest, a mapping that
                validates as one, or a list of messages.
            tags: Tool selector. Falls back to the request's tags, then config.
            memory_id: Session id, required when a memory store is configured.
            system_message: System text used when the payload has none.
            context: Execution context tools populate. A fresh one by default.

        Returns:
            OrchestrationResult with the answer and loop metadata.

        Raises:
            InvalidPayloadError: The payload cannot be turned into a request.
            MissingSessionIdError: Memory is configured but no id was given.
            GuardrailError: An input or output guardrail failed.
            ModelTransportError: A Model Gateway call failed.
        """
        request = coerce_request(
            payload, tags=tags, memory_id=memory_id, system_message=system_message
        )
        if self._memory is not None and not request.memory_id:
            raise MissingSessionIdError()

        if self._memory is None:
            return await self._process(request, payload, context)
        # Load, loop and save run as one unit per session
        async with self._session_locks.lock(request.memory_id):
            return await self._process(request, payload, context)

    async def _process(
        self,
        request: ConversationRequest,
        payload: object,
        context: ExecutionContext | None,
    ) -> OrchestrationResult:
        ledger = await self._initial_ledger(request, payload)
        check_input(self._input_guardrails, ledger.last_user_message())

        context = context if context is not None else ExecutionContext()
        selector = request.tags or self._config.tags
        registry = ToolRegistry.discover(self._tool_source, selector, context)

        if not registry:
            logger.info("No tools available for tags: %s", selector)
            result = await self._run_direct(ledger)
        else:
            result = await self._run_loop(ledger, registry)

        check_output(self._output_guardrails, result.text)

        if self._memory is not None and request.memory_id:
            await self._memory.save(request.memory_id, ledger)
        return result

    async def _initial_ledger(
        self, request: ConversationRequest, payload: object
    ) -> MessageLedger:
        """Build the run's ledger from stored history plus the request."""
        incoming = request.conversation()
        try:
            if self._memory is None or not request.memory_id:
                return MessageLedger(incoming)

            history = list((await self._memory.load(request.memory_id)).snapshot())
            system = [m for m in incoming if isinstance(m, SystemMessage)]
            rest = [m for m in incoming if not isinstance(m, SystemMessage)]
            if system:
                # A new system message supersedes the stored one
                history = [m for m in history if not isinstance(m, SystemMessage)]
            logger.debug(
                "memory_id=%s history=%d incoming=%d",
                request.memory_id,
                len(history),
                len(incoming),
            )
            return MessageLedger([*system, *history, *rest])
        except LedgerError as e:
            raise InvalidPayloadError(payload, str(e)) from e

    async def _call_model(
        self,
        ledger: MessageLedger,
        tools: list[ToolSpecification] | None,
    ) -> ChatResponse:
        try:
            return await self._gateway.chat(ledger.snapshot(), tools)
        except ModelTransportError:
            raise
        except Exception as e:
            raise ModelTransportError(f"Model gateway call failed: {e}") from e

    async def _run_direct(self, ledger: MessageLedger) -> OrchestrationResult:
        response = await self._call_model(ledger, None)
        ledger.append(AssistantMessage(content=response.text))
        return OrchestrationResult(
            text=response.text,
            no_tools_available=True,
            iterations=1,
            termination="no_tools",
            messages=list(ledger.snapshot()),
        )

    async def _run_loop(
        self, ledger: MessageLedger, registry: ToolRegistry
    ) -> OrchestrationResult:
        specs = registry.specifications()
        tools_called = False
        iterations = 0
        state = LoopState.AWAITING_MODEL

        while iterations < self._config.max_iterations - 1:
            response = await self._call_model(ledger, specs)
            iterations += 1
            ledger.append(response.to_message())

            if not response.tool_calls or response.finish_reason == "stop":
                state = LoopState.DONE
                logger.debug(
                    "state=%s iterations=%d tools_called=%s", state, iterations, tools_called
                )
                return OrchestrationResult(
                    text=response.text,
                    tools_called=tools_called,
                    iterations=iterations,
                    termination="completed",
                    messages=list(ledger.snapshot()),
                )

            state = LoopState.TOOLS_REQUESTED
            logger.debug(
                "state=%s iteration=%d tools=%s",
                state,
                iterations,
                [tc.name for tc in response.tool_calls],
            )
            for call in response.tool_calls:
                if await self._execute_tool_call(call, registry, ledger):
                    tools_called = True
            state = LoopState.TOOLS_EXECUTED
            logger.debug("state=%s iteration=%d", state, iterations)

        logger.warning(
            "Reached max iterations (%d) without a final answer; asking without tools",
            self._config.max_iterations,
        )
        response = await self._call_model(ledger, None)
        iterations += 1
        # Tools are no longer offered, so any calls in this answer are dropped
        ledger.append(AssistantMessage(content=response.text))
        return OrchestrationResult(
            text=response.text,
            tools_called=tools_called,
            iterations=iterations,
            termination="iteration_limit",
            messages=list(ledger.snapshot()),
        )

    async def _execute_tool_call(
        self,
        call: ToolCallRequest,
        registry: ToolRegistry,
        ledger: MessageLedger,
    ) -> bool:
        """Run one requested tool and append its result.

        Returns:
            True if the tool's action was invoked.
        """
        try:
            executor = registry.resolve(call.name)
        except UnresolvedToolError as e:
            logger.warning("%s (available: %s)", e, ", ".join(e.available))
            return False

        invoked = True
        try:
            text = await executor.invoke(call.arguments)
        except ArgumentParseError as e:
            logger.warning("%s", e)
            text = str(e)
            invoked = False

        ledger.append(
            ToolResultMessage(tool_call_id=call.id, tool_name=call.name, content=text)
        )
        return invoked
