"""Pre- and post-call validation hooks.

A failing guardrail aborts the request with ``GuardrailError``; the loop never
retries around it.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from pydantic import BaseModel

from agentloop.errors import GuardrailError
from agentloop.messages import UserMessage


class GuardrailResult(BaseModel):
    """Outcome of one guardrail check."""

    passed: bool
    reason: str | None = None

    @classmethod
    def success(cls) -> "GuardrailResult":
        return cls(passed=True)

    @classmethod
    def failure(cls, reason: str) -> "GuardrailResult":
        return cls(passed=False, reason=reason)


class InputGuardrail(Protocol):
    """Validates the outbound user message before the first model call."""

    def validate(self, message: UserMessage) -> GuardrailResult: ...


class OutputGuardrail(Protocol):
    """Validates the final answer text before it is returned."""

    def validate(self, text: str) -> GuardrailResult: ...


class MaxLengthInputGuardrail:
    """Rejects user messages longer than ``max_chars``."""

    def __init__(self, max_chars: int) -> None:
        self.max_chars = max_chars

    def validate(self, message: UserMessage) -> GuardrailResult:
        if len(message.content) > self.max_chars:
            return GuardrailResult.failure(
                f"message has {len(message.content)} characters, limit is {self.max_chars}"
            )
        return GuardrailResult.success()


class BlockedPhrasesOutputGuardrail:
    """Rejects answers containing any of the given phrases (case-insensitive)."""

    def __init__(self, phrases: Iterable[str]) -> None:
        self.phrases = [p.lower() for p in phrases if p]

    def validate(self, text: str) -> GuardrailResult:
        lowered = text.lower()
        for phrase in self.phrases:
            if phrase in lowered:
                return GuardrailResult.failure(f"answer contains blocked phrase '{phrase}'")
        return GuardrailResult.success()


def check_input(guardrails: Sequence[InputGuardrail], message: UserMessage | None) -> None:
    """Run input guardrails in order, raising on the first failure."""
    if message is None:
        return
    for guardrail in guardrails:
        result = guardrail.validate(message)
        if not result.passed:
            raise GuardrailError("input", type(guardrail).__name__, result.reason or "rejected")


def check_output(guardrails: Sequence[OutputGuardrail], text: str) -> None:
    """Run output guardrails in order, raising on the first failure."""
    for guardrail in guardrails:
        result = guardrail.validate(text)
        if not result.passed:
            raise GuardrailError("output", type(guardrail).__name__, result.reason or "rejected")
