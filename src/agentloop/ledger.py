"""Ordered conversation history for one orchestration run."""

from collections.abc import Iterable, Iterator

from agentloop.errors import LedgerError
from agentloop.messages import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolResultMessage,
    UserMessage,
)


class MessageLedger:
    """Append-only, ordered message history.

    Messages are never removed or reordered once appended. A tool result is
    only accepted if an earlier assistant message in the ledger issued the
    tool call it answers.

    Example:
        ```python
        ledger = MessageLedger.from_text("Hello", system="Be nice")
        ledger.append(AssistantMessage(content="Hi!"))
        gateway_input = ledger.snapshot()
        ```
    """

    def __init__(self, messages: Iterable[Message] | None = None) -> None:
        self._messages: list[Message] = []
        self._call_ids: set[str] = set()
        for message in messages or ():
            self.append(message)

    @classmethod
    def from_text(cls, user: str, system: str | None = None) -> "MessageLedger":
        """Build a ledger from a bare user string.

        The system message, when given, always precedes the user message.
        """
        ledger = cls()
        if system:
            ledger.append(SystemMessage(content=system))
        ledger.append(UserMessage(content=user))
        return ledger

    def append(self, message: Message) -> None:
        """Append a message at the end of the ledger."""
        if isinstance(message, ToolResultMessage):
            if message.tool_call_id not in self._call_ids:
                raise LedgerError(
                    f"Tool result for unknown call id '{message.tool_call_id}'"
                )
        elif isinstance(message, AssistantMessage):
            self._call_ids.update(tc.id for tc in message.tool_calls)
        self._messages.append(message)

    def extend(self, messages: Iterable[Message]) -> None:
        for message in messages:
            self.append(message)

    def snapshot(self) -> tuple[Message, ...]:
        """Immutable ordered view of the current history."""
        return tuple(self._messages)

    def last_user_message(self) -> UserMessage | None:
        for message in reversed(self._messages):
            if isinstance(message, UserMessage):
                return message
        return None

    def tool_results(self) -> list[ToolResultMessage]:
        return [m for m in self._messages if isinstance(m, ToolResultMessage)]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    def __repr__(self) -> str:
        return f"MessageLedger({len(self._messages)} messages)"
