import pytest

from agentloop.errors import LedgerError
from agentloop.ledger import MessageLedger
from agentloop.messages import (
    AssistantMessage,
    SystemMessage,
    ToolCallRequest,
    ToolResultMessage,
    UserMessage,
)


def _assistant_calling(*ids: str) -> AssistantMessage:
    return AssistantMessage(tool_calls=[ToolCallRequest(id=i, name="tool") for i in ids])


class TestMessageLedger:
    """Test MessageLedger."""

    def test_from_text_orders_system_first(self) -> None:
        """The system message precedes the user message."""
        ledger = MessageLedger.from_text("Hello", system="Be nice")

        assert ledger.snapshot() == (
            SystemMessage(content="Be nice"),
            UserMessage(content="Hello"),
        )

    def test_from_text_without_system(self) -> None:
        """No system message is added when none is given."""
        ledger = MessageLedger.from_text("Hello")

        assert [m.role for m in ledger] == ["user"]

    def test_append_keeps_order(self) -> None:
        """Messages are kept in insertion order."""
        ledger = MessageLedger.from_text("Hi")
        ledger.append(_assistant_calling("c1", "c2"))
        ledger.append(ToolResultMessage(tool_call_id="c1", tool_name="tool", content="1"))
        ledger.append(ToolResultMessage(tool_call_id="c2", tool_name="tool", content="2"))

        assert [m.role for m in ledger] == ["user", "assistant", "tool", "tool"]
        assert len(ledger) == 4
        assert ledger[-1].content == "2"

    def test_tool_result_requires_known_call(self) -> None:
        """A tool result must answer an earlier tool call."""
        ledger = MessageLedger.from_text("Hi")

        with pytest.raises(LedgerError, match="unknown call id 'c1'"):
            ledger.append(ToolResultMessage(tool_call_id="c1", tool_name="tool", content="x"))

        assert len(ledger) == 1

    def test_constructor_validates(self) -> None:
        """Initial messages go through the same checks as append."""
        with pytest.raises(LedgerError):
            MessageLedger([
                UserMessage(content="Hi"),
                ToolResultMessage(tool_call_id="c1", tool_name="tool", content="x"),
            ])

    def test_snapshot_is_immutable_copy(self) -> None:
        """Snapshots are not affected by later appends."""
        ledger = MessageLedger.from_text("Hi")
        snapshot = ledger.snapshot()

        ledger.append(AssistantMessage(content="Hello"))

        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 1
        assert len(ledger) == 2

    def test_last_user_message(self) -> None:
        """The most recent user message is returned."""
        ledger = MessageLedger([
            UserMessage(content="First"),
            AssistantMessage(content="Reply"),
            UserMessage(content="Second"),
            AssistantMessage(content="Reply again"),
        ])

        assert ledger.last_user_message() == UserMessage(content="Second")
        assert MessageLedger().last_user_message() is None

    def test_tool_results(self) -> None:
        """tool_results lists only tool result messages."""
        ledger = MessageLedger.from_text("Hi")
        ledger.extend([
            _assistant_calling("c1"),
            ToolResultMessage(tool_call_id="c1", tool_name="tool", content="ok"),
            AssistantMessage(content="Done"),
        ])

        assert [m.tool_call_id for m in ledger.tool_results()] == ["c1"]

    def test_repr(self) -> None:
        """repr shows the message count."""
        assert repr(MessageLedger.from_text("Hi", system="S")) == "MessageLedger(2 messages)"
