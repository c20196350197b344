"""Message-count windowing for stored conversations."""

from agentloop.messages import AssistantMessage, Message, SystemMessage, ToolResultMessage


def apply_window(messages: list[Message], max_messages: int | None) -> list[Message]:
    """Keep system messages plus the most recent messages, up to ``max_messages``.

    Tool results whose originating assistant message fell out of the window
    are dropped as well, so the result still forms a valid ledger.
    """
    if max_messages is None or len(messages) <= max_messages:
        return list(messages)

    system = [m for m in messages if isinstance(m, SystemMessage)]
    rest = [m for m in messages if not isinstance(m, SystemMessage)]
    budget = max(max_messages - len(system), 0)
    recent = rest[len(rest) - budget:] if budget else []

    call_ids: set[str] = set()
    kept: list[Message] = []
    for message in recent:
        if isinstance(message, AssistantMessage):
            call_ids.update(tc.id for tc in message.tool_calls)
        elif isinstance(message, ToolResultMessage) and message.tool_call_id not in call_ids:
            continue
        kept.append(message)
    return system + kept
