"""Mutable side-channel that tool executors populate before running an action."""

from collections.abc import Iterator, MutableMapping
from typing import Any


class ExecutionContext(MutableMapping[str, Any]):
    """Request-scoped bag of values handed to tool actions.

    Executors copy each parsed argument into the context, then set
    ``TOOL_NAME_KEY`` to the resolved tool name, and pass the context to the
    action. One context lives for one request and is shared by every tool
    call in it, so values set by an earlier call stay visible to later ones.
    """

    TOOL_NAME_KEY = "agentloop.tool_name"

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    @property
    def tool_name(self) -> str | None:
        return self._values.get(self.TOOL_NAME_KEY)

    def bind(self, values: dict[str, Any]) -> None:
        self._values.update(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ExecutionContext({self._values!r})"
