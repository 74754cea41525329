"""Bounded conversation history."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from haxai.ai.provider import AIMessage

DEFAULT_HISTORY_LIMIT = 16


@dataclass(frozen=True)
class ConversationTurn:
    role: str  # "user" or "assistant"
    content: str


class ConversationHistory:
    """Append-only log of recent turns; the oldest turn is dropped first."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("History limit must be at least 1.")
        self._turns: deque[ConversationTurn] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._turns.maxlen or 0

    def append(self, role: str, content: str):
        if role not in ("user", "assistant"):
            raise ValueError(f"Unknown conversation role: {role!r}")
        self._turns.append(ConversationTurn(role=role, content=content))

    def record_exchange(self, user_text: str, assistant_text: str):
        self.append("user", user_text)
        self.append("assistant", assistant_text)

    def clear(self):
        self._turns.clear()

    def turns(self) -> list[ConversationTurn]:
        return list(self._turns)

    def as_messages(self) -> list[AIMessage]:
        return [AIMessage(role=t.role, content=t.content) for t in self._turns]

    def __len__(self) -> int:
        return len(self._turns)
