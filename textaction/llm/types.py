from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

ROLES = ("system", "user")


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "system" | "user"
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ChatRequest:
    model: str
    messages: Tuple[ChatMessage, ...]
    temperature: float
    max_tokens: int

    def __post_init__(self):
        if not self.messages or self.messages[-1].role != "user":
            raise ValueError("messages must end with exactly one user message")
        roles = [m.role for m in self.messages]
        if any(role not in ROLES for role in roles):
            raise ValueError(f"unsupported role in {roles}")
        if roles.count("user") != 1 or roles.count("system") > 1:
            raise ValueError("messages must hold one user message and at most one system message")
        if "system" in roles and roles[0] != "system":
            raise ValueError("system message must come first")
        if not 0 <= self.temperature <= 2:
            raise ValueError("temperature must be within [0, 2]")
        if not isinstance(self.max_tokens, int) or self.max_tokens < 1:
            raise ValueError("max_tokens must be a positive int")

    def to_payload(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [msg.to_dict() for msg in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
