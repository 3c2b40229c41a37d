"""Chat request payloads for the model backend."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal

from qanda.config.app import QandaConfig
from qanda.session import PreparedPrompt

Role = Literal["user", "assistant", "system", "tool"]


@dataclass
class ChatRequest:
    """A chat request, ready for a dispatcher to POST."""

    host: str
    port: int
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def url(self) -> str:
        """Chat endpoint of the backend."""
        return f"http://{self.host}:{self.port}/api/chat"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {"url": self.url, "data": self.data}

    def to_json(self) -> str:
        """Serialize the request body."""
        return json.dumps(self.data)


def build_chat_request(
    prepared: PreparedPrompt,
    config: QandaConfig,
    role: Role = "user",
) -> ChatRequest:
    """Build the chat request for an expanded prompt.

    The prompt's `model` header overrides the configured model. Request
    fields start from the provider defaults in `config.model_options` and
    are overlaid with the prompt's own header options.

    Args:
        prepared: Prompt with its placeholders expanded
        config: Backend configuration
        role: Role of the message

    Returns:
        ChatRequest for the configured backend
    """
    data: dict[str, Any] = config.get_provider_options()
    data.update(prepared.prompt.model_options)
    data["model"] = prepared.prompt.model or config.model
    data["messages"] = [{"role": role, "content": prepared.text}]
    return ChatRequest(host=config.host, port=config.port, data=data)
