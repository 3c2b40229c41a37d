"""Tests for chat request building."""

import json

import pytest

from qanda.config.app import QandaConfig
from qanda.prompts.models import Prompt
from qanda.requests import build_chat_request
from qanda.session import PreparedPrompt

pytestmark = pytest.mark.unit


class TestBuildChatRequest:
    """Tests for build_chat_request."""

    def test_defaults(self) -> None:
        prepared = PreparedPrompt(prompt=Prompt(name="A"), text="Hello")

        request = build_chat_request(prepared, QandaConfig())

        assert request.url == "http://localhost:11434/api/chat"
        assert request.data == {
            "think": False,
            "model": "mistral",
            "messages": [{"role": "user", "content": "Hello"}],
        }

    def test_prompt_overrides(self) -> None:
        prompt = Prompt(name="A", model="codellama", model_options={"think": "true", "seed": "3"})
        config = QandaConfig(host="gpu-box", port=8080)

        request = build_chat_request(PreparedPrompt(prompt=prompt, text="x"), config, role="system")

        assert request.url == "http://gpu-box:8080/api/chat"
        assert request.data["model"] == "codellama"
        assert request.data["think"] == "true"
        assert request.data["seed"] == "3"
        assert request.data["messages"] == [{"role": "system", "content": "x"}]

    def test_other_provider_has_no_defaults(self) -> None:
        config = QandaConfig(provider="llamacpp")

        request = build_chat_request(PreparedPrompt(prompt=Prompt(name="A"), text="x"), config)

        assert "think" not in request.data

    def test_to_json(self) -> None:
        request = build_chat_request(PreparedPrompt(prompt=Prompt(name="A"), text="x"), QandaConfig())

        assert json.loads(request.to_json()) == request.data
        assert request.to_dict()["url"] == request.url

    def test_config_options_not_mutated(self) -> None:
        config = QandaConfig()
        prompt = Prompt(name="A", model_options={"think": "true"})

        build_chat_request(PreparedPrompt(prompt=prompt, text="x"), config)

        assert config.model_options == {"ollama": {"think": False}}
