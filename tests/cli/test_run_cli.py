"""Tests for the run and info CLI commands."""

import json
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner, Result

from qanda.cli import cli
from qanda.cli.run import SELECT_SOURCES, make_value_source
from qanda.sources import ConsoleValueSource, StaticValueSource

pytestmark = pytest.mark.unit

EXAMPLE = """\
---
name: Greet
---
Hello $input

---
name: Weather
model: llama3
temperature: 0.1
---
Weather in ${input:City}

---
name: Clip
---
Summarize: $clipboard

---
name: Pick
---
From $select
"""


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(runner: CliRunner, prompts_dir: Path, write_prompts) -> Callable[..., Result]:
    """Invoke the CLI against a prompts directory holding EXAMPLE."""
    write_prompts("main.prompts.md", EXAMPLE)

    def _invoke(*args: str) -> Result:
        return runner.invoke(cli, ["--prompts-dir", str(prompts_dir), *args])

    return _invoke


class TestMakeValueSource:
    """Tests for make_value_source."""

    def test_answers_give_static_source(self) -> None:
        source = make_value_source(("a",), None, {}, "")

        assert isinstance(source, StaticValueSource)
        assert source.choice is None

    def test_select_source_gives_static_source(self) -> None:
        source = make_value_source((), "yanked", {"0": "y"}, "go")

        assert isinstance(source, StaticValueSource)
        assert source.choice == SELECT_SOURCES["yanked"] == 1

    def test_interactive(self) -> None:
        assert isinstance(make_value_source((), None, {}, ""), ConsoleValueSource)


class TestRunCommand:
    """Tests for qanda run."""

    def test_run_with_answer(self, invoke) -> None:
        result = invoke("run", "Greet", "--answer", "World")

        assert result.exit_code == 0
        assert result.output == "Hello World\n"

    def test_run_json(self, invoke) -> None:
        result = invoke("run", "Weather", "-a", "Paris", "--json")

        assert result.exit_code == 0
        request = json.loads(result.output)
        assert request["url"] == "http://localhost:11434/api/chat"
        assert request["data"] == {
            "think": False,
            "temperature": "0.1",
            "model": "llama3",
            "messages": [{"role": "user", "content": "Weather in Paris"}],
        }

    def test_run_cancelled(self, invoke) -> None:
        result = invoke("run", "Weather", "--answer", "")

        assert result.exit_code == 1
        assert "Cancelled." in result.output

    def test_run_interrupted(self, invoke) -> None:
        def interrupted(coro) -> None:
            coro.close()
            raise KeyboardInterrupt

        with patch("asyncio.run", side_effect=interrupted):
            result = invoke("run", "Greet")

        assert result.exit_code == 1
        assert "Cancelled." in result.output

    def test_run_empty_register(self, invoke) -> None:
        result = invoke("run", "Clip", "--register", "+=")

        assert result.exit_code == 1
        assert "Clipboard is empty" in result.output

    def test_run_with_register(self, invoke) -> None:
        result = invoke("run", "Clip", "-r", "+=some $text")

        assert result.exit_code == 0
        assert result.output == "Summarize: some $text\n"

    def test_run_select_source(self, invoke) -> None:
        result = invoke("run", "Pick", "--select-source", "yanked", "-r", "0=yanked text")

        assert result.exit_code == 0
        assert result.output == "From yanked text\n"

    def test_run_filetype(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["run", "--text", "lang: $filetype", "--filetype", "rust", "-a", "x"])

        assert result.exit_code == 0
        assert result.output == "lang: rust\n"

    def test_run_text(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["run", "--text", "Echo $input", "-a", "this"])

        assert result.exit_code == 0
        assert result.output == "Echo this\n"

    def test_run_text_with_header_model(self, runner: CliRunner) -> None:
        text = "---\nname: Draft\nmodel: phi3\n---\nHi"

        result = runner.invoke(cli, ["run", "--text", text, "-a", "unused", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["model"] == "phi3"

    def test_unknown_prompt(self, invoke) -> None:
        result = invoke("run", "Nope", "-a", "x")

        assert result.exit_code == 1
        assert "No prompt named 'Nope'" in result.output

    @pytest.mark.parametrize("args", [[], ["Greet", "--text", "x"]])
    def test_name_or_text_required(self, invoke, args: list[str]) -> None:
        result = invoke("run", *args)

        assert result.exit_code == 2
        assert "Give either a prompt NAME or --text" in result.output

    def test_bad_register_assignment(self, invoke) -> None:
        result = invoke("run", "Greet", "-a", "x", "-r", "novalue")

        assert result.exit_code == 2
        assert "expected NAME=VALUE" in result.output


class TestInfoCommand:
    """Tests for qanda info."""

    def test_info_defaults(self, runner: CliRunner, prompts_dir: Path) -> None:
        result = runner.invoke(cli, ["--prompts-dir", str(prompts_dir), "info"])

        assert result.exit_code == 0
        assert 'provider: "ollama", model: "mistral"' in result.output
        assert "backend: http://localhost:11434" in result.output
        assert f"prompts: {prompts_dir}" in result.output

    def test_info_from_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("model: llama3\nport: 8080\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config), "info"])

        assert result.exit_code == 0
        assert 'model: "llama3"' in result.output
        assert "backend: http://localhost:8080" in result.output

    def test_invalid_config(self, runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("port: 0\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config), "info"])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output
