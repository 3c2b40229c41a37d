"""Tests for qanda.config.app."""

from pathlib import Path

import pytest
import yaml

from qanda.config.app import (
    PromptSettings,
    QandaConfig,
    apply_cli_overrides,
    get_qanda_home,
    load_config,
    load_yaml,
    save_config,
)
from qanda.prompts.collection import MergePolicy

pytestmark = pytest.mark.unit


class TestQandaConfig:
    """Tests for config models."""

    def test_defaults(self, qanda_home: Path) -> None:
        config = QandaConfig()

        assert config.provider == "ollama"
        assert config.model == "mistral"
        assert config.host == "localhost"
        assert config.port == 11434
        assert config.get_provider_options() == {"think": False}
        assert config.prompts.get_directory() == qanda_home / "prompts"
        assert config.prompts.pattern == "*.prompts.md"
        assert config.prompts.require_names is True
        assert config.prompts.merge_policy == MergePolicy.ACCUMULATE
        assert config.logging.level == "warning"

    @pytest.mark.parametrize("port", [0, 70000])
    def test_invalid_port(self, port: int) -> None:
        with pytest.raises(ValueError, match="Port"):
            QandaConfig(port=port)

    def test_empty_model_rejected(self) -> None:
        with pytest.raises(ValueError):
            QandaConfig(model="  ")

    def test_empty_pattern_rejected(self) -> None:
        with pytest.raises(ValueError):
            PromptSettings(pattern="")

    def test_merge_policy_from_string(self) -> None:
        assert PromptSettings(merge_policy="replace").merge_policy == MergePolicy.REPLACE

    def test_directory_expands_user(self) -> None:
        assert PromptSettings(directory="~/p").get_directory() == Path.home() / "p"


class TestQandaHome:
    """Tests for get_qanda_home."""

    def test_env_override(self, qanda_home: Path) -> None:
        assert get_qanda_home() == qanda_home

    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("QANDA_HOME")

        assert get_qanda_home() == Path.home() / ".qanda"


class TestLoadYaml:
    """Tests for load_yaml."""

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_yaml(str(tmp_path / "missing.yaml")) == {}

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")

        assert load_yaml(str(path)) == {}

    def test_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text('{"model": "llama3"}', encoding="utf-8")

        assert load_yaml(str(path)) == {"model": "llama3"}

    def test_bad_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("model = 'x'", encoding="utf-8")

        with pytest.raises(ValueError, match="extension"):
            load_yaml(str(path))

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("model: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            load_yaml(str(path))


class TestApplyCliOverrides:
    """Tests for apply_cli_overrides."""

    def test_no_overrides(self) -> None:
        assert apply_cli_overrides({"a": 1}) == {"a": 1}

    def test_nested_keys(self) -> None:
        result = apply_cli_overrides({"prompts": {"pattern": "*.md"}}, {"prompts.directory": "/p"})

        assert result == {"prompts": {"pattern": "*.md", "directory": "/p"}}

    def test_none_values_ignored(self) -> None:
        assert apply_cli_overrides({"model": "m"}, {"model": None}) == {"model": "m"}


class TestLoadConfig:
    """Tests for load_config and save_config."""

    def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.safe_dump({"model": "llama3", "prompts": {"merge_policy": "replace"}}),
            encoding="utf-8",
        )

        config = load_config(str(path))

        assert config.model == "llama3"
        assert config.prompts.merge_policy == MergePolicy.REPLACE

    def test_cli_overrides_win(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("model: llama3\n", encoding="utf-8")

        config = load_config(str(path), cli_overrides={"model": "phi3"})

        assert config.model == "phi3"

    def test_default_location(self, qanda_home: Path) -> None:
        qanda_home.mkdir()
        (qanda_home / "config.yaml").write_text("port: 9999\n", encoding="utf-8")

        assert load_config().port == 9999

    def test_validation_error(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("port: -1\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Configuration validation failed"):
            load_config(str(path))

    def test_create_default(self, qanda_home: Path) -> None:
        config = load_config(create_default=True)

        assert (qanda_home / "config.yaml").exists()
        assert config == QandaConfig()

    def test_save_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.yaml"
        config = QandaConfig(model="llama3", prompts=PromptSettings(merge_policy="replace"))

        save_config(config, str(path))

        assert load_config(str(path)) == config
