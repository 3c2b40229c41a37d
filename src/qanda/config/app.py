"""
Configuration management for Qanda.

Provides YAML-based configuration with CLI overrides,
configuration hierarchy (CLI > YAML > Defaults), and validation.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from qanda.prompts.collection import MergePolicy


def get_qanda_home() -> Path:
    """Get qanda home directory, respecting QANDA_HOME env var.

    Returns:
        Path to qanda home (~/.qanda by default, or QANDA_HOME if set)
    """
    qanda_home = os.environ.get("QANDA_HOME")
    if qanda_home:
        return Path(qanda_home)
    return Path.home() / ".qanda"


def default_config_file() -> str:
    """Default path of the YAML configuration file."""
    return str(get_qanda_home() / "config.yaml")


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["debug", "info", "warning", "error"] = Field(
        default="warning",
        description="Log level",
    )


class PromptSettings(BaseModel):
    """Prompt template loading configuration."""

    directory: str = Field(
        default_factory=lambda: str(get_qanda_home() / "prompts"),
        description="Directory holding prompts files",
    )
    pattern: str = Field(
        default="*.prompts.md",
        description="Glob pattern selecting prompts files in the directory",
    )
    require_names: bool = Field(
        default=True,
        description="Reject templates without a name header",
    )
    merge_policy: MergePolicy = Field(
        default=MergePolicy.ACCUMULATE,
        description="How duplicate names across files are merged: 'accumulate' keeps "
        "both (the first wins on lookup), 'replace' overwrites the earlier prompt",
    )
    create_default: bool = Field(
        default=True,
        description="Create a default prompts file when the directory has none",
    )

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Validate pattern is non-empty."""
        if not v.strip():
            raise ValueError("pattern must not be empty")
        return v

    def get_directory(self) -> Path:
        """Return the prompts directory with `~` expanded."""
        return Path(self.directory).expanduser()


class QandaConfig(BaseModel):
    """
    Main configuration for Qanda.

    Configuration is loaded with the following priority:
    1. CLI arguments (highest)
    2. YAML file (~/.qanda/config.yaml)
    3. Defaults (lowest)
    """

    provider: str = Field(
        default="ollama",
        description="Model provider name",
    )
    model: str = Field(
        default="mistral",
        description="Default model, used when a prompt does not name one",
    )
    host: str = Field(
        default="localhost",
        description="Host of the model backend",
    )
    port: int = Field(
        default=11434,
        description="Port of the model backend",
    )
    model_options: dict[str, dict[str, Any]] = Field(
        default_factory=lambda: {"ollama": {"think": False}},
        description="Request fields sent with every request, per provider",
    )

    # Sub-configs
    prompts: PromptSettings = Field(
        default_factory=PromptSettings,
        description="Prompt template loading configuration",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("provider", "model", "host")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Validate value is non-empty."""
        if not v.strip():
            raise ValueError("Value must not be empty")
        return v

    def get_provider_options(self) -> dict[str, Any]:
        """Return the default request fields for the configured provider."""
        return dict(self.model_options.get(self.provider, {}))


def load_yaml(config_file: str) -> dict[str, Any]:
    """
    Load YAML or JSON configuration file.

    Args:
        config_file: Path to YAML or JSON configuration file

    Returns:
        Dictionary with parsed YAML/JSON content

    Raises:
        ValueError: If YAML/JSON is invalid or file format is wrong
    """
    config_path = Path(config_file).expanduser()

    if not config_path.exists():
        return {}

    # Validate file extension matches format
    file_ext = config_path.suffix.lower()
    if file_ext not in [".yaml", ".yml", ".json"]:
        raise ValueError(
            f"Config file must have .yaml, .yml, or .json extension, got: {file_ext}\n"
            f"File: {config_path}"
        )

    try:
        content = config_path.read_text(encoding="utf-8")

        if file_ext == ".json":
            return json.loads(content) if content.strip() else {}

        data = yaml.safe_load(content)
        return data if data is not None else {}

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}") from e


def apply_cli_overrides(
    config_dict: dict[str, Any],
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Apply CLI argument overrides to config dictionary.

    Args:
        config_dict: Configuration dictionary
        cli_overrides: Dictionary of CLI overrides, nested keys as "prompts.directory"

    Returns:
        Configuration dictionary with CLI overrides applied
    """
    if cli_overrides is None:
        return config_dict

    for key, value in cli_overrides.items():
        if value is None:
            continue
        if "." in key:
            parts = key.split(".")
            current = config_dict
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[parts[-1]] = value
        else:
            config_dict[key] = value

    return config_dict


def generate_default_config(config_file: str) -> None:
    """
    Generate default configuration file from Pydantic model defaults.

    Args:
        config_file: Path where to create the config file
    """
    save_config(QandaConfig(), config_file)


def load_config(
    config_file: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
    create_default: bool = False,
) -> QandaConfig:
    """
    Load configuration with hierarchy: CLI > YAML > Defaults.

    Args:
        config_file: Path to YAML config file (default: ~/.qanda/config.yaml)
        cli_overrides: Dictionary of CLI argument overrides
        create_default: Create default config file if it doesn't exist

    Returns:
        Validated QandaConfig instance

    Raises:
        ValueError: If configuration is invalid
    """
    if config_file is None:
        config_file = default_config_file()

    config_path = Path(config_file).expanduser()

    if create_default and not config_path.exists():
        generate_default_config(config_file)

    config_dict = load_yaml(config_file)
    config_dict = apply_cli_overrides(config_dict, cli_overrides)

    try:
        return QandaConfig(**config_dict)
    except Exception as e:
        raise ValueError(
            f"Configuration validation failed: {e}\n"
            f"Please check your configuration file at {config_file}"
        ) from e


def save_config(config: QandaConfig, config_file: str | None = None) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: QandaConfig instance to save
        config_file: Path to YAML config file (default: ~/.qanda/config.yaml)

    Raises:
        OSError: If file operations fail
    """
    if config_file is None:
        config_file = default_config_file()

    config_path = Path(config_file).expanduser()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump(mode="json", exclude_none=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)
