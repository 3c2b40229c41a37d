"""
Configuration package for Qanda.

Pydantic config models and the YAML loader:
- app.py: QandaConfig, PromptSettings, LoggingSettings and load/save helpers
"""

from qanda.config.app import (
    LoggingSettings,
    PromptSettings,
    QandaConfig,
    apply_cli_overrides,
    get_qanda_home,
    load_config,
    load_yaml,
    save_config,
)

__all__ = [
    "LoggingSettings",
    "PromptSettings",
    "QandaConfig",
    "apply_cli_overrides",
    "get_qanda_home",
    "load_config",
    "load_yaml",
    "save_config",
]
