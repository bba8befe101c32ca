"""Engine configuration loading.

Resolution order for the default display strategy:
1. Environment variable FORMSIGHT_DEFAULT_STRATEGY
2. Config file passed with ``--config``
3. User config at ~/.config/formsight/config.yaml
4. Built-in default (``on-touch``)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from formsight.errors import ConfigError
from formsight.models.field import DisplayStrategy
from formsight.observability.logging import get_logger

log = get_logger(__name__)

DEFAULT_STRATEGY = DisplayStrategy.ON_TOUCH
STRATEGY_ENV_VAR = "FORMSIGHT_DEFAULT_STRATEGY"

# XDG-compliant default config directory
_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "formsight"


@dataclass
class EngineConfig:
    """Defaults applied when the caller does not choose explicitly.

    Attributes:
        default_strategy: Strategy used when neither field nor form sets one.
        strip_warning_prefix: Drop ``warn:`` when humanising a warning kind.
        messages: Message text registry keyed by kind.
    """

    default_strategy: DisplayStrategy = DEFAULT_STRATEGY
    strip_warning_prefix: bool = False
    messages: dict[str, str] = field(default_factory=dict)

    def effective_strategy(self) -> DisplayStrategy:
        """Default strategy after applying the environment override.

        Raises:
            ConfigError: If the environment variable names an unknown strategy.
        """
        override = os.getenv(STRATEGY_ENV_VAR)
        if not override:
            return self.default_strategy
        try:
            return DisplayStrategy(override)
        except ValueError as e:
            raise ConfigError(f"${STRATEGY_ENV_VAR}", f"unknown strategy {override!r}") from e

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<dict>") -> EngineConfig:
        """Create config from a decoded mapping.

        Raises:
            ConfigError: If a value has the wrong type or names an unknown strategy.
        """
        strategy_raw = data.get("default_strategy", DEFAULT_STRATEGY)
        try:
            strategy = DisplayStrategy(strategy_raw)
        except ValueError as e:
            raise ConfigError(source, f"unknown default_strategy {strategy_raw!r}") from e

        strip = data.get("strip_warning_prefix", False)
        if not isinstance(strip, bool):
            raise ConfigError(source, "strip_warning_prefix must be true or false")

        messages = data.get("messages") or {}
        if not isinstance(messages, dict) or not all(
            isinstance(v, str) for v in messages.values()
        ):
            raise ConfigError(source, "messages must map kinds to strings")

        return cls(
            default_strategy=strategy,
            strip_warning_prefix=strip,
            messages={str(k): v for k, v in messages.items()},
        )


def load_config(path: Path) -> EngineConfig:
    """Load engine configuration from a YAML file.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if not path.exists():
        raise ConfigError(str(path), "file not found")

    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except OSError as e:
        raise ConfigError(str(path), str(e)) from e
    except YAMLError as e:
        raise ConfigError(str(path), f"YAML parse error: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(str(path), "top level must be a mapping")

    config = EngineConfig.from_dict(data, source=str(path))
    log.debug("config_loaded", path=str(path), default_strategy=str(config.default_strategy))
    return config


def load_user_config(config_dir: Path | None = None) -> EngineConfig | None:
    """Load the user-level config, or None if there is none.

    Args:
        config_dir: Override config directory (for testing).
            Defaults to ~/.config/formsight/.
    """
    config_path = (config_dir or _DEFAULT_CONFIG_DIR) / "config.yaml"
    if not config_path.exists():
        return None
    return load_config(config_path)


def resolve_config(path: Path | None = None, config_dir: Path | None = None) -> EngineConfig:
    """Explicit config file, else user config, else built-in defaults."""
    if path is not None:
        return load_config(path)
    return load_user_config(config_dir) or EngineConfig()
