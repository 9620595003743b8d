"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    ChannelParams,
    DefaultConfig,
    LoggingParams,
    MarketParams,
    SourceParams,
    get_default_config,
)
from .validation import ConfigValidator

CONFIG_FILENAME = "replay.yaml"

_SECTIONS = {
    "market": MarketParams,
    "source": SourceParams,
    "channel": ChannelParams,
    "logging": LoggingParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from replay.yaml in the config directory, if present."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        try:
            with open(config_file) as f:
                file_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{config_file} must contain a mapping, got {type(file_config).__name__}")

        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides, e.g. command line (highest priority)
        2. replay.yaml in the config directory
        3. Global defaults (lowest priority)
        """
        config = asdict(self.defaults)

        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def build_replay_config(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """
        Merge, validate and type the replay configuration.

        Raises:
            ConfigurationError: If a section or key is unknown or a value is
                invalid
        """
        config = self.merge_config(overrides)

        unknown = [section for section in config if section not in _SECTIONS]
        if unknown:
            raise ConfigurationError(f"Unknown configuration sections: {unknown}")

        errors = ConfigValidator.validate_config(config)
        if errors:
            details = "; ".join(f"{err.field}: {err.message} (got: {err.value!r})" for err in errors)
            raise ConfigurationError(f"Invalid configuration: {details}", errors=errors)

        sections = {}
        for section, params_cls in _SECTIONS.items():
            known = {f.name for f in fields(params_cls)}
            values = config.get(section, {})
            extra = sorted(set(values) - known)
            if extra:
                raise ConfigurationError(f"Unknown keys in '{section}': {extra}")
            sections[section] = params_cls(**values)

        return DefaultConfig(**sections)

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
