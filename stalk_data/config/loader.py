"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .defaults import DefaultConfig, get_default_config
from .validation import ConfigValidator


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

    def load_settings(self) -> dict[str, Any]:
        """Load deployment overrides from settings.yaml, if present."""
        settings_file = self.config_dir / "settings.yaml"

        if not settings_file.exists():
            return {}

        with open(settings_file) as f:
            settings = yaml.safe_load(f)

        return settings or {}

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Runtime overrides (highest priority)
        2. settings.yaml in the config directory
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_settings())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def build(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """
        Merge, validate and convert configuration back into typed parameters.

        Raises:
            ValueError: if any merged parameter fails validation
        """
        merged = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value!r})" for err in errors]
            raise ValueError("Invalid configuration: " + "; ".join(error_msgs))

        sections = {}
        for section in fields(self.defaults):
            params_cls = type(getattr(self.defaults, section.name))
            values = merged.get(section.name, {})
            sections[section.name] = params_cls(**{
                key: tuple(value) if isinstance(value, list) else value
                for key, value in values.items()
            })

        return DefaultConfig(**sections)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
