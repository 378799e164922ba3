"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from .defaults import get_default_config


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_key_list(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(isinstance(item, str) and item for item in value)
    )


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_cache_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate symbol cache parameters."""
        errors = []

        if "ttl_seconds" in params:
            value = params["ttl_seconds"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="cache.ttl_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_metadata_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate metadata resolution parameters."""
        errors = []

        if "candidate_paths" in params:
            value = params["candidate_paths"]
            if not _is_key_list(value) or not all("{symbol}" in path for path in value):
                errors.append(ValidationError(
                    field="metadata.candidate_paths",
                    message="Must be a non-empty list of paths containing '{symbol}'",
                    value=value
                ))

        if "market_cap_keys" in params and not _is_key_list(params["market_cap_keys"]):
            errors.append(ValidationError(
                field="metadata.market_cap_keys",
                message="Must be a non-empty list of field names",
                value=params["market_cap_keys"]
            ))

        return errors

    @staticmethod
    def validate_price_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate price series parameters."""
        errors = []

        if "window_size" in params:
            value = params["window_size"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                errors.append(ValidationError(
                    field="prices.window_size",
                    message="Must be a positive integer",
                    value=value
                ))

        if "collection_path" in params:
            value = params["collection_path"]
            if not isinstance(value, str) or "{symbol}" not in value:
                errors.append(ValidationError(
                    field="prices.collection_path",
                    message="Must be a path containing '{symbol}'",
                    value=value
                ))

        for key in ("close_keys", "open_keys", "high_keys", "low_keys", "volume_keys"):
            if key in params and not _is_key_list(params[key]):
                errors.append(ValidationError(
                    field=f"prices.{key}",
                    message="Must be a non-empty list of field names",
                    value=params[key]
                ))

        return errors

    @staticmethod
    def validate_universe_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate the tracked symbol universe."""
        errors = []

        if "symbols" in params:
            value = params["symbols"]
            if not isinstance(value, (list, tuple)) or not all(
                isinstance(symbol, str) and symbol.strip() for symbol in value
            ):
                errors.append(ValidationError(
                    field="universe.symbols",
                    message="Must be a list of non-blank symbols",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_usage_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate usage aggregation parameters."""
        errors = []

        for key in ("sample_limit", "top_n"):
            if key in params:
                value = params[key]
                if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                    errors.append(ValidationError(
                        field=f"usage.{key}",
                        message="Must be a positive integer",
                        value=value
                    ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate a complete merged configuration dict."""
        errors = []
        defaults = get_default_config()

        section_validators = {
            "cache": cls.validate_cache_params,
            "metadata": cls.validate_metadata_params,
            "prices": cls.validate_price_params,
            "universe": cls.validate_universe_params,
            "usage": cls.validate_usage_params,
        }

        for section, params in config.items():
            if section not in section_validators:
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=params
                ))
                continue

            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue

            known = getattr(defaults, section).__dataclass_fields__
            for key in params:
                if key not in known:
                    errors.append(ValidationError(
                        field=f"{section}.{key}",
                        message="Unknown parameter",
                        value=params[key]
                    ))

            errors.extend(section_validators[section](params))

        return errors
