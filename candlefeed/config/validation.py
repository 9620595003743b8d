"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..data.models import InstrumentKind

SOURCE_FORMATS = ("csv", "json")
MALFORMED_ROW_MODES = ("abort", "skip")
ORDERING_MODES = ("sort", "strict")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_market_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate market identifiers."""
        errors = []

        for name in ("exchange", "base", "quote"):
            value = params.get(name)
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field=f"market.{name}",
                    message="Must be a non-empty string",
                    value=value
                ))

        kind = params.get("kind")
        if kind not in [k.value for k in InstrumentKind]:
            errors.append(ValidationError(
                field="market.kind",
                message=f"Must be one of {[k.value for k in InstrumentKind]}",
                value=kind
            ))

        return errors

    @staticmethod
    def validate_source_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate source decoding parameters."""
        errors = []

        path = params.get("path")
        if path is not None and (not isinstance(path, str) or not path.strip()):
            errors.append(ValidationError(
                field="source.path",
                message="Must be a non-empty string",
                value=path
            ))

        if params.get("format") not in SOURCE_FORMATS:
            errors.append(ValidationError(
                field="source.format",
                message=f"Must be one of {list(SOURCE_FORMATS)}",
                value=params.get("format")
            ))

        if params.get("on_malformed_row") not in MALFORMED_ROW_MODES:
            errors.append(ValidationError(
                field="source.on_malformed_row",
                message=f"Must be one of {list(MALFORMED_ROW_MODES)}",
                value=params.get("on_malformed_row")
            ))

        if params.get("ordering") not in ORDERING_MODES:
            errors.append(ValidationError(
                field="source.ordering",
                message=f"Must be one of {list(ORDERING_MODES)}",
                value=params.get("ordering")
            ))

        return errors

    @staticmethod
    def validate_channel_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate event channel parameters."""
        errors = []

        capacity = params.get("capacity")
        if capacity is not None and (isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0):
            errors.append(ValidationError(
                field="channel.capacity",
                message="Must be a positive integer or null",
                value=capacity
            ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        level = params.get("level")
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            errors.append(ValidationError(
                field="logging.level",
                message=f"Must be one of {list(LOG_LEVELS)}",
                value=level
            ))

        if not isinstance(params.get("format_json"), bool):
            errors.append(ValidationError(
                field="logging.format_json",
                message="Must be a boolean",
                value=params.get("format_json")
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        section_validators = {
            "market": ConfigValidator.validate_market_params,
            "source": ConfigValidator.validate_source_params,
            "channel": ConfigValidator.validate_channel_params,
            "logging": ConfigValidator.validate_logging_params,
        }

        for section, validate in section_validators.items():
            if section not in config:
                continue
            params = config[section]
            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping of parameters",
                    value=params
                ))
                continue
            errors.extend(validate(params))

        return errors
