"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

MESSAGE_FORMATS = ("pretty", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_session_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate session parameters."""
        errors = []

        if "default_plan" in params:
            value = params["default_plan"]
            if not _is_non_empty_str(value):
                errors.append(ValidationError(
                    field="default_plan",
                    message="Must be a non-empty plan identifier",
                    value=value
                ))

        if "allow_restart" in params:
            value = params["allow_restart"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="allow_restart",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_history_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate history parameters."""
        errors = []

        if "max_entries" in params:
            value = params["max_entries"]
            if not _is_positive_int(value):
                errors.append(ValidationError(
                    field="max_entries",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_stats_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate statistics parameters."""
        errors = []

        for field_name in ("chart_days", "streak_scan_days"):
            if field_name in params:
                value = params[field_name]
                if not _is_positive_int(value):
                    errors.append(ValidationError(
                        field=field_name,
                        message="Must be a positive integer",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_clock_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate ticker parameters."""
        errors = []

        if "tick_interval_seconds" in params:
            value = params["tick_interval_seconds"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                errors.append(ValidationError(
                    field="tick_interval_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_storage_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate storage parameters."""
        errors = []

        for field_name in ("db_path", "state_key"):
            if field_name in params:
                value = params[field_name]
                if not _is_non_empty_str(value):
                    errors.append(ValidationError(
                        field=field_name,
                        message="Must be a non-empty string",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_message_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate message output parameters."""
        errors = []

        if "format" in params:
            value = params["format"]
            if value not in MESSAGE_FORMATS:
                errors.append(ValidationError(
                    field="format",
                    message=f"Must be one of {', '.join(MESSAGE_FORMATS)}",
                    value=value
                ))

        if "include_timestamp" in params:
            value = params["include_timestamp"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="include_timestamp",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_notification_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate platform notification parameters."""
        errors = []

        if "command" in params:
            value = params["command"]
            if not _is_non_empty_str(value):
                errors.append(ValidationError(
                    field="command",
                    message="Must be a non-empty command name",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_export_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate CSV export parameters."""
        errors = []

        if "output_dir" in params:
            value = params["output_dir"]
            if not _is_non_empty_str(value):
                errors.append(ValidationError(
                    field="output_dir",
                    message="Must be a non-empty path",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params:
            value = params["format_json"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="format_json",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        validators = {
            "session": ConfigValidator.validate_session_params,
            "history": ConfigValidator.validate_history_params,
            "stats": ConfigValidator.validate_stats_params,
            "clock": ConfigValidator.validate_clock_params,
            "storage": ConfigValidator.validate_storage_params,
            "messages": ConfigValidator.validate_message_params,
            "notifications": ConfigValidator.validate_notification_params,
            "export": ConfigValidator.validate_export_params,
            "logging": ConfigValidator.validate_logging_params,
        }

        for section, validate in validators.items():
            params = config.get(section)
            if isinstance(params, dict):
                errors.extend(validate(params))
            elif params is not None:
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))

        return errors
