"""Warehouse configuration loading.

Reads a JSON layout file, validates it against the pydantic schema and
reports problems as a single ConfigError carrying a category and
per-field details.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from slotting.application.config.schema import WarehouseConfiguration


class ConfigError(Exception):
    """Raised when a warehouse configuration cannot be loaded.

    Attributes:
        message: The primary error message
        error_type: One of file_not_found, permission_denied,
            file_read_error, json_parse, validation
        path: Path to the configuration file (if applicable)
        details: Per-problem details (line/column for JSON errors, field
            path and message for validation errors)
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Render a pydantic error location as a JSON path.

    Examples:
        >>> _format_json_path(("settings", "remainder_threshold"))
        'settings.remainder_threshold'
        >>> _format_json_path(("homes", 0, "lanes", "end"))
        'homes[0].lanes.end'
    """
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        else:
            path += f".{segment}" if path else str(segment)
    return path


def _validation_details(error: PydanticValidationError) -> list[dict[str, Any]]:
    return [
        {
            "path": _format_json_path(err["loc"]),
            "message": err["msg"],
            "value": err.get("input"),
            "error_type": err["type"],
        }
        for err in error.errors()
    ]


def _summarize(details: list[dict[str, Any]]) -> str:
    lines = ["Configuration validation failed:"]
    for detail in details:
        line = f"  - {detail['path'] or '<root>'}: {detail['message']}"
        value = detail.get("value")
        if value is not None and not isinstance(value, (dict, list)):
            line += f" (got: {value!r})"
        lines.append(line)
    return "\n".join(lines)


def _validate(data: Any, path: Path | None = None) -> WarehouseConfiguration:
    try:
        return WarehouseConfiguration.model_validate(data)
    except PydanticValidationError as e:
        details = _validation_details(e)
        raise ConfigError(
            message=_summarize(details),
            error_type="validation",
            path=path,
            details=details,
        ) from e


def load_config(path: Path) -> WarehouseConfiguration:
    """Load and validate a warehouse configuration file.

    Raises:
        ConfigError: If the file is missing or unreadable, is not valid JSON,
            or does not match the schema. ``error_type`` tells which.

    Example:
        >>> config = load_config(Path("warehouse.json"))
        >>> config.warehouse_id
        'WH-01'
    """
    if not path.exists():
        raise ConfigError(
            message=f"Config file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigError(
            message=f"Permission denied reading config file: {path}",
            error_type="permission_denied",
            path=path,
        ) from e
    except OSError as e:
        raise ConfigError(
            message=f"Error reading config file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        ) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=(
                f"Invalid JSON in config file: {path} "
                f"(line {e.lineno}, column {e.colno}): {e.msg}"
            ),
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e

    return _validate(data, path)


def load_config_from_dict(data: dict[str, Any]) -> WarehouseConfiguration:
    """Validate a configuration given as a dictionary (e.g. an API payload).

    Raises:
        ConfigError: If the data fails validation.
    """
    return _validate(data)
