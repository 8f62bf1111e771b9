"""
CLI Output Formatting

Renders results as aligned tables or JSON.
"""

import json
import sys
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any, Dict, List


def _as_dict(obj: Any) -> Dict[str, Any]:
    return asdict(obj) if is_dataclass(obj) else dict(obj)


def _label(key: str) -> str:
    return str(key).replace("_", " ").title()


def format_output(data: Any, format: str = "table") -> str:
    """
    Format data for output.

    Args:
        data: Dataclass, dict, list of dataclasses or plain value
        format: "table" or "json"

    Returns:
        Formatted string
    """
    if format == "json":
        return format_json(data)
    return format_table(data)


def format_json(data: Any) -> str:
    """Format data as indented JSON; datetimes become ISO 8601 strings."""
    def serialize(obj):
        if is_dataclass(obj):
            return serialize(asdict(obj))
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, (list, tuple)):
            return [serialize(item) for item in obj]
        if isinstance(obj, dict):
            return {k: serialize(v) for k, v in obj.items()}
        return obj

    return json.dumps(serialize(data), indent=2, default=str)


def format_table(data: Any) -> str:
    """Format data as human-readable text."""
    if data is None:
        return "No data"

    if isinstance(data, list):
        if not data:
            return "No results"
        if is_dataclass(data[0]):
            return format_list_table(data)
        return "\n".join(str(item) for item in data)

    if is_dataclass(data) or isinstance(data, dict):
        return format_key_value(data)

    return str(data)


def format_key_value(data: Any) -> str:
    """Key/value listing; None values and empty lists are skipped."""
    rows = [
        (_label(key), format_value(value))
        for key, value in _as_dict(data).items()
        if value is not None and value != []
    ]
    if not rows:
        return "No data"

    width = max(len(label) for label, _ in rows) + 2
    return "\n".join(f"{label.ljust(width)}: {value}" for label, value in rows)


def format_list_table(items: List[Any]) -> str:
    """Column table for a list of dataclasses."""
    records = [_as_dict(item) for item in items]
    headers = list(records[0].keys())

    cells = [[format_value(rec.get(h), short=True) for h in headers] for rec in records]
    widths = [
        max([len(_label(h))] + [len(row[i]) for row in cells])
        for i, h in enumerate(headers)
    ]

    lines = [
        "  ".join(_label(h).ljust(w) for h, w in zip(headers, widths)),
        "  ".join("-" * w for w in widths),
    ]
    for row in cells:
        lines.append("  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip())

    return "\n".join(lines)


def format_value(value: Any, short: bool = False) -> str:
    """
    Format a single value for display.

    Args:
        value: Value to format
        short: Abbreviate long lists and dates (table cells)
    """
    if value is None:
        return ""

    if isinstance(value, bool):
        return "Yes" if value else "No"

    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d" if short else "%Y-%m-%d %H:%M:%S")

    if isinstance(value, list):
        parts = [format_value(v, short=True) for v in value]
        if short and len(parts) > 2:
            return f"{parts[0]}, ... ({len(parts)} total)"
        return ", ".join(parts)

    if isinstance(value, dict):
        # Nested dataclasses arrive here via asdict()
        for key in ("name", "id", "status", "s"):
            if value.get(key):
                return str(value[key])
        if short:
            return f"({len(value)} items)"
        return ", ".join(f"{k}={v}" for k, v in value.items() if v is not None)

    if is_dataclass(value):
        return format_value(asdict(value), short)

    return str(value)


def print_success(message: str) -> None:
    """Print success message."""
    print(f"SUCCESS: {message}")


def print_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"ERROR: {message}", file=sys.stderr)


def print_info(message: str) -> None:
    print(f"INFO: {message}")


class OutputFormatter:
    """Holds the selected output format and quiet flag for one CLI run."""

    def __init__(self, format: str = "table", quiet: bool = False):
        self.format = format
        self.quiet = quiet

    def output(self, data: Any) -> None:
        print(format_output(data, self.format))

    def success(self, message: str) -> None:
        if not self.quiet:
            print_success(message)

    def info(self, message: str) -> None:
        if not self.quiet:
            print_info(message)
