"""Text helpers shared by the mapper, inferencer and views."""
import re
from datetime import datetime, timezone
from typing import Any

CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
WORD_START = re.compile(r"\b\w")
NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$", re.ASCII)


def to_text(value: Any) -> str:
    """Render a wire value as the text the editor works with."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_dashed(key: str) -> str:
    """itemName / item_name -> item-name"""
    return CAMEL_BOUNDARY.sub(r"\1-\2", key or "").replace("_", "-").lower()


def humanize_label(key: str) -> str:
    """
    Build a column/field label from a canonical key.

    Examples:
        itemName -> Name
        server_type -> Server Type
        os -> Os
    """
    dashed = to_dashed(key)
    if dashed.startswith("item-"):
        dashed = dashed[len("item-"):]
    spaced = dashed.replace("-", " ").strip()
    return WORD_START.sub(lambda m: m.group(0).upper(), spaced)


def is_numeric(value: str) -> bool:
    """Check if a text value is a plain decimal number (no nan, inf or 1_000)."""
    if value is None:
        return False
    return NUMBER_PATTERN.match(str(value).strip()) is not None


def format_datetime_for_input(value: str) -> str:
    """2024-01-01T08:30:00Z -> 2024-01-01T08:30 (blank when unparseable)"""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return ""
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M")
