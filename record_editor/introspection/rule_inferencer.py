"""
Rule Inferencer - Derives display/edit rules for record fields from observed values.

Supports:
- Toggle, datetime, select, textarea, number and text widgets
- Read-only detection for identifiers, timestamps and audit fields
- Fixed protocol vocabulary selects
- Required-ness from fully populated columns
- Per-collection rule caching for the session
"""

from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, Iterable, List, Mapping, Optional
from enum import Enum
import logging
import re

from record_editor.utils.text import is_numeric, to_text

logger = logging.getLogger(__name__)


class WidgetType(str, Enum):
    """Widget kinds a field can be edited with"""
    TEXT = "text"
    NUMBER = "number"
    TOGGLE = "toggle"
    DATETIME = "datetime"
    SELECT = "select"
    TEXTAREA = "textarea"


@dataclass
class FieldRule:
    """Inferred display/edit rule for one field of a collection"""
    type: WidgetType = WidgetType.TEXT
    read_only: bool = False
    required: bool = False
    options: List[str] = dataclass_field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        data = {
            "type": self.type.value,
            "readOnly": self.read_only,
            "required": self.required,
        }
        if self.type == WidgetType.SELECT:
            data["options"] = list(self.options)
        return data


class RuleInferencer:
    """Infers field rules from a sample of normalized records"""

    # Transport-protocol style type tags offered as a fixed select
    PROTOCOL_TYPES = ["host", "ip", "url", "file", "service"]

    BOOLEAN_VALUES = {"true", "false"}
    TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")
    IDENTIFIER_PATTERN = re.compile(r"^[a-f0-9\-]{4,}$")
    METADATA_KEY_PATTERN = re.compile(r"author|modified|created|updated")

    MAX_SELECT_OPTIONS = 10
    MAX_OPTION_LENGTH = 20
    TEXTAREA_THRESHOLD = 100

    def infer_rules(self, records: Optional[List[Mapping[str, Any]]]) -> Dict[str, FieldRule]:
        """
        Infer a rule for every field of the first record

        Args:
            records: Normalized records of one collection

        Returns:
            {field_name: FieldRule}; empty for empty or missing input
        """
        if not records:
            return {}

        observed = self._collect_values(records)

        rules = {}
        for key in records[0].keys():
            values = observed.get(key, [])
            rule = self._classify(key, values)

            if all(to_text(record.get(key)).strip() != "" for record in records):
                rule.required = True

            rules[key] = rule

        logger.info(f"Inferred rules for {len(rules)} fields from {len(records)} records")
        return rules

    def fallback_rule(self, key: str) -> FieldRule:
        """Rule for a field that has no inferred rule (e.g. drafts of an empty collection)"""
        if key == "id" or self.METADATA_KEY_PATTERN.search(key):
            return FieldRule(type=WidgetType.TEXT, read_only=True)
        return FieldRule(type=WidgetType.TEXT)

    def _collect_values(self, records: Iterable[Mapping[str, Any]]) -> Dict[str, List[str]]:
        """Distinct trimmed text values per key, in first-seen order"""
        seen: Dict[str, Dict[str, None]] = {}
        for record in records:
            for key, value in record.items():
                bucket = seen.setdefault(key, {})
                if value is not None:
                    bucket[to_text(value).strip()] = None
        return {key: list(bucket) for key, bucket in seen.items()}

    def _classify(self, key: str, values: List[str]) -> FieldRule:
        """Classify one field; first matching branch wins"""
        sample = values[0] if values else None

        if all(v in self.BOOLEAN_VALUES for v in values):
            return FieldRule(type=WidgetType.TOGGLE)

        if sample is not None and self.TIMESTAMP_PATTERN.match(sample):
            return FieldRule(type=WidgetType.DATETIME, read_only=True)

        if key == "id" or (values and all(self.IDENTIFIER_PATTERN.match(v) for v in values)):
            return FieldRule(type=WidgetType.TEXT, read_only=True)

        if self.METADATA_KEY_PATTERN.search(key):
            return FieldRule(type=WidgetType.TEXT, read_only=True)

        if sample is not None and sample.lower() in self.PROTOCOL_TYPES:
            return FieldRule(
                type=WidgetType.SELECT,
                required=True,
                options=list(self.PROTOCOL_TYPES),
            )

        if 1 < len(values) <= self.MAX_SELECT_OPTIONS and all(
            len(v) < self.MAX_OPTION_LENGTH for v in values
        ):
            return FieldRule(type=WidgetType.SELECT, options=list(values))

        if sample is not None and len(sample) > self.TEXTAREA_THRESHOLD:
            return FieldRule(type=WidgetType.TEXTAREA)

        return FieldRule(type=WidgetType.NUMBER if is_numeric(sample) else WidgetType.TEXT)


class RuleCache:
    """
    Session cache of inferred rules, keyed by collection name

    A collection is scanned once; later lookups return the cached rules
    even if the records have changed since. Nothing invalidates entries
    automatically.

    Usage:
    ```python
    cache = RuleCache()
    rules = cache.rules_for("servers", records)
    ```
    """

    def __init__(self, inferencer: Optional[RuleInferencer] = None):
        self.inferencer = inferencer or RuleInferencer()
        self._rules: Dict[str, Dict[str, FieldRule]] = {}

    def rules_for(self, collection: str, records: Optional[List[Mapping[str, Any]]]) -> Dict[str, FieldRule]:
        """Get cached rules for a collection, inferring them on first use"""
        if collection in self._rules:
            logger.debug(f"Using cached rules for '{collection}'")
            return self._rules[collection]

        rules = self.inferencer.infer_rules(records)
        self._rules[collection] = rules
        return rules

    def get(self, collection: str) -> Optional[Dict[str, FieldRule]]:
        """Cached rules for a collection, or None if never inferred"""
        return self._rules.get(collection)

    def invalidate(self, collection: str) -> None:
        """Forget the rules of one collection"""
        self._rules.pop(collection, None)

    def clear(self) -> None:
        """Forget all cached rules"""
        self._rules.clear()

    def __contains__(self, collection: str) -> bool:
        return collection in self._rules
