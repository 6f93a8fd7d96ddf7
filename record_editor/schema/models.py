"""Models for records and their list/detail projections."""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from record_editor.introspection.rule_inferencer import WidgetType


@dataclass
class Record:
    """A normalized record held by the store."""

    handle: str
    values: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> Optional[str]:
        """Identity key, or None for drafts."""
        value = self.values.get("id")
        return value if value else None

    @property
    def is_draft(self) -> bool:
        """True when the record has not been persisted yet."""
        return self.id is None

    def get(self, key: str) -> str:
        """Value of a field, blank when absent."""
        return self.values.get(key, "")


@dataclass
class Column:
    """A list column, bound to one canonical key."""

    key: str
    label: str


@dataclass
class RowProjection:
    """One list row: values in column order plus the selection marker."""

    handle: str
    values: List[str] = field(default_factory=list)
    selected: bool = False


@dataclass
class DetailField:
    """One editable field of the detail form."""

    label: str
    key: str
    widget: WidgetType
    value: str = ""
    display_value: str = ""
    read_only: bool = False
    required: bool = False
    options: List[str] = field(default_factory=list)


@dataclass
class CollectionPage:
    """A fetched collection: page heading plus its normalized items."""

    name: str
    title: str = ""
    description: str = ""
    items: List[Dict[str, Any]] = field(default_factory=list)
