"""
View Synchronizer - Keeps the list and detail projections of a collection in lockstep.

Handles:
- Column registry built once per collection load
- Row projections with exclusive selection markers
- Detail projection driven by inferred field rules
- Live mirroring of detail edits into the selected row
- Dirty snapshot, validity and confirmation gates
- Save/delete round trips through the record API
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional

from record_editor.exceptions import DuplicateIdError, RecordBusyError, TransportError
from record_editor.introspection.rule_inferencer import FieldRule, RuleCache, WidgetType
from record_editor.mapper.key_mapper import KeyMapper
from record_editor.schema.models import CollectionPage, Column, DetailField, Record, RowProjection
from record_editor.store.record_store import RecordStore
from record_editor.sync.confirm_gate import ConfirmGates
from record_editor.utils.text import format_datetime_for_input, humanize_label, is_numeric

logger = logging.getLogger(__name__)


@dataclass
class EditorEvent:
    """A discrete user action delivered to the synchronizer"""
    kind: str
    payload: Dict[str, Any] = field(default_factory=dict)


class ViewSynchronizer:
    """
    Owns the active collection and exposes its list/detail projections

    Usage:
    ```python
    sync = ViewSynchronizer(client)
    sync.open("servers")
    sync.select("42")
    sync.edit("name", "edge-01")   # row for "42" shows "edge-01" right away
    sync.save()
    ```
    """

    NOTHING_TO_SAVE = "Nothing to save or reset."
    COMPLETE_REQUIRED = "Please complete required fields."
    UNSAVED_WARNING = "Unsaved changes: save, reset or repeat the action to discard them."

    EVENT_HANDLERS = {
        "open": "open",
        "select": "select",
        "toggle_row": "toggle_row",
        "edit": "edit",
        "create": "create",
        "save": "save",
        "reset": "reset",
        "delete": "delete",
        "close": "close",
        "blur": "blur",
    }

    def __init__(
        self,
        client,
        key_mapper: Optional[KeyMapper] = None,
        rule_cache: Optional[RuleCache] = None,
        store: Optional[RecordStore] = None,
        warn_on_blur: bool = True,
    ):
        """
        Initialize synchronizer

        Args:
            client: Record API client (fetch/create/update/delete)
            key_mapper: Wire <-> canonical key mapper
            rule_cache: Session rule cache shared with other consumers
            store: Record store (created around the client if omitted)
            warn_on_blur: Arm save/delete confirmation when focus is lost with unsaved edits
        """
        self.client = client
        self.key_mapper = key_mapper or KeyMapper()
        self.rule_cache = rule_cache or RuleCache()
        self.store = store if store is not None else RecordStore(transport=client)
        self.warn_on_blur = warn_on_blur
        self.gates = ConfirmGates()

        self.collection: Optional[str] = None
        self.title = ""
        self.description = ""
        self.notice: Optional[str] = None
        self.saved_message: Optional[str] = None
        self.columns: List[Column] = []
        self.rules: Dict[str, FieldRule] = {}
        self.snapshot: Dict[str, str] = {}

        self._dispatching = False
        self._queue: Deque[EditorEvent] = deque()

    def dispatch(self, event: EditorEvent) -> Any:
        """
        Process one event to completion

        Events raised while another event is running are queued and
        processed after it, in arrival order. If a handler raises, the
        events still queued are dropped.
        """
        if event.kind not in self.EVENT_HANDLERS:
            raise ValueError(f"Unknown event kind: {event.kind}")

        if self._dispatching:
            self._queue.append(event)
            return None

        self._dispatching = True
        try:
            result = self._handle(event)
            while self._queue:
                self._handle(self._queue.popleft())
        finally:
            self._dispatching = False
            self._queue.clear()
        return result

    def _handle(self, event: EditorEvent) -> Any:
        handler = getattr(self, self.EVENT_HANDLERS[event.kind])
        return handler(**event.payload)

    def open(self, collection: str) -> bool:
        """Switch to a collection, guarded against discarding unsaved edits"""
        if not collection:
            return False
        if not self.gates["save"].request(self.has_unsaved_changes):
            self.notice = self.UNSAVED_WARNING
            return False
        return self._load_collection(collection)

    def reload(self) -> bool:
        """Fetch the active collection again"""
        if self.collection is None:
            return False
        return self._load_collection(self.collection)

    def _load_collection(self, collection: str) -> bool:
        try:
            raw_page = self.client.fetch_page(collection)
        except TransportError as e:
            logger.warning(f"Failed to fetch '{collection}': {e}")
            self.notice = self._fetch_error_message(collection, e)
            return False

        page = self._normalize_page(collection, raw_page)

        try:
            self.store.load(collection, page.items)
        except DuplicateIdError as e:
            self.notice = str(e)
            return False

        self.collection = collection
        self.rules = self.rule_cache.rules_for(collection, page.items)
        self.title = page.title
        self.description = page.description
        self.notice = None
        self.columns = self._build_columns(self.store.keys())
        self.take_snapshot()
        return True

    def _normalize_page(self, collection: str, raw_page: Dict[str, Any]) -> CollectionPage:
        heading = self.key_mapper.normalize("", raw_page)
        return CollectionPage(
            name=collection,
            title=heading.get("title") or "",
            description=heading.get("description") or "",
            items=self.key_mapper.normalize_items(collection, raw_page.get("items") or []),
        )

    @staticmethod
    def _fetch_error_message(collection: str, error: TransportError) -> str:
        if error.status_code is not None:
            return f"Server responded with code {error.status_code}"
        return f"Network error: could not load {collection}"

    @staticmethod
    def _build_columns(keys: List[str]) -> List[Column]:
        return [Column(key=key, label=humanize_label(key)) for key in keys]

    def rows(self) -> List[RowProjection]:
        """One row per record, values in column order"""
        selected = self.store.selected_handle
        return [
            RowProjection(
                handle=record.handle,
                values=[record.get(column.key) for column in self.columns],
                selected=record.handle == selected,
            )
            for record in self.store.records
        ]

    def rule_for(self, key: str) -> FieldRule:
        """Rule of a field, falling back to name-based defaults"""
        rule = self.rules.get(key)
        if rule is None:
            rule = self.rule_cache.inferencer.fallback_rule(key)
        return rule

    def detail(self) -> List[DetailField]:
        """Editable fields of the selected record (empty when nothing is selected)"""
        record = self.store.selected
        if record is None:
            return []

        fields = []
        for column in self.columns:
            rule = self.rule_for(column.key)
            value = record.get(column.key)
            display = format_datetime_for_input(value) if rule.type == WidgetType.DATETIME else value
            fields.append(
                DetailField(
                    label=column.label,
                    key=column.key,
                    widget=rule.type,
                    value=value,
                    display_value=display,
                    read_only=rule.read_only,
                    required=rule.required,
                    options=list(rule.options),
                )
            )
        return fields

    def current_values(self) -> Dict[str, str]:
        """{key: value} of the detail form"""
        return {f.key: f.value for f in self.detail()}

    def select(self, handle: Optional[str]) -> bool:
        """Show a record in the detail form (None clears it)"""
        try:
            self.store.select(handle)
        except KeyError:
            logger.warning(f"Ignoring selection of unknown record {handle}")
            return False
        self.take_snapshot()
        return True

    def toggle_row(self, handle: str, checked: bool) -> bool:
        """
        Row checkbox toggled

        Checking a row selects it and clears every other marker.
        Unchecking the selected row clears the selection.
        """
        if checked:
            return self.select(handle)
        if self.store.selected_handle == handle:
            return self.select(None)
        return False

    def edit(self, key: str, value: Any) -> bool:
        """
        Edit a field of the selected record

        The change lands in the store record, so the selected row shows it
        immediately. Read-only and unknown fields are refused.
        """
        record = self.store.selected
        if record is None:
            return False

        if key not in {column.key for column in self.columns}:
            logger.debug(f"Refusing edit of unknown field '{key}'")
            return False

        if self.rule_for(key).read_only:
            logger.debug(f"Refusing edit of read-only field '{key}'")
            return False

        self.store.update(record.handle, {key: value})
        self.saved_message = None
        return True

    def take_snapshot(self) -> None:
        """Capture the detail values as the clean baseline"""
        self.snapshot = self.current_values()

    def has_unsaved_changes(self) -> bool:
        """True if any detail value differs from the snapshot"""
        current = self.current_values()
        keys = set(current) | set(self.snapshot)
        return any(current.get(key) != self.snapshot.get(key) for key in keys)

    def invalid_fields(self) -> List[str]:
        """Keys of editable fields that are blank-but-required or malformed"""
        invalid = []
        for f in self.detail():
            if f.read_only:
                continue
            value = f.value.strip()
            if not value:
                if f.required:
                    invalid.append(f.key)
                continue
            if f.widget == WidgetType.NUMBER and not is_numeric(value):
                invalid.append(f.key)
            elif f.widget == WidgetType.TOGGLE and value not in ("true", "false"):
                invalid.append(f.key)
            elif f.widget == WidgetType.SELECT and value.lower() not in {o.lower() for o in f.options}:
                invalid.append(f.key)
        return invalid

    def is_valid(self) -> bool:
        return not self.invalid_fields()

    def can_save(self) -> bool:
        return self.store.selected is not None and self.has_unsaved_changes() and self.is_valid()

    def can_reset(self) -> bool:
        return self.has_unsaved_changes()

    def status(self) -> Optional[str]:
        """Form status line, None when the form is ready to save"""
        if not self.has_unsaved_changes():
            return self.NOTHING_TO_SAVE
        if not self.is_valid():
            return self.COMPLETE_REQUIRED
        return None

    def create(self) -> Optional[Record]:
        """Start a new draft at the top of the list"""
        if not self.gates["save"].request(self.has_unsaved_changes):
            self.notice = self.UNSAVED_WARNING
            return None

        keys = [column.key for column in self.columns] or None
        draft = self.store.create_draft(keys)
        if not self.columns:
            self.columns = self._build_columns(keys or list(RecordStore.FALLBACK_KEYS))
        self.take_snapshot()
        return draft

    def save(self) -> bool:
        """Send the selected record to the API and reload the collection"""
        record = self.store.selected
        if record is None or self.collection is None:
            return False
        if not self.can_save():
            self.notice = self.status()
            return False

        data = {f.key: f.value.strip() for f in self.detail() if not f.read_only}
        payload = self.key_mapper.denormalize(self.collection, data)

        try:
            with self.store.operation(record.handle):
                if record.id:
                    self.client.update_record(self.collection, record.id, payload)
                else:
                    self.client.create_record(self.collection, payload)
        except TransportError as e:
            logger.error(f"Failed to save: {e}")
            self.notice = "Error saving record."
            return False
        except RecordBusyError as e:
            self.notice = str(e)
            return False

        self.saved_message = f"Saved {datetime.now().strftime('%H:%M:%S')}"
        logger.info(f"Saved record {record.handle} to '{self.collection}'")
        self.reload()
        self.take_snapshot()
        return True

    def reset(self) -> bool:
        """Restore the selected record to its snapshot"""
        if not self.gates["reset"].request(self.has_unsaved_changes):
            self.notice = self.UNSAVED_WARNING
            return False

        record = self.store.selected
        if record is not None and self.snapshot:
            self.store.update(record.handle, self.snapshot)
        self.take_snapshot()
        return True

    def delete(self) -> bool:
        """Delete the selected record (drafts never reach the API)"""
        record = self.store.selected
        if record is None or (self.collection is None and not record.is_draft):
            return False

        if not self.gates["delete"].request(self.has_unsaved_changes):
            self.notice = self.UNSAVED_WARNING
            return False

        try:
            self.store.remove(record.handle)
        except TransportError as e:
            logger.error(f"Failed to delete: {e}")
            self.notice = "Error deleting record."
            return False
        except RecordBusyError as e:
            self.notice = str(e)
            return False

        if not record.is_draft:
            self.reload()
        self.take_snapshot()
        return True

    def close(self) -> bool:
        """Clear the selection and the detail form"""
        if not self.gates["close"].request(self.has_unsaved_changes):
            self.notice = self.UNSAVED_WARNING
            return False

        self.store.select(None)
        self.take_snapshot()
        return True

    def blur(self) -> None:
        """Focus left the editor; arm the save/delete gates if edits are pending"""
        if self.warn_on_blur and self.has_unsaved_changes():
            self.gates["save"].arm()
            self.gates["delete"].arm()
            self.notice = self.UNSAVED_WARNING
