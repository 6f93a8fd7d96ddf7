"""In-memory record store for the active collection."""
import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set

from record_editor.exceptions import DuplicateIdError, RecordBusyError
from record_editor.schema.models import Record
from record_editor.utils.text import to_text

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Holds the normalized records of the currently loaded collection

    Usage:
    ```python
    store = RecordStore(transport=client)
    store.load("servers", records)
    store.select("42")
    store.update("42", {"name": "edge-01"})
    ```
    """

    # Keys used for a draft when the collection has no records to copy from
    FALLBACK_KEYS = ["id", "name", "description", "created", "updated"]

    def __init__(self, transport=None):
        """
        Initialize store

        Args:
            transport: Record API client used to delete persisted records
        """
        self.transport = transport
        self.collection: Optional[str] = None
        self.records: List[Record] = []
        self.selected_handle: Optional[str] = None
        self._in_flight: Set[str] = set()

    @staticmethod
    def find_duplicate_ids(records: List[Mapping[str, Any]]) -> List[str]:
        """Ids that occur more than once, reported at each repeat"""
        seen = set()
        duplicates = []
        for record in records:
            record_id = to_text(record.get("id"))
            if not record_id:
                continue
            if record_id in seen:
                duplicates.append(record_id)
            seen.add(record_id)
        return duplicates

    def load(self, collection: str, records: Optional[List[Mapping[str, Any]]]) -> None:
        """
        Replace the active record set

        Raises:
            DuplicateIdError: If ids repeat; the store is left unchanged
        """
        records = records or []
        duplicates = self.find_duplicate_ids(records)
        if duplicates:
            logger.warning(f"Duplicate ids in '{collection}': {duplicates}")
            raise DuplicateIdError(duplicates)

        self.collection = collection
        self.records = [self._make_record(record) for record in records]
        self.selected_handle = None
        self._in_flight.clear()
        logger.info(f"Loaded {len(self.records)} records into '{collection}'")

    def get(self, handle: Optional[str]) -> Optional[Record]:
        """Record by handle, or None"""
        if handle is None:
            return None
        for record in self.records:
            if record.handle == handle:
                return record
        return None

    @property
    def selected(self) -> Optional[Record]:
        """The selected record, if any"""
        return self.get(self.selected_handle)

    def keys(self) -> List[str]:
        """Field keys of the first record"""
        if not self.records:
            return []
        return list(self.records[0].values.keys())

    def select(self, handle: Optional[str]) -> Optional[Record]:
        """
        Set the active selection; None clears it

        Raises:
            KeyError: If no record has the handle
        """
        if handle is None:
            self.selected_handle = None
            return None

        record = self.get(handle)
        if record is None:
            raise KeyError(handle)

        self.selected_handle = handle
        return record

    def create_draft(self, template_keys: Optional[List[str]] = None) -> Record:
        """Add an unsaved record at the top of the list and select it"""
        keys = list(template_keys) if template_keys else self.keys() or list(self.FALLBACK_KEYS)

        draft = Record(
            handle=f"draft-{uuid.uuid4().hex[:8]}",
            values={key: "" for key in keys if key != "id"},
        )
        self.records.insert(0, draft)
        self.selected_handle = draft.handle
        logger.debug(f"Created draft {draft.handle} with keys {keys}")
        return draft

    def update(self, handle: str, patch: Mapping[str, Any]) -> Record:
        """
        Apply field edits in place to the selected record

        Raises:
            KeyError: If the handle is not the selected record
        """
        record = self.selected
        if record is None or record.handle != handle:
            raise KeyError(handle)

        for key, value in patch.items():
            record.values[key] = to_text(value)
        return record

    def remove(self, handle: Optional[str]) -> bool:
        """
        Remove a record

        Drafts are dropped locally. Persisted records are deleted through
        the transport first and only dropped once that call succeeds.

        Returns:
            bool: True if a record was removed

        Raises:
            TransportError: If the remote delete fails (store unchanged)
            RecordBusyError: If the record already has an operation in flight
        """
        record = self.get(handle)
        if record is None:
            return False

        if not record.is_draft:
            with self.operation(record.handle):
                self.transport.delete_record(self.collection, record.id)

        self.records = [r for r in self.records if r is not record]
        if self.selected_handle == record.handle:
            self.selected_handle = None
        logger.info(f"Removed record {record.handle} from '{self.collection}'")
        return True

    def is_busy(self, handle: str) -> bool:
        """True while a network operation for the record is running"""
        return handle in self._in_flight

    @contextmanager
    def operation(self, handle: str) -> Iterator[None]:
        """Mark a record as having a network operation in flight"""
        if handle in self._in_flight:
            raise RecordBusyError(handle)
        self._in_flight.add(handle)
        try:
            yield
        finally:
            self._in_flight.discard(handle)

    def _make_record(self, raw: Mapping[str, Any]) -> Record:
        values: Dict[str, str] = {key: to_text(value) for key, value in raw.items()}
        record_id = values.get("id")
        handle = record_id if record_id else f"draft-{uuid.uuid4().hex[:8]}"
        return Record(handle=handle, values=values)

    def __len__(self) -> int:
        return len(self.records)
