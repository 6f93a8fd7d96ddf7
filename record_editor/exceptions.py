"""Exceptions raised by the record editor core."""
from typing import List, Optional


class RecordEditorError(Exception):
    """Base class for record editor failures."""


class TransportError(RecordEditorError):
    """Network failure or non-success status from the record API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DuplicateIdError(RecordEditorError):
    """A loaded batch contains the same identity key more than once."""

    def __init__(self, ids: List[str]):
        self.ids = list(ids)
        super().__init__(f"Duplicate IDs: {', '.join(self.ids)}")


class RecordBusyError(RecordEditorError):
    """A network operation for the record is still in flight."""

    def __init__(self, handle: str):
        self.handle = handle
        super().__init__(f"Record {handle} has an operation in progress")
