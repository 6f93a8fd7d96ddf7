"""Normalize record keys between the wire format and canonical names."""
import logging
from typing import Any, Dict, List, Optional

from record_editor.mapper.mapping import KeyMapping

logger = logging.getLogger(__name__)


class KeyMapper:
    """Maps record keys per collection using static key tables."""

    # Applied to every collection, before the collection table
    BASE_MAPPING = {
        "intro": "description",
    }

    # Wire key -> canonical key, per collection endpoint
    COLLECTION_MAPPINGS = {
        "manage": {
            "itemName": "name",
            "itemCreated": "created",
            "itemUpdated": "updated",
            "itemAuthor": "author",
            "itemModified": "modified",
            "itemType": "type",
        },
        "api-registration": {
            "itemName": "name",
            "itemCreated": "created",
            "itemUpdated": "updated",
            "itemAuthor": "author",
            "itemModifiedBy": "modified",
            "itemType": "type",
        },
        "audit": {
            "type": "type",
            "timestamp": "timestamp",
            "user": "user",
            "action": "action",
            "target": "target",
            "details": "details",
        },
        "credentials": {
            "subtype": "subtype",
            "type": "type",
            "name": "name",
            "description": "description",
            "schedule": "schedule",
            "status": "status",
            "enabled": "enabled",
        },
        "faqs": {
            "question": "question",
            "answer": "answer",
        },
        "option-set": {
            "type": "type",
            "name": "name",
            "description": "description",
            "options": "options",
        },
        "option-types": {
            "type": "type",
            "name": "name",
            "description": "description",
            "enabled": "enabled",
        },
        "scope-type": {
            "type": "type",
            "name": "name",
            "description": "description",
            "enabled": "enabled",
        },
        "servers": {
            "itemName": "name",
            "itemCreated": "created",
            "itemUpdated": "updated",
            "itemAuthor": "author",
            "itemModified": "modified",
            "itemType": "type",
            "itemOS": "os",
            "itemStatus": "status",
        },
        "server-types": {
            "itemName": "name",
            "itemCreated": "created",
            "itemUpdated": "updated",
            "itemAuthor": "author",
            "itemModified": "modified",
            "itemType": "type",
            "itemOS": "os",
            "itemStatus": "status",
        },
        "variables": {
            "name": "name",
            "value": "value",
            "description": "description",
            "type": "type",
        },
        "settings": {},
    }

    def __init__(
        self,
        collection_mappings: Optional[Dict[str, Dict[str, str]]] = None,
        base_mapping: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize mapper.

        Args:
            collection_mappings: {collection: {wire_key: canonical_key}}
            base_mapping: {wire_key: canonical_key} applied to all collections
        """
        self.collection_mappings = (
            self.COLLECTION_MAPPINGS if collection_mappings is None else collection_mappings
        )
        self.base_mapping = self.BASE_MAPPING if base_mapping is None else base_mapping
        self._mappings: Dict[str, KeyMapping] = {}

    def get_mapping(self, collection: str = "") -> KeyMapping:
        """Get the merged mapping for a collection (built once per collection)."""
        collection = collection or ""
        if collection not in self._mappings:
            override = self.collection_mappings.get(collection, {})
            self._mappings[collection] = KeyMapping.merged(
                collection, self.base_mapping, override
            )
            logger.debug(
                f"Built key mapping for '{collection}' "
                f"({len(self._mappings[collection].wire_to_canonical)} keys)"
            )
        return self._mappings[collection]

    def normalize(self, collection: str, record: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Rename wire keys to canonical keys."""
        mapping = self.get_mapping(collection)
        return {mapping.to_canonical(key): value for key, value in (record or {}).items()}

    def denormalize(self, collection: str, record: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Rename canonical keys back to wire keys."""
        mapping = self.get_mapping(collection)
        return {mapping.to_wire(key): value for key, value in (record or {}).items()}

    def normalize_items(self, collection: str, items: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
        """Normalize a batch of records."""
        return [self.normalize(collection, item) for item in items or []]

    def denormalize_items(self, collection: str, items: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
        """Denormalize a batch of records."""
        return [self.denormalize(collection, item) for item in items or []]

