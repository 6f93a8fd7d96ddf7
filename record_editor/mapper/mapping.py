"""Key mapping model."""
from dataclasses import dataclass, field
from typing import Dict


def invert(table: Dict[str, str]) -> Dict[str, str]:
    """Swap keys and values of a mapping table."""
    return {value: key for key, value in table.items()}


@dataclass
class KeyMapping:
    """Represents a bidirectional wire <-> canonical key table for one collection."""

    collection: str
    wire_to_canonical: Dict[str, str] = field(default_factory=dict)
    canonical_to_wire: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Derive the reverse table and reject non one-to-one tables."""
        canonical_names = list(self.wire_to_canonical.values())
        if len(set(canonical_names)) != len(canonical_names):
            raise ValueError(
                f"Key mapping for '{self.collection}' maps several wire keys to one canonical key"
            )
        if not self.canonical_to_wire:
            self.canonical_to_wire = invert(self.wire_to_canonical)

    @classmethod
    def merged(
        cls,
        collection: str,
        base: Dict[str, str],
        override: Dict[str, str],
    ) -> "KeyMapping":
        """
        Merge the base table with a collection override.

        Override entries win on collision. A base entry whose canonical
        name is also produced by the override is dropped so the merged
        table stays one-to-one.

        Args:
            collection: Collection (endpoint) name
            base: Mapping applied to every collection
            override: Collection specific mapping

        Returns:
            KeyMapping for the collection
        """
        claimed = set(override.values())
        table = {
            wire: canonical
            for wire, canonical in base.items()
            if wire not in override and canonical not in claimed
        }
        table.update(override)
        return cls(collection=collection, wire_to_canonical=table)

    def to_canonical(self, key: str) -> str:
        """Canonical name for a wire key (unmapped keys pass through)."""
        return self.wire_to_canonical.get(key, key)

    def to_wire(self, key: str) -> str:
        """Wire name for a canonical key (unmapped keys pass through)."""
        return self.canonical_to_wire.get(key, key)
