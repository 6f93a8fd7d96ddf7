"""Tests for KeyMapper and KeyMapping."""
import pytest

from record_editor.mapper.key_mapper import KeyMapper
from record_editor.mapper.mapping import KeyMapping


@pytest.fixture
def mapper():
    """Mapper with the built-in tables"""
    return KeyMapper()


class TestKeyMapping:
    """Test merged key tables."""

    def test_override_wins_on_collision(self):
        """Test collection entries replace base entries for the same wire key."""
        mapping = KeyMapping.merged("c", {"intro": "description"}, {"intro": "summary"})
        assert mapping.to_canonical("intro") == "summary"
        assert mapping.to_wire("summary") == "intro"

    def test_base_entry_dropped_when_canonical_claimed(self):
        """Test base entry is dropped when the override produces the same canonical key."""
        mapping = KeyMapping.merged(
            "credentials", {"intro": "description"}, {"description": "description"}
        )
        assert "intro" not in mapping.wire_to_canonical
        assert mapping.to_wire("description") == "description"

    def test_unmapped_keys_pass_through(self):
        """Test unknown keys are returned unchanged in both directions."""
        mapping = KeyMapping.merged("c", {}, {"itemName": "name"})
        assert mapping.to_canonical("color") == "color"
        assert mapping.to_wire("color") == "color"

    def test_non_bijective_table_rejected(self):
        """Test a table mapping two wire keys to one canonical key is refused."""
        with pytest.raises(ValueError):
            KeyMapping("bad", {"a": "name", "b": "name"})


class TestKeyMapper:
    """Test record normalization."""

    def test_normalize_manage_record(self, mapper):
        """Test item-prefixed wire keys become canonical names."""
        raw = {"id": "1", "itemName": "Alpha", "itemCreated": "2024-01-01T00:00:00Z"}
        assert mapper.normalize("manage", raw) == {
            "id": "1",
            "name": "Alpha",
            "created": "2024-01-01T00:00:00Z",
        }

    def test_base_mapping_applies_to_every_collection(self, mapper):
        """Test the base table renames intro to description."""
        assert mapper.normalize("servers", {"intro": "hello"}) == {"description": "hello"}
        assert mapper.normalize("", {"intro": "hello"}) == {"description": "hello"}

    def test_unknown_collection_uses_base_only(self, mapper):
        """Test collections without a table still get the base mapping."""
        assert mapper.normalize("unknown", {"intro": "x", "itemName": "y"}) == {
            "description": "x",
            "itemName": "y",
        }

    def test_api_registration_modified_by(self, mapper):
        """Test the api-registration table maps itemModifiedBy."""
        assert mapper.normalize("api-registration", {"itemModifiedBy": "bob"}) == {"modified": "bob"}
        assert mapper.denormalize("api-registration", {"modified": "bob"}) == {"itemModifiedBy": "bob"}

    @pytest.mark.parametrize("collection", sorted(KeyMapper.COLLECTION_MAPPINGS))
    def test_round_trip(self, mapper, collection):
        """Test denormalize(normalize(r)) == r for wire keys plus pass-through keys."""
        table = KeyMapper.COLLECTION_MAPPINGS[collection]
        record = {wire: f"v-{wire}" for wire in table}
        record["id"] = "abc"
        record["extraField"] = "kept"

        assert mapper.denormalize(collection, mapper.normalize(collection, record)) == record

    def test_batch_helpers(self, mapper):
        """Test list variants and empty input."""
        items = [{"itemName": "a"}, {"itemName": "b"}]
        assert mapper.normalize_items("servers", items) == [{"name": "a"}, {"name": "b"}]
        assert mapper.denormalize_items("servers", [{"name": "a"}]) == [{"itemName": "a"}]
        assert mapper.normalize_items("servers", None) == []

    def test_normalize_is_pure(self, mapper):
        """Test the input record is not modified."""
        raw = {"itemName": "a"}
        mapper.normalize("manage", raw)
        assert raw == {"itemName": "a"}

    def test_custom_tables(self):
        """Test mapper built from caller supplied tables."""
        mapper = KeyMapper({"people": {"full_name": "name"}}, base_mapping={})
        assert mapper.normalize("people", {"full_name": "Ann"}) == {"name": "Ann"}
        assert mapper.normalize("others", {"full_name": "Ann"}) == {"full_name": "Ann"}
