"""Tests for metadata bag merging, list attributes and lenient accessors."""

import json
from uuid import uuid4

import pytest

from devportal.domain.errors import MalformedInputError, MalformedMetadataError
from devportal.domain.metadata import (
    FAVORITES_KEY,
    add_to_list,
    get_bool,
    get_nested_str,
    get_str,
    is_truthy,
    load_metadata,
    merge_metadata,
    normalize_metadata,
    parse_metadata,
    parse_uuid_list,
    read_string_list,
    remove_from_list,
)


class TestMergeMetadata:
    """Shallow merge used by team, component and user metadata updates."""

    def test_disjoint_keys_accumulate(self):
        merged = merge_metadata(merge_metadata(None, '{"a":1}'), '{"b":2}')
        assert json.loads(merged) == {"a": 1, "b": 2}

    def test_update_wins_over_existing_key(self):
        merged = merge_metadata('{"a":1}', '{"a":2}')
        assert json.loads(merged) == {"a": 2}

    def test_nested_objects_are_replaced_not_deep_merged(self):
        merged = merge_metadata('{"ci":{"qos":"gold","owner":"x"}}', '{"ci":{"qos":"silver"}}')
        assert json.loads(merged) == {"ci": {"qos": "silver"}}

    def test_keys_absent_from_update_are_preserved(self):
        merged = merge_metadata('{"keep":true,"change":1}', {"change": 2})
        assert json.loads(merged) == {"keep": True, "change": 2}

    @pytest.mark.parametrize("existing", [None, "", "   "])
    def test_missing_existing_is_treated_as_empty(self, existing):
        assert json.loads(merge_metadata(existing, '{"a":1}')) == {"a": 1}

    def test_malformed_existing_fails(self):
        with pytest.raises(MalformedMetadataError, match="existing metadata"):
            merge_metadata("{not json", '{"a":1}')

    @pytest.mark.parametrize("new", ["[1,2]", '"text"', "{broken", "", "   ", b""])
    def test_new_must_be_a_json_object(self, new):
        with pytest.raises(MalformedMetadataError, match="new metadata"):
            merge_metadata('{"a":1}', new)

    def test_missing_new_fails(self):
        with pytest.raises(MalformedMetadataError):
            merge_metadata('{"a":1}', None)

    def test_malformed_metadata_is_malformed_input(self):
        assert issubclass(MalformedMetadataError, MalformedInputError)


class TestParsing:
    def test_parse_accepts_mapping(self):
        assert parse_metadata({"a": 1}) == {"a": 1}

    def test_load_is_lenient(self):
        assert load_metadata("{oops") == {}
        assert load_metadata("[1]") == {}
        assert load_metadata(None) == {}

    def test_normalize_compacts_and_blanks_to_none(self):
        assert normalize_metadata({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'
        assert normalize_metadata(None) is None
        assert normalize_metadata("  ") is None

    def test_normalize_rejects_non_objects(self):
        with pytest.raises(MalformedMetadataError):
            normalize_metadata("[1,2]")


class TestListAttributes:
    """``favorites``/``subscribed`` behave as insertion-ordered sets."""

    def test_add_is_idempotent(self):
        once = add_to_list(None, FAVORITES_KEY, "L1")
        twice = add_to_list(once, FAVORITES_KEY, "L1")
        assert json.loads(twice) == {"favorites": ["L1"]}

    def test_add_preserves_order_and_other_keys(self):
        meta = add_to_list('{"favorites":["L1"],"portal_admin":true}', FAVORITES_KEY, "L2")
        assert json.loads(meta) == {"favorites": ["L1", "L2"], "portal_admin": True}

    def test_add_stringifies_uuid_values(self):
        link_id = uuid4()
        meta = add_to_list("{}", FAVORITES_KEY, link_id)
        assert json.loads(meta)[FAVORITES_KEY] == [str(link_id)]

    def test_add_accepts_mixed_type_lists(self):
        meta = add_to_list('{"favorites":["L1",7,null]}', FAVORITES_KEY, "L2")
        assert json.loads(meta)[FAVORITES_KEY] == ["L1", "L2"]

    def test_remove_absent_member_leaves_list_unchanged(self):
        meta = remove_from_list('{"favorites":["L1"]}', FAVORITES_KEY, "L2")
        assert meta == '{"favorites":["L1"]}'

    def test_remove_last_member_leaves_empty_list(self):
        meta = remove_from_list('{"favorites":["L1"]}', FAVORITES_KEY, "L1")
        assert json.loads(meta) == {"favorites": []}

    @pytest.mark.parametrize("raw", [None, "", "{}"])
    def test_remove_establishes_empty_list_when_absent(self, raw):
        assert json.loads(remove_from_list(raw, FAVORITES_KEY, "L1")) == {"favorites": []}

    def test_read_string_list_deduplicates(self):
        assert read_string_list({"favorites": ["a", "b", "a", ""]}, "favorites") == ["a", "b"]
        assert read_string_list({"favorites": "a"}, "favorites") == []

    def test_parse_uuid_list_skips_invalid_entries(self):
        valid = uuid4()
        assert parse_uuid_list(["nope", str(valid), f" {valid} ", "L1"]) == [valid]


class TestAccessors:
    def test_get_str_ignores_empty_and_wrong_types(self):
        meta = {"a": "x", "b": "", "c": 3}
        assert get_str(meta, "a") == "x"
        assert get_str(meta, "b") is None
        assert get_str(meta, "c") is None

    def test_get_bool_only_accepts_booleans(self):
        assert get_bool({"f": False}, "f") is False
        assert get_bool({"f": "true"}, "f") is None

    def test_get_nested_str(self):
        meta = {"sonar": {"project_id": "acme_api"}, "ci": "flat"}
        assert get_nested_str(meta, "sonar", "project_id") == "acme_api"
        assert get_nested_str(meta, "ci", "qos") is None
        assert get_nested_str(meta, "missing", "key") is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(True, True), ("true", True), ("Yes", True), (1, True), (0, False), ("no", False), (None, False)],
    )
    def test_is_truthy(self, value, expected):
        assert is_truthy(value) is expected
