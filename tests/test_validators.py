"""
Restaurants API - Request Validator Unit Tests
===============================================

What we test:
    ✅ Required fields: key presence only, first missing field reported
    ✅ Id match: both present, strictly equal
    ✅ Updatable field whitelist (merge-patch set)
    ✅ Type coercion before any write (scalars → strings, grades must be a list)
"""

import pytest

from restaurants_api.exceptions import MissingFieldError, ValidationError
from restaurants_api.validators import (
    REQUIRED_FIELDS,
    coerce_fields,
    ensure_ids_match,
    require_fields,
    updatable_fields,
)


class TestRequireFields:

    def test_all_present_passes(self):
        require_fields({"name": "A", "borough": "Queens", "cuisine": "Diner"})

    def test_declared_order(self):
        assert REQUIRED_FIELDS == ("name", "borough", "cuisine")

    @pytest.mark.parametrize(
        "body, missing",
        [
            ({}, "name"),
            ({"borough": "Queens", "cuisine": "Diner"}, "name"),
            ({"name": "A", "cuisine": "Diner"}, "borough"),
            ({"name": "A", "borough": "Queens"}, "cuisine"),
            ({"cuisine": "Diner"}, "name"),
        ],
    )
    def test_first_missing_field_is_reported(self, body, missing):
        with pytest.raises(MissingFieldError) as exc_info:
            require_fields(body)
        assert exc_info.value.field == missing
        assert exc_info.value.message == f"Missing `{missing}` in request body"

    def test_presence_only_not_emptiness(self):
        """Empty or null values still count as present."""
        require_fields({"name": "", "borough": None, "cuisine": 0})

    def test_missing_field_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            require_fields({"name": "A"})


class TestEnsureIdsMatch:

    def test_equal_ids_pass(self):
        ensure_ids_match("abc123", "abc123")

    @pytest.mark.parametrize(
        "path_id, body_id",
        [
            ("abc", "def"),
            ("abc", None),
            ("abc", ""),
            ("", ""),
            ("123", 123),  # no coercion between string and number
        ],
    )
    def test_mismatch_or_missing_fails(self, path_id, body_id):
        with pytest.raises(ValidationError, match="must match"):
            ensure_ids_match(path_id, body_id)

    def test_message_names_both_ids(self):
        with pytest.raises(ValidationError) as exc_info:
            ensure_ids_match("abc", "def")
        assert exc_info.value.message == (
            "Request path id (abc) and request body id (def) must match"
        )

    def test_mismatch_is_not_a_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            ensure_ids_match("abc", "def")
        assert not isinstance(exc_info.value, MissingFieldError)


class TestUpdatableFields:

    def test_only_whitelisted_fields_kept(self):
        body = {
            "id": "abc",
            "name": "New",
            "grades": [],
            "restaurant_id": "40356018",
            "address": {"street": "Main"},
        }
        assert updatable_fields(body) == {"name": "New", "address": {"street": "Main"}}

    def test_empty_when_nothing_updatable(self):
        assert updatable_fields({"id": "abc"}) == {}

    def test_null_values_are_kept(self):
        assert updatable_fields({"cuisine": None}) == {"cuisine": None}


class TestCoerceFields:

    def test_strings_pass_unchanged(self):
        fields = {"name": "A", "borough": "Queens", "cuisine": "Diner"}
        assert coerce_fields(fields) == fields

    @pytest.mark.parametrize(
        "value, expected",
        [(123, "123"), (1.5, "1.5"), (2.0, "2"), (True, "true"), (False, "false")],
    )
    def test_scalars_become_strings(self, value, expected):
        assert coerce_fields({"name": value}) == {"name": expected}

    def test_null_is_kept(self):
        assert coerce_fields({"cuisine": None}) == {"cuisine": None}

    @pytest.mark.parametrize("value", [{"first": "A"}, ["A"]])
    def test_structured_value_in_string_field_fails(self, value):
        with pytest.raises(ValidationError) as exc_info:
            coerce_fields({"name": "A", "borough": value})
        assert exc_info.value.field == "borough"
        assert exc_info.value.message == "`borough` must be a string"

    @pytest.mark.parametrize("value", ["A", 7, {"grade": "A"}])
    def test_grades_must_be_a_list(self, value):
        with pytest.raises(ValidationError, match="`grades` must be an array"):
            coerce_fields({"grades": value})

    def test_grades_list_and_address_pass_through(self):
        fields = {"grades": [{"grade": "A"}], "address": "opaque"}
        assert coerce_fields(fields) == fields

    def test_input_is_not_mutated(self):
        fields = {"name": 123}
        coerce_fields(fields)
        assert fields == {"name": 123}
