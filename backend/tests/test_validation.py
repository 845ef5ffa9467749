"""
Tests for the request validation helpers.
"""
import uuid

import pytest
from fastapi import HTTPException

from planner.api.validation import (
    handle_api_error,
    optional_uuid,
    parse_optional_date,
    parse_support_resources,
    parse_uuid_param,
    validate_required_string,
    validate_uuid,
    validate_uuid_list,
)


class TestValidateRequiredString:

    def test_blank_string_is_rejected(self):
        assert validate_required_string(" ", "x") is None

    def test_value_is_trimmed(self):
        assert validate_required_string("a", "x") == "a"
        assert validate_required_string("  Write report  ", "x") == "Write report"

    @pytest.mark.parametrize("value", [None, 5, [], {"a": 1}])
    def test_non_strings_are_rejected(self, value):
        assert validate_required_string(value, "x") is None


class TestValidateUuid:

    def test_malformed_value(self):
        assert validate_uuid("not-a-uuid", "x") is None

    def test_valid_value_is_returned_unchanged(self):
        value = str(uuid.uuid4())
        assert validate_uuid(value, "x") == value

    def test_uppercase_is_accepted(self):
        value = str(uuid.uuid4()).upper()
        assert validate_uuid(value, "x") == value

    def test_uuid_list_drops_bad_items(self):
        good = str(uuid.uuid4())
        assert validate_uuid_list([good, "nope", 3], "ids") == [uuid.UUID(good)]
        assert validate_uuid_list("nope", "ids") == []

    def test_optional_uuid_rejects_malformed(self):
        with pytest.raises(HTTPException) as exc_info:
            optional_uuid("abc", "assigneeId")
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid assigneeId: must be a valid UUID"
        assert optional_uuid(None, "assigneeId") is None
        assert optional_uuid("", "assigneeId") is None

    def test_malformed_path_id_is_not_found(self):
        with pytest.raises(HTTPException) as exc_info:
            parse_uuid_param("123", "Area")
        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Area not found"


class TestParseSupportResources:

    def test_lines_are_split_and_trimmed(self):
        assert parse_support_resources("a\n\nb\n") == ["a", "b"]
        assert parse_support_resources("  https://docs  \n guide ") == ["https://docs", "guide"]

    def test_empty_list_is_none(self):
        assert parse_support_resources([]) is None

    def test_list_items_are_cleaned(self):
        assert parse_support_resources([" a ", "", 7, "b"]) == ["a", "b"]

    def test_other_types_are_none(self):
        assert parse_support_resources(42) is None
        assert parse_support_resources(None) is None


class TestDatesAndErrors:

    def test_date_parsing(self):
        assert str(parse_optional_date("2025-03-01", "deadline")) == "2025-03-01"
        assert str(parse_optional_date("2025-03-01T10:00:00Z", "deadline")) == "2025-03-01"
        assert parse_optional_date("", "deadline") is None

    def test_bad_date_is_400(self):
        with pytest.raises(HTTPException) as exc_info:
            parse_optional_date("tomorrow", "deadline")
        assert exc_info.value.status_code == 400

    def test_invalid_messages_become_400(self):
        with pytest.raises(HTTPException) as exc_info:
            handle_api_error(ValueError("Invalid areaId"), "creating task")
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid areaId"

    def test_other_failures_become_500(self):
        with pytest.raises(HTTPException) as exc_info:
            handle_api_error(RuntimeError(), "creating task", "Failed to create task")
        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Failed to create task"

    def test_http_errors_pass_through(self):
        original = HTTPException(status_code=404, detail="Task not found")
        with pytest.raises(HTTPException) as exc_info:
            handle_api_error(original, "updating task")
        assert exc_info.value is original
