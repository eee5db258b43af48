import pytest

from contentkosh_api.core.errors import BadRequestError
from contentkosh_api.core.validation import (
    format_validation_errors,
    validate_max_length,
    validate_required,
)


def test_validate_required():
    validate_required("value", "Title")
    validate_required(0, "Count")
    for empty in (None, "", "   "):
        with pytest.raises(BadRequestError) as exc:
            validate_required(empty, "Title")
        assert exc.value.message == "Title is required"
        assert exc.value.status_code == 400


def test_validate_max_length():
    validate_max_length(None, 3, "Search")
    validate_max_length("abc", 3, "Search")
    with pytest.raises(BadRequestError) as exc:
        validate_max_length("abcd", 3, "Search")
    assert exc.value.message == "Search cannot exceed 3 characters"


def test_missing_fields_are_named():
    errors = [
        {"loc": ("body", "instituteName"), "type": "missing", "msg": "Field required"},
        {"loc": ("body",), "type": "missing", "msg": "Field required"},
    ]
    assert format_validation_errors(errors) == "instituteName is required, Request body is required"


def test_path_errors_read_as_positive_integer():
    errors = [{"loc": ("path", "batch_id"), "type": "greater_than", "msg": "Input should be greater than 0"}]
    assert format_validation_errors(errors) == "Invalid batchId: must be a positive integer"


def test_value_error_prefix_is_stripped_and_duplicates_collapse():
    errors = [
        {"loc": ("body", "name"), "type": "value_error", "msg": "Value error, Exam name is required"},
        {"loc": ("body", "name"), "type": "value_error", "msg": "Value error, Exam name is required"},
    ]
    assert format_validation_errors(errors) == "Exam name is required"


def test_other_errors_are_prefixed_with_field():
    errors = [{"loc": ("query", "limit", 0), "type": "int_parsing", "msg": "Input should be a valid integer"}]
    assert format_validation_errors(errors) == "limit: Input should be a valid integer"


def test_empty_error_list():
    assert format_validation_errors([]) == "Request validation failed"
