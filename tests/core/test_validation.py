# tests/core/test_validation.py

"""
입력값 검증 함수와 오류 분류 체계에 대한 단위 테스트입니다.
"""

import pytest

from mescore.core import exceptions
from mescore.core.validation import (
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    require_description,
    require_name,
    require_non_negative,
    require_ordered_range,
    require_text,
)


@pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
def test_require_text_rejects_empty(value):
    with pytest.raises(exceptions.ValidationError) as excinfo:
        require_text("name", value, MAX_NAME_LENGTH)
    assert excinfo.value.message == "name cannot be empty"
    assert excinfo.value.details["field"] == "name"


def test_require_text_trims_whitespace():
    assert require_text("name", "  Line 1  ", MAX_NAME_LENGTH) == "Line 1"


def test_require_name_length_boundary():
    """경계값: 255자는 허용, 256자는 거부"""
    assert require_name("a" * MAX_NAME_LENGTH) == "a" * MAX_NAME_LENGTH
    with pytest.raises(exceptions.ValidationError) as excinfo:
        require_name("a" * (MAX_NAME_LENGTH + 1))
    assert excinfo.value.message == "name exceeds max length of 255 characters"


def test_require_description_length_boundary():
    assert len(require_description("d" * MAX_DESCRIPTION_LENGTH)) == MAX_DESCRIPTION_LENGTH
    with pytest.raises(exceptions.ValidationError, match="description exceeds max length of 2048 characters"):
        require_description("d" * (MAX_DESCRIPTION_LENGTH + 1))


def test_length_is_checked_after_trimming():
    padded = "  " + "a" * MAX_NAME_LENGTH + "  "
    assert require_name(padded) == "a" * MAX_NAME_LENGTH


def test_require_non_negative():
    assert require_non_negative("code", 0) == 0
    with pytest.raises(exceptions.ValidationError, match="code cannot be negative"):
        require_non_negative("code", -1)


def test_require_ordered_range():
    require_ordered_range("min_code", 1, "max_code", 1)
    require_ordered_range("min_code", None, "max_code", 1)
    with pytest.raises(exceptions.ValidationError, match="min_code cannot be greater than max_code"):
        require_ordered_range("min_code", 5, "max_code", 2)


# =============================================================================
# 오류 분류
# =============================================================================
def test_invalid_reference_is_a_validation_error():
    error = exceptions.InvalidReferenceError.missing("mode_group_id", 3)
    assert isinstance(error, exceptions.ValidationError)
    assert error.error_type == exceptions.ErrorType.REFERENCE
    assert error.message == "mode_group_id '3' does not exist"
    assert error.to_dict() == {
        "detail": "mode_group_id '3' does not exist",
        "type": "reference",
        "details": {"field": "mode_group_id", "value": 3},
    }


def test_not_found_message():
    error = exceptions.NotFoundError("Equipment", 42)
    assert str(error) == "Equipment with id 42 not found"
    assert error.error_type == exceptions.ErrorType.NOT_FOUND


def test_store_error_carries_operation_and_id():
    error = exceptions.StoreError("update_group", 7)
    assert error.operation == "update_group"
    assert error.target_id == 7
    assert "update_group" in error.message
    assert "id=7" in error.message
