import pytest

from axiom_api.core.exceptions import ValidationError
from axiom_api.core.validation import (
    is_valid_object_id,
    validate_email,
    validate_feedback_id,
    validate_feedback_ids,
    validate_feedback_text,
    validate_next_action,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("64b7f0c2a1b2c3d4e5f60718", True),
        ("64B7F0C2A1B2C3D4E5F60718", True),
        ("64b7f0c2a1b2c3d4e5f6071", False),
        ("64b7f0c2a1b2c3d4e5f607189", False),
        ("zzb7f0c2a1b2c3d4e5f60718", False),
        ("", False),
        (None, False),
        (12345, False),
    ],
)
def test_is_valid_object_id(value, expected):
    assert is_valid_object_id(value) is expected


def test_validate_feedback_id_rejects_malformed_id():
    with pytest.raises(ValidationError) as exc_info:
        validate_feedback_id("not-an-id")
    assert exc_info.value.message == "Invalid feedback ID format"
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("text", [None, "", "   \n\t", 42])
def test_validate_feedback_text_requires_non_blank_string(text):
    with pytest.raises(ValidationError) as exc_info:
        validate_feedback_text(text)
    assert exc_info.value.message == "Text is required"
    assert exc_info.value.fields == {"text": "Text is required"}


def test_validate_feedback_text_returns_text_unchanged():
    assert validate_feedback_text("  The cat purrs  ") == "  The cat purrs  "


def test_validate_email_is_optional():
    assert validate_email(None) is None
    assert validate_email("") is None
    assert validate_email(" keeper@axiom.test ") == "keeper@axiom.test"


def test_validate_email_rejects_non_string():
    with pytest.raises(ValidationError):
        validate_email(["keeper@axiom.test"])


class TestValidateNextAction:
    def test_exactly_ten_characters_is_accepted(self):
        assert validate_next_action("a" * 10) == "a" * 10

    def test_nine_characters_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_next_action("a" * 9)
        assert exc_info.value.message == "nextAction must be at least 10 characters"

    def test_exactly_five_hundred_characters_is_accepted(self):
        assert len(validate_next_action("a" * 500)) == 500

    def test_five_hundred_one_characters_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_next_action("a" * 501)
        assert exc_info.value.message == "nextAction must not exceed 500 characters"

    def test_length_is_measured_after_trimming(self):
        with pytest.raises(ValidationError):
            validate_next_action("   short    ")
        assert validate_next_action("  Call the owner  ") == "Call the owner"

    @pytest.mark.parametrize("value", [None, 123, ["Call the owner back"]])
    def test_non_string_is_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_next_action(value)
        assert exc_info.value.message == "nextAction is required and must be a string"


class TestValidateFeedbackIds:
    def test_requires_array(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_feedback_ids("64b7f0c2a1b2c3d4e5f60718")
        assert exc_info.value.message == "ids must be an array"

    def test_missing_ids_is_not_an_array(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_feedback_ids(None)
        assert exc_info.value.message == "ids must be an array"

    def test_rejects_empty_array(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_feedback_ids([])
        assert exc_info.value.message == "ids array cannot be empty"

    def test_rejects_any_malformed_id(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_feedback_ids(["64b7f0c2a1b2c3d4e5f60718", "bad"])
        assert exc_info.value.message == "All ids must be valid MongoDB ObjectId strings"

    def test_accepts_valid_ids(self):
        ids = ["64b7f0c2a1b2c3d4e5f60718", "64b7f0c2a1b2c3d4e5f60719"]
        assert validate_feedback_ids(ids) == ids
