"""Unit tests for identity value objects."""

import pytest

from identity.domain.value_objects import UniqueField, UserField, UserId, ValidationRule


class TestUserId:
    """Tests for UserId."""

    def test_generate_returns_ulid_string(self):
        """Generated ids are 26-character ULID strings."""
        user_id = UserId.generate()

        assert len(user_id.value) == 26
        assert str(user_id) == user_id.value

    def test_generate_never_repeats(self):
        """Ids are not reused."""
        ids = {UserId.generate().value for _ in range(500)}

        assert len(ids) == 500

    def test_from_string_round_trips_valid_ulid(self):
        """A valid ULID string is accepted as is."""
        original = UserId.generate()

        assert UserId.from_string(original.value) == original

    def test_from_string_rejects_garbage(self):
        """Non-ULID strings raise ValueError."""
        with pytest.raises(ValueError, match="Invalid UserId"):
            UserId.from_string("not-a-ulid")

    def test_is_immutable(self):
        """UserId cannot be reassigned."""
        user_id = UserId.generate()

        with pytest.raises(Exception):
            user_id.value = "other"


class TestEnums:
    """Tests for the string enums used in error reporting."""

    def test_user_fields(self):
        """Only the four writable fields are listed."""
        assert {f.value for f in UserField} == {
            "username",
            "email",
            "password",
            "metadata",
        }

    def test_unique_fields_compare_equal_to_strings(self):
        """Enum members can be compared with plain field names."""
        assert UniqueField.USERNAME == "username"
        assert UniqueField.EMAIL == "email"

    def test_validation_rules(self):
        """Rule names are stable strings."""
        assert ValidationRule.REQUIRED == "required"
        assert ValidationRule.FORMAT == "format"
