import pytest

from collection_openapi.openapi.infer import infer_string_format, infer_type


class TestStringFormats:
    def test_email(self):
        assert infer_type("user@example.com") == {"type": "string", "format": "email"}

    def test_date(self):
        assert infer_type("2024-01-01") == {"type": "string", "format": "date"}

    def test_date_time(self):
        assert infer_type("2024-01-01T10:00:00") == {"type": "string", "format": "date-time"}

    def test_date_time_with_suffix(self):
        assert infer_type("2024-01-01T10:00:00.123Z") == {"type": "string", "format": "date-time"}

    def test_uuid(self):
        value = "3f2b8c1e-9a4d-4e6f-8b7a-1c2d3e4f5a6b"
        assert infer_type(value) == {"type": "string", "format": "uuid"}

    def test_plain_string_has_no_format(self):
        assert infer_type("not-a-date") == {"type": "string"}

    def test_date_must_match_strictly(self):
        assert infer_string_format("2024-01-01 extra") is None

    def test_email_wins_over_other_formats(self):
        assert infer_string_format("2024-01-01@host") == "email"

    def test_non_ascii_digits_are_not_dates(self):
        assert infer_string_format("２０２４-０１-０１") is None


class TestScalarTypes:
    @pytest.mark.parametrize("value", [0, 42, -7, 3.0])
    def test_integers(self, value):
        assert infer_type(value) == {"type": "integer"}

    def test_fractional_number(self):
        assert infer_type(1.5) == {"type": "number"}

    def test_boolean_is_not_integer(self):
        assert infer_type(True) == {"type": "boolean"}
        assert infer_type(False) == {"type": "boolean"}

    def test_none_falls_back_to_string(self):
        assert infer_type(None) == {"type": "string"}


class TestCompositeTypes:
    def test_empty_array(self):
        assert infer_type([]) == {"type": "array", "items": {}}

    def test_array_uses_first_element_only(self):
        assert infer_type([1, "a", True]) == {"type": "array", "items": {"type": "integer"}}

    def test_object_is_not_recursed(self):
        assert infer_type({"a": 1}) == {"type": "object"}
