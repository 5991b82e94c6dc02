"""Tests for formstate.results — field and form outcomes."""

import pytest

from formstate.results import NO_INPUT, SUCCESS, VALID, FieldError, FormError, NoInput, Success, Valid


class TestOutcomes:
    def test_singletons_compare_by_value(self) -> None:
        assert NoInput() == NO_INPUT
        assert Success() == SUCCESS
        assert Valid() == VALID

    def test_field_error_carries_message(self) -> None:
        err = FieldError("Too short")
        assert err.message == "Too short"
        assert err == FieldError("Too short")
        assert err != FieldError("Too long")

    def test_form_error_defaults_to_no_field_errors(self) -> None:
        err = FormError("Some fields are not valid")
        assert err.field_errors == {}

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            FieldError("x").message = "y"  # type: ignore[misc]

    def test_match_statement(self) -> None:
        def describe(outcome: object) -> str:
            match outcome:
                case FieldError(message=message):
                    return f"error: {message}"
                case Success():
                    return "ok"
                case NoInput():
                    return "pending"
            return "unknown"

        assert describe(FieldError("bad")) == "error: bad"
        assert describe(SUCCESS) == "ok"
        assert describe(NO_INPUT) == "pending"

    def test_form_error_field_errors_are_read_only(self) -> None:
        errors = {"name": "Too short"}
        err = FormError("Some fields are not valid", errors)

        errors["age"] = "Too young"

        assert dict(err.field_errors) == {"name": "Too short"}
        with pytest.raises(TypeError):
            err.field_errors["age"] = "Too young"  # type: ignore[index]

    def test_form_error_is_hashable(self) -> None:
        first = FormError("invalid", {"name": "Too short"})
        second = FormError("invalid", {"name": "Too short"})
        assert first == second
        assert hash(first) == hash(second)
        assert FormError("invalid", {"name": "x"}) != FormError("invalid", {"name": "y"})
