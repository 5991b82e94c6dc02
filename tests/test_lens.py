"""Tests for formstate.lens — FieldLens, attr_lens, key_lens."""

from dataclasses import dataclass

import pytest

from formstate.errors import ConfigurationError
from formstate.lens import FieldLens, attr_lens, key_lens

from profile_model import Age, FirstName, Note, Profile


@dataclass(frozen=True)
class Address:
    street: str
    zip: str | None = None


class TestFieldLens:
    @pytest.mark.parametrize("value", ["", "Bob", "Zoë"])
    def test_get_after_set_returns_value(self, profile: Profile, value: str) -> None:
        assert FirstName.get(FirstName.set(profile, value)) == value

    def test_set_returns_new_snapshot(self, profile: Profile) -> None:
        updated = FirstName.set(profile, "Bob")
        assert updated is not profile
        assert profile.first_name == "Ann"

    def test_clear_optional(self) -> None:
        assert Age.clear is None
        assert Note.clear is not None

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="non-empty"):
            FieldLens(id="", get=lambda d: d, set=lambda d, v: v)

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            FirstName.id = "other"  # type: ignore[misc]


class TestAttrLens:
    def test_get_set(self) -> None:
        lens = attr_lens("street")
        address = Address(street="Main St")
        updated = lens.set(address, "Side St")
        assert lens.get(updated) == "Side St"
        assert address.street == "Main St"

    def test_id_defaults_to_name(self) -> None:
        assert attr_lens("street").id == "street"
        assert attr_lens("street", id="address.street").id == "address.street"

    def test_clearable(self) -> None:
        assert attr_lens("zip").clear is None
        lens = attr_lens("zip", clearable=True)
        assert lens.clear is not None
        assert lens.clear(Address(street="x", zip="12345")).zip is None


class TestKeyLens:
    def test_get_set(self) -> None:
        lens = key_lens("name")
        data = {"name": "Ann", "age": 3}
        updated = lens.set(data, "Bob")
        assert updated == {"name": "Bob", "age": 3}
        assert data["name"] == "Ann"

    def test_missing_key_reads_none(self) -> None:
        assert key_lens("missing").get({}) is None

    def test_clearable_drops_key(self) -> None:
        lens = key_lens("note", clearable=True)
        assert lens.clear is not None
        assert lens.clear({"note": "x", "age": 1}) == {"age": 1}
