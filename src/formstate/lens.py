"""Field lenses — reflection-free binding between a field and a data slice.

A ``FieldLens`` describes how to read and write one value ``V`` on an
immutable model ``D``:

- ``id``: stable key, unique within a form (``"first_name"``).
- ``get``: read the value from a snapshot.
- ``set``: return a **new** snapshot with the value replaced.
- ``clear``: optional; return a new snapshot with the value cleared.
  Used when ``Form.on_change(lens, None)`` is called. Without it, a
  ``None`` change updates the field but leaves the snapshot untouched.

Define lenses next to the data model::

    @dataclass(frozen=True)
    class Profile:
        first_name: str
        note: str | None = None

    FirstName = FieldLens[Profile, str](
        id="first_name",
        get=lambda d: d.first_name,
        set=lambda d, v: replace(d, first_name=v),
    )
    Note = attr_lens("note", clearable=True)

``attr_lens()`` and ``key_lens()`` build the common cases for dataclasses
and plain dicts.
"""

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from formstate.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class FieldLens[D, V]:
    """Immutable get/set(/clear) accessor for one field of ``D``."""

    id: str
    get: Callable[[D], V]
    set: Callable[[D, V], D]
    clear: Callable[[D], D] | None = None

    def __post_init__(self) -> None:
        if not self.id:
            msg = "FieldLens id must be a non-empty string"
            raise ConfigurationError(msg)


def attr_lens(name: str, *, id: str | None = None, clearable: bool = False) -> FieldLens[Any, Any]:
    """Lens over attribute *name* of a dataclass (or any ``dataclasses.replace`` target).

    ``clearable=True`` adds a ``clear`` that sets the attribute to ``None``.
    """

    def get(data: Any) -> Any:
        return getattr(data, name)

    def set_(data: Any, value: Any) -> Any:
        return dataclasses.replace(data, **{name: value})

    def clear(data: Any) -> Any:
        return dataclasses.replace(data, **{name: None})

    return FieldLens(id=id or name, get=get, set=set_, clear=clear if clearable else None)


def key_lens(key: str, *, id: str | None = None, clearable: bool = False) -> FieldLens[Any, Any]:
    """Lens over *key* of a mapping. Writes return a new ``dict``.

    A missing key reads as ``None``. ``clearable=True`` adds a ``clear``
    that drops the key.
    """

    def get(data: Mapping[str, Any]) -> Any:
        return data.get(key)

    def set_(data: Mapping[str, Any], value: Any) -> dict[str, Any]:
        return {**data, key: value}

    def clear(data: Mapping[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in data.items() if k != key}

    return FieldLens(id=id or key, get=get, set=set_, clear=clear if clearable else None)
