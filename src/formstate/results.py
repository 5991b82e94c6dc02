"""Validation outcomes — tagged unions for field- and form-level results.

Field level::

    NoInput | Success | FieldError(message)

Form level::

    NoInput | Valid | FormError(message, field_errors)

All variants are frozen dataclasses, so results compare by value and can
be matched structurally::

    match field.validate():
        case FieldError(message=msg):
            show(msg)
        case Success():
            hide_error()
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class NoInput:
    """No validation has been attempted yet, or the value is not assessable."""


@dataclass(frozen=True, slots=True)
class Success:
    """The value passed every check."""


@dataclass(frozen=True, slots=True)
class FieldError:
    """The value was rejected; ``message`` comes from the rejecting rule."""

    message: str


@dataclass(frozen=True, slots=True)
class Valid:
    """Every registered field validated without error."""


@dataclass(frozen=True, slots=True)
class FormError:
    """At least one field failed.

    ``field_errors`` maps field id to that field's error message::

        {"name": "Must be at least 3 characters long."}

    The mapping is a read-only copy, so a published result cannot be
    changed by its consumers. Hashing uses ``message`` only.
    """

    message: str
    field_errors: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "field_errors", MappingProxyType(dict(self.field_errors)))


type FieldResult = NoInput | Success | FieldError
type FormResult = NoInput | Valid | FormError

NO_INPUT = NoInput()
SUCCESS = Success()
VALID = Valid()
